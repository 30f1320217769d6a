"""
API tests for the quick-test endpoint.
"""

import json

import pytest

API = "/api/v1/quick-test"


@pytest.mark.asyncio
async def test_missing_provider(api_client) -> None:
    response = await api_client.post(API, data={"provider": "", "prompt": "Hi"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No provider specified"}


@pytest.mark.asyncio
async def test_unknown_provider(api_client) -> None:
    response = await api_client.post(API, data={"provider": "ghost"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": 'Provider "ghost" not found'}


@pytest.mark.asyncio
async def test_provider_without_models(api_client, seed) -> None:
    await seed.provider()
    response = await api_client.post(API, data={"provider": "openai-main"})
    assert response.status_code == 400
    assert response.json()["error"] == "Provider has no active model"


@pytest.mark.asyncio
async def test_success_uses_default_prompt(api_client, seed, provider_api) -> None:
    provider = await seed.provider()
    await seed.model(provider, "gpt-4o-mini")
    provider_api.chat_reply(content="Hello! How can I help?", model="gpt-4o-mini", prompt_tokens=10, completion_tokens=6)

    response = await api_client.post(API, data={"provider": "openai-main"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "content": "Hello! How can I help?",
        "model": "gpt-4o-mini",
        "usage": {"promptTokens": 10, "completionTokens": 6, "totalTokens": 16},
    }
    sent = json.loads(provider_api.requests[-1].content)
    assert sent["messages"] == [{"role": "user", "content": "Hello, please respond with a brief greeting."}]


@pytest.mark.asyncio
async def test_upstream_failure_is_500_without_retry(api_client, seed, provider_api) -> None:
    provider = await seed.provider(max_retries=3)
    await seed.model(provider)
    provider_api.reply("/chat/completions", status_code=502, json={"error": {"message": "bad gateway"}})

    response = await api_client.post(API, data={"provider": "openai-main", "prompt": "Ping"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "LLM provider error: HTTP error 502: bad gateway"}
    assert len(provider_api.requests) == 1
