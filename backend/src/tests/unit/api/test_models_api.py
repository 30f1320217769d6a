"""
API tests for the model endpoints.
"""

import pytest

API = "/api/v1/models"


class TestModelCrud:
    @pytest.mark.asyncio
    async def test_create_and_read(self, api_client, seed) -> None:
        provider = await seed.provider()

        response = await api_client.post(
            API,
            json={
                "identifier": "gpt-4o",
                "name": "GPT-4o",
                "provider_uid": provider.uid,
                "model_id": "gpt-4o",
                "context_length": 128000,
                "capabilities": ["chat", "vision"],
            },
        )

        assert response.status_code == 201
        model = response.json()["model"]
        assert model["providerIdentifier"] == "openai-main"
        assert model["contextLength"] == 128000
        assert model["capabilities"] == ["chat", "vision"]
        assert model["isDefault"] is False

        fetched = await api_client.get(f"{API}/{model['uid']}")
        assert fetched.json()["model"]["modelId"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_create_for_unknown_provider(self, api_client) -> None:
        response = await api_client.post(
            API, json={"identifier": "x", "name": "X", "provider_uid": 999, "model_id": "x"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Provider not found"

    @pytest.mark.asyncio
    async def test_invalid_capability_is_a_validation_error(self, api_client, seed) -> None:
        provider = await seed.provider()
        response = await api_client.post(
            API,
            json={"identifier": "x", "name": "X", "provider_uid": provider.uid, "model_id": "x", "capabilities": ["telepathy"]},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"].startswith("capabilities.0:")


class TestModelActions:
    @pytest.mark.asyncio
    async def test_set_default_moves_the_flag(self, api_client, seed) -> None:
        provider = await seed.provider()
        first = await seed.model(provider, "gpt-4o", is_default=True)
        second = await seed.model(provider, "gpt-4o-mini")

        response = await api_client.post(f"{API}/set-default", data={"uid": str(second.uid)})
        assert response.json() == {"success": True}

        models = {m["identifier"]: m for m in (await api_client.get(API)).json()["models"]}
        assert models["gpt-4o-mini"]["isDefault"] is True
        assert models["gpt-4o"]["isDefault"] is False
        assert first.uid == models["gpt-4o"]["uid"]

    @pytest.mark.asyncio
    async def test_set_default_on_inactive_model(self, api_client, seed) -> None:
        provider = await seed.provider()
        model = await seed.model(provider, is_active=False)

        response = await api_client.post(f"{API}/set-default", data={"uid": str(model.uid)})
        assert response.status_code == 400
        assert response.json()["error"] == "Cannot set an inactive model as default"

    @pytest.mark.asyncio
    async def test_by_provider(self, api_client, seed) -> None:
        provider = await seed.provider()
        await seed.model(provider, "gpt-4o")
        await seed.model(provider, "old", is_active=False)

        response = await api_client.post(f"{API}/by-provider", data={"providerUid": str(provider.uid)})
        assert [m["modelId"] for m in response.json()["models"]] == ["gpt-4o"]

    @pytest.mark.asyncio
    async def test_model_test(self, api_client, seed, provider_api) -> None:
        provider = await seed.provider()
        model = await seed.model(provider)
        provider_api.chat_reply(content="OK", prompt_tokens=4, completion_tokens=1)

        response = await api_client.post(f"{API}/test", data={"uid": str(model.uid)})

        assert response.json() == {
            "success": True,
            "message": "Model responded: OK",
            "content": "OK",
            "model": "gpt-4o",
            "usage": {"promptTokens": 4, "completionTokens": 1, "totalTokens": 5},
        }

    @pytest.mark.asyncio
    async def test_model_test_upstream_failure(self, api_client, seed, provider_api) -> None:
        provider = await seed.provider()
        model = await seed.model(provider)
        provider_api.reply("/chat/completions", status_code=401, json={})

        response = await api_client.post(f"{API}/test", data={"uid": str(model.uid)})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Invalid API key or authentication failed"}

    @pytest.mark.asyncio
    async def test_fetch_available_and_detect_limits(self, api_client, seed, provider_api) -> None:
        provider = await seed.provider("router", adapter_type="openrouter")
        provider_api.reply(
            "/models",
            json={
                "data": [
                    {
                        "id": "anthropic/claude-3.5-sonnet",
                        "name": "Claude 3.5 Sonnet",
                        "context_length": 200000,
                        "top_provider": {"max_completion_tokens": 8192},
                    }
                ]
            },
        )

        available = (await api_client.post(f"{API}/fetch-available", data={"providerUid": str(provider.uid)})).json()
        assert available["providerName"] == "Router"
        assert available["models"][0]["contextLength"] == 200000

        limits = await api_client.post(
            f"{API}/detect-limits",
            data={"providerUid": str(provider.uid), "modelId": "anthropic/claude-3.5-sonnet"},
        )
        assert limits.json()["maxOutputTokens"] == 8192

        unknown = await api_client.post(
            f"{API}/detect-limits", data={"providerUid": str(provider.uid), "modelId": "nope"}
        )
        assert unknown.status_code == 404

    @pytest.mark.asyncio
    async def test_detect_limits_requires_model_id(self, api_client, seed) -> None:
        provider = await seed.provider()
        response = await api_client.post(f"{API}/detect-limits", data={"providerUid": str(provider.uid)})
        assert response.status_code == 400
        assert response.json()["error"] == "No model ID specified"


class TestModelStateEndpoints:
    @pytest.mark.asyncio
    async def test_four_toggles_return_to_start(self, api_client, seed) -> None:
        provider = await seed.provider()
        model = await seed.model(provider)

        replies = [
            (await api_client.post(f"{API}/toggle-active", data={"uid": str(model.uid)})).json() for _ in range(4)
        ]

        assert replies == [
            {"success": True, "isActive": False},
            {"success": True, "isActive": True},
            {"success": True, "isActive": False},
            {"success": True, "isActive": True},
        ]
        assert (await api_client.get(f"{API}/{model.uid}")).json()["model"]["isActive"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("uid", ["", "abc", "-1", "²", "99999999999999999999"])
    async def test_malformed_uid_is_rejected(self, api_client, seed, uid) -> None:
        provider = await seed.provider()
        model = await seed.model(provider, is_default=True)

        for action in ("toggle-active", "set-default"):
            response = await api_client.post(f"{API}/{action}", data={"uid": uid})
            assert response.status_code == 400
            assert response.json() == {"success": False, "error": "No model UID specified"}

        unchanged = (await api_client.get(f"{API}/{model.uid}")).json()["model"]
        assert unchanged["isActive"] is True
        assert unchanged["isDefault"] is True

    @pytest.mark.asyncio
    async def test_out_of_range_path_uid(self, api_client) -> None:
        response = await api_client.get(f"{API}/99999999999999999999")
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "No model UID specified"}
