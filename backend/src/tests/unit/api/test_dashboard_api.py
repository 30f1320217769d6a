"""
API tests for the dashboard, health check and cross-cutting response behavior.
"""

import pytest


@pytest.mark.asyncio
async def test_dashboard_summary(api_client, seed) -> None:
    openai = await seed.provider("openai-main")
    await seed.provider("claude", adapter_type="anthropic", is_active=False)
    model = await seed.model(openai, is_default=True)
    await seed.configuration(model, "main", is_default=True)
    await seed.task(None, "a", category="developer")
    await seed.task(None, "b", category="developer", is_active=False)

    response = await api_client.get("/api/v1/dashboard")

    body = response.json()
    assert body["success"] is True
    assert body["counts"] == {
        "provider": {"active": 1, "total": 2},
        "model": {"active": 1, "total": 1},
        "configuration": {"active": 1, "total": 1},
        "task": {"active": 1, "total": 2},
    }
    assert body["defaultModel"]["identifier"] == "gpt-4o"
    assert body["defaultConfiguration"]["identifier"] == "main"
    assert body["providersByAdapter"] == {"anthropic": 1, "openai": 1}
    assert body["tasksByCategory"] == {"developer": 2}


@pytest.mark.asyncio
async def test_empty_dashboard(api_client) -> None:
    body = (await api_client.get("/api/v1/dashboard")).json()
    assert body["defaultModel"] is None
    assert body["defaultConfiguration"] is None
    assert body["counts"]["provider"] == {"active": 0, "total": 0}


@pytest.mark.asyncio
async def test_health(api_client) -> None:
    response = await api_client.get("/api/v1/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"]["status"] == "healthy"


@pytest.mark.asyncio
async def test_request_id_is_echoed(api_client) -> None:
    response = await api_client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(api_client) -> None:
    response = await api_client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


@pytest.mark.asyncio
async def test_path_uid_must_be_integer(api_client) -> None:
    response = await api_client.get("/api/v1/providers/abc")
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("path.uid:")
