"""Unit tests for request ID, timing and security header middleware."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from llmadmin.core.middleware import RequestIDMiddleware, SecurityHeadersMiddleware, TimingMiddleware


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_request(path: str, method: str = "GET", headers: list[tuple[bytes, bytes]] | None = None) -> Request:
    """Build a minimal Starlette Request."""
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": headers or [],
        "root_path": "",
    }
    return Request(scope)


async def _ok_handler(request: Request) -> Response:
    """Dummy call_next that always returns 200."""
    return JSONResponse(status_code=200, content={"ok": True})


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestRequestIDMiddleware:
    @pytest.mark.asyncio
    async def test_generates_request_id(self) -> None:
        middleware = RequestIDMiddleware(app=AsyncMock())
        request = _make_request("/api/v1/providers")
        response = await middleware.dispatch(request, _ok_handler)
        assert response.headers["X-Request-ID"]
        assert request.state.request_id == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_keeps_incoming_request_id(self) -> None:
        middleware = RequestIDMiddleware(app=AsyncMock())
        request = _make_request("/api/v1/providers", headers=[(b"x-request-id", b"req-123")])
        response = await middleware.dispatch(request, _ok_handler)
        assert response.headers["X-Request-ID"] == "req-123"


class TestTimingMiddleware:
    @pytest.mark.asyncio
    async def test_sets_response_time_header(self) -> None:
        middleware = TimingMiddleware(app=AsyncMock())
        response = await middleware.dispatch(_make_request("/api/v1/health"), _ok_handler)
        assert response.headers["X-Response-Time"].endswith("s")


class TestSecurityHeadersMiddleware:
    @pytest.mark.asyncio
    async def test_sets_security_headers(self) -> None:
        middleware = SecurityHeadersMiddleware(app=AsyncMock())
        response = await middleware.dispatch(_make_request("/api/v1/health"), _ok_handler)
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
