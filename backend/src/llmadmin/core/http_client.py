"""Outbound HTTP for provider calls.

One pooled httpx.AsyncClient serves every provider. Per-request timeouts are
derived from the provider's ``api_timeout`` by `provider_timeout`.
"""

from typing import Optional

import httpx

from .config import get_settings_instance
from .logging import get_logger

logger = get_logger(__name__)


def provider_timeout(api_timeout: Optional[float] = None) -> httpx.Timeout:
    """Timeout for one provider request.

    ``api_timeout`` bounds reading the reply (falling back to the global read
    timeout). Connecting, writing and waiting for a pooled connection never
    take longer than the global timeout.
    """
    settings = get_settings_instance()
    read = float(api_timeout or settings.llm_read_timeout)
    connect = min(float(settings.llm_global_timeout), read)
    return httpx.Timeout(connect=connect, read=read, write=connect, pool=connect)


class OutboundClientPool:
    """Lazily opened shared client; reopened if it was closed."""

    def __init__(self, max_connections: int = 100, max_keepalive_connections: int = 20):
        self._client: Optional[httpx.AsyncClient] = None
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
            keepalive_expiry=30.0,
        )

    @property
    def is_open(self) -> bool:
        return self._client is not None and not self._client.is_closed

    async def get_client(self) -> httpx.AsyncClient:
        if not self.is_open:
            settings = get_settings_instance()
            self._client = httpx.AsyncClient(
                limits=self._limits,
                timeout=provider_timeout(),
                follow_redirects=True,
                headers={"User-Agent": f"llmadmin/{settings.version}"},
            )
            logger.debug("Opened outbound HTTP client", extra={"max_connections": self._limits.max_connections})
        return self._client

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is not None and not client.is_closed:
            await client.aclose()
            logger.debug("Closed outbound HTTP client")


outbound_pool = OutboundClientPool()


async def get_http_client() -> httpx.AsyncClient:
    return await outbound_pool.get_client()


async def close_http_client() -> None:
    """Close the shared client; called from the application lifespan."""
    await outbound_pool.close()
