"""
LLM client for the LLM admin backend.

This module sends one-shot chat completions and model-listing requests to
any registered provider adapter, translating transport and HTTP failures
into the LLM exception family.
"""

import asyncio
import json
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
import jmespath

from ..core.exceptions import (
    LLMAuthenticationError,
    LLMConfigurationError,
    LLMProviderError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from ..core.http_client import get_http_client, provider_timeout
from ..core.logging import get_logger
from ..models.provider import Provider
from ..services.providers.adapter_base import BaseProviderAdapter, get_adapter_from_provider

logger = get_logger(__name__)


class LLMResponse:
    """Response object for LLM completions."""

    def __init__(
        self,
        content: str,
        model: str,
        provider: str,
        usage: Dict[str, int],
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.content = content
        self.model = model
        self.provider = provider
        self.usage = usage
        self.metadata = metadata or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert response to dictionary."""
        return {
            "content": self.content,
            "model": self.model,
            "provider": self.provider,
            "usage": self.usage,
            "metadata": self.metadata,
            "timestamp": self.timestamp.isoformat(),
        }


class LLMClient:
    """Provider-agnostic client for one-shot completions and model discovery."""

    def __init__(
        self,
        provider: Provider,
        http_client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        max_retries: Optional[int] = None,
    ):
        self.provider = provider
        self.provider_adapter: BaseProviderAdapter = get_adapter_from_provider(provider, api_key=api_key)
        self._http_client = http_client

        self._timeout = float(provider.api_timeout or 30)

        # Retry configuration; total attempts include the initial request
        retries = provider.max_retries if max_retries is None else max_retries
        self._max_attempts = max(int(retries or 0), 0) + 1
        self._retry_base_delay = 0.5  # seconds
        self._retry_max_delay = 4.0  # seconds

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = await get_http_client()
        return self._http_client

    def _url(self, endpoint: str) -> str:
        base_url = self.provider_adapter.get_api_base_url()
        if not base_url:
            raise LLMConfigurationError(f'Provider "{self.provider.identifier}" has no endpoint URL configured')
        return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def _build_timeout(self, request_timeout: Optional[float]) -> httpx.Timeout:
        return provider_timeout(request_timeout or self._timeout)

    async def chat_completion(
        self,
        messages: List[Dict[str, str]],
        model: str,
        llm_params: Optional[Dict[str, Any]] = None,
        request_timeout: Optional[float] = None,
    ) -> LLMResponse:
        """
        Run one non-streaming chat completion.

        Args:
            messages: Chat messages as ``{"role", "content"}`` dicts
            model: Provider-specific model id
            llm_params: Generation parameters (temperature, max_tokens, ...)
            request_timeout: Overrides the provider's api_timeout

        Returns:
            LLMResponse with content, model and token usage
        """
        payload = self.provider_adapter.build_payload(messages, model, llm_params or {})
        endpoint = self._url(self.provider_adapter.get_chat_endpoint(model))

        try:
            data = await self._complete_with_retry(endpoint, payload, model, request_timeout)
            result = self.provider_adapter.handle_provider_completion(data, model)
        except httpx.TimeoutException as e:
            logger.error(f"LLM request timeout for provider {self.provider.identifier}: {e}")
            raise LLMTimeoutError(f"Request timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            self._handle_http_status_error(e, model)
        except httpx.RequestError as e:
            logger.error(f"LLM connection error for provider {self.provider.identifier}: {e}")
            raise LLMProviderError(f"Connection error: {e}") from e
        except (ValueError, TypeError, AttributeError, jmespath.exceptions.JMESPathError) as e:
            logger.error(f"Malformed reply from provider {self.provider.identifier}: {e}")
            raise LLMProviderError(f"Malformed provider response: {e}") from e

        logger.info(
            "LLM completion finished",
            extra={"provider": self.provider.identifier, "model": result.model, "usage": result.usage},
        )
        return LLMResponse(
            content=result.content,
            model=result.model,
            provider=self.provider.identifier,
            usage=result.usage,
            metadata={"finish_reason": result.finish_reason},
        )

    async def complete(
        self,
        prompt: str,
        model: str,
        system_prompt: Optional[str] = None,
        llm_params: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        """Send a single user prompt, optionally preceded by a system prompt."""
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return await self.chat_completion(messages, model, llm_params=llm_params)

    async def _complete_with_retry(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        model: str,
        request_timeout: Optional[float],
    ) -> Dict[str, Any]:
        """Execute the completion with retry/backoff on 5xx replies."""
        client = await self._client()
        attempt = 0
        while True:
            logger.debug(
                "llm.request provider=%s endpoint=%s payload=%s",
                self.provider.identifier,
                endpoint,
                str(payload)[:4000],
            )
            try:
                response = await client.post(
                    endpoint,
                    json=payload,
                    headers=self.provider_adapter.build_headers(),
                    timeout=self._build_timeout(request_timeout),
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code if e.response is not None else None
                if not self._should_retry_http_error(status_code, attempt):
                    raise
                delay = self._get_retry_delay(attempt)
                logger.warning(
                    "Retrying LLM request for provider %s after HTTP %s (attempt=%s/%s, delay=%.2fs)",
                    self.provider.identifier,
                    status_code,
                    attempt + 1,
                    self._max_attempts,
                    delay,
                )
                await asyncio.sleep(delay)
                attempt += 1

    def _should_retry_http_error(self, status_code: Optional[int], attempt: int) -> bool:
        """Return True if the HTTP error is retryable for the current attempt."""
        if status_code is None:
            return False
        if status_code < 500 or status_code >= 600:
            return False
        # attempt is zero-indexed
        return (attempt + 1) < self._max_attempts

    def _get_retry_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay with jitter."""
        exponential = min(self._retry_base_delay * (2**attempt), self._retry_max_delay)
        return exponential + random.uniform(0, self._retry_base_delay)

    def _stringify_error_body(self, body: Any) -> str:
        """Convert provider error body to a compact string for logging."""
        if body is None:
            return ""
        if isinstance(body, (dict, list)):
            try:
                return json.dumps(body, separators=(",", ":"))
            except (TypeError, ValueError):
                return str(body)
        return str(body)

    def _extract_http_error_details(self, e: httpx.HTTPStatusError, model: str) -> Dict[str, Any]:
        """Normalize useful fields from an HTTP error response."""
        response = e.response
        status_code = response.status_code if response is not None else None
        body: Any = None
        provider_msg = None

        if response is not None:
            try:
                body = response.json()
            except ValueError:
                body = response.text or None
            if isinstance(body, dict):
                error_section = body.get("error")
                if isinstance(error_section, dict):
                    provider_msg = error_section.get("message") or error_section.get("status")
                elif isinstance(error_section, str):
                    provider_msg = error_section
                provider_msg = provider_msg or body.get("message") or body.get("detail")

        return {
            "status": status_code,
            "endpoint": str(e.request.url) if getattr(e, "request", None) is not None else None,
            "request_id": response.headers.get("x-request-id") if response is not None else None,
            "provider_message": provider_msg,
            "body": body,
            "model": model,
        }

    def _handle_http_status_error(
        self,
        e: httpx.HTTPStatusError,
        model: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Translate HTTP errors into domain errors with rich logging."""
        details = details or self._extract_http_error_details(e, model)
        status_code = details.get("status")
        provider_msg = details.get("provider_message")

        if status_code == 401:
            logger.error(f"LLM authentication error for provider {self.provider.identifier}")
            raise LLMAuthenticationError("Invalid API key or authentication failed", details=details) from e
        if status_code == 429:
            logger.error(f"LLM rate limit exceeded for provider {self.provider.identifier}")
            raise LLMRateLimitError("Rate limit exceeded", details=details) from e
        if status_code == 400:
            logger.error(
                f"LLM configuration error (400) for provider {self.provider.identifier}: {provider_msg or e}"
            )
            message = "Provider rejected request (HTTP 400)"
            if provider_msg:
                message = f"{message}: {provider_msg}"
            raise LLMConfigurationError(message, details=details) from e

        logger.error(
            "LLM upstream error for provider %s: HTTP %s (endpoint=%s, body=%s)",
            self.provider.identifier,
            status_code,
            details.get("endpoint"),
            self._stringify_error_body(details.get("body")),
        )
        if status_code is not None:
            message = f"HTTP error {status_code}"
            if provider_msg:
                message = f"{message}: {provider_msg}"
            raise LLMProviderError(message, details=details) from e
        raise LLMProviderError("HTTP error", details=details) from e

    async def discover_available_models(self) -> List[Dict[str, Any]]:
        """
        Discover available models from the provider's API.

        Returns:
            List of ``{id, name, context_length, max_output_tokens, capabilities}``
        """
        client = await self._client()
        endpoint = self._url(self.provider_adapter.get_models_endpoint())
        try:
            response = await client.get(
                endpoint,
                headers=self.provider_adapter.build_headers(),
                timeout=self._build_timeout(None),
            )
            response.raise_for_status()
            payload = response.json()
            entries = jmespath.search(self.provider_adapter.get_model_information_path(), payload) or []
        except httpx.TimeoutException as e:
            logger.error(f"Model discovery timeout for provider {self.provider.identifier}: {e}")
            raise LLMTimeoutError(f"Request timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            self._handle_http_status_error(e, "")
        except httpx.RequestError as e:
            logger.error(f"Model discovery connection error for provider {self.provider.identifier}: {e}")
            raise LLMProviderError(f"Connection error: {e}") from e
        except (ValueError, jmespath.exceptions.JMESPathError) as e:
            raise LLMProviderError(f"Malformed model listing: {e}") from e

        models = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                continue
            model_id = self.provider_adapter.normalize_model_id(str(entry["id"]))
            models.append(
                {
                    "id": model_id,
                    "name": str(entry.get("name") or model_id),
                    "context_length": int(entry.get("context_length") or 0),
                    "max_output_tokens": int(entry.get("max_output_tokens") or 0),
                    "capabilities": self.provider_adapter.infer_capabilities(model_id),
                }
            )
        logger.debug(f"Discovered {len(models)} models for provider {self.provider.identifier}")
        return models

    def __repr__(self) -> str:
        return f"<LLMClient(provider='{self.provider.identifier}', adapter='{self.provider.adapter_type}')>"
