"""
Provider service.

CRUD for providers plus the calls that reach out to a provider: connection
test, remote model listing and limit detection.
"""

from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import unit_of_work
from ..core.encryption import get_encryption_service
from ..core.exceptions import (
    DuplicateIdentifierError,
    EntityNotFoundError,
    LLMError,
    NotFoundError,
    ValidationError,
)
from ..core.logging import get_logger
from ..llm.client import LLMClient
from ..models import AdapterType, Provider
from ..schemas.model import DetectedLimits
from ..schemas.provider import AvailableModel, ConnectionTestResult, ProviderCreate, ProviderUpdate
from .providers.adapter_base import get_adapter_from_provider
from .repositories import ProviderRepository

logger = get_logger(__name__)

PROVIDER_UNAVAILABLE_MESSAGE = "Provider is not available (API key may be missing)"


class ProviderService:
    """Service for managing LLM providers."""

    def __init__(self, db: AsyncSession, http_client: Optional[httpx.AsyncClient] = None):
        self.db = db
        self.http_client = http_client
        self.repository = ProviderRepository(db)

    async def get_provider(self, uid: int) -> Provider:
        provider = await self.repository.find_by_uid(uid)
        if provider is None:
            raise EntityNotFoundError("provider", uid)
        return provider

    async def list_providers(self, active_only: bool = False) -> list[Provider]:
        if active_only:
            return await self.repository.find_active()
        return await self.repository.find_all()

    async def find_highest_priority(self) -> Optional[Provider]:
        return await self.repository.find_highest_priority()

    def _check_endpoint(self, adapter_type: AdapterType, endpoint_url: Optional[str]) -> None:
        if not endpoint_url and adapter_type.default_endpoint is None:
            raise ValidationError(f"Adapter type '{adapter_type.value}' requires an endpoint URL")

    async def create_provider(self, data: ProviderCreate) -> Provider:
        self._check_endpoint(data.adapter_type, data.endpoint_url)
        async with unit_of_work(self.db):
            if not await self.repository.is_identifier_unique(data.identifier):
                raise DuplicateIdentifierError("provider", data.identifier)

            fields = data.model_dump(exclude={"api_key"})
            fields["adapter_type"] = data.adapter_type.value
            provider = Provider(**fields)
            if data.api_key:
                provider.api_key = get_encryption_service().encrypt(data.api_key)
            await self.repository.add(provider)

        logger.info(
            "Created provider",
            extra={"uid": provider.uid, "identifier": provider.identifier, "adapter_type": provider.adapter_type},
        )
        return provider

    async def update_provider(self, uid: int, data: ProviderUpdate) -> Provider:
        changes = data.model_dump(exclude_unset=True)
        async with unit_of_work(self.db):
            provider = await self.get_provider(uid)

            identifier = changes.get("identifier")
            if identifier and not await self.repository.is_identifier_unique(identifier, exclude_uid=uid):
                raise DuplicateIdentifierError("provider", identifier)

            if "api_key" in changes:
                api_key = changes.pop("api_key")
                provider.api_key = get_encryption_service().encrypt(api_key) if api_key else None
            if changes.get("adapter_type") is not None:
                changes["adapter_type"] = AdapterType(changes["adapter_type"]).value
            if "endpoint_url" in changes:
                endpoint = (changes["endpoint_url"] or "").strip()
                changes["endpoint_url"] = endpoint.rstrip("/") or None

            for key, value in changes.items():
                setattr(provider, key, value)

            self._check_endpoint(provider.adapter, provider.endpoint_url)
            await self.repository.save(provider)

        logger.info("Updated provider", extra={"uid": uid, "fields": ",".join(sorted(changes))})
        return provider

    async def delete_provider(self, uid: int) -> None:
        async with unit_of_work(self.db):
            provider = await self.get_provider(uid)
            await self.repository.delete(provider)
        logger.info("Deleted provider", extra={"uid": uid})

    def _client(self, provider: Provider) -> LLMClient:
        return LLMClient(provider, http_client=self.http_client)

    async def test_connection(self, uid: int) -> ConnectionTestResult:
        """List the provider's remote models to verify endpoint and credentials."""
        provider = await self.get_provider(uid)

        adapter = get_adapter_from_provider(provider)
        if not adapter.is_available():
            return ConnectionTestResult(success=False, message=PROVIDER_UNAVAILABLE_MESSAGE)

        try:
            models = await self._client(provider).discover_available_models()
        except LLMError as e:
            logger.warning(f"Connection test failed for provider {provider.identifier}: {e.message}")
            return ConnectionTestResult(success=False, message=f"Connection failed: {e.message}")

        model_ids = [m["id"] for m in models]
        return ConnectionTestResult(
            success=True,
            message=f"Connection successful. Found {len(model_ids)} models.",
            models=model_ids,
        )

    async def fetch_available_models(self, uid: int) -> tuple[Provider, list[AvailableModel]]:
        provider = await self.get_provider(uid)
        models = await self._client(provider).discover_available_models()
        return provider, [AvailableModel(**m) for m in models]

    async def detect_limits(self, uid: int, model_id: str) -> DetectedLimits:
        _, models = await self.fetch_available_models(uid)
        for model in models:
            if model.id == model_id:
                return DetectedLimits(
                    context_length=model.context_length,
                    max_output_tokens=model.max_output_tokens,
                    capabilities=model.capabilities,
                )
        raise NotFoundError(f"Model \"{model_id}\" not found in provider's available models")
