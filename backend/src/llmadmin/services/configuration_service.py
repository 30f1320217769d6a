"""
Configuration service.

CRUD for configurations, lookup by identifier, the default configuration,
per-provider model options and the configuration test.
"""

from typing import Any, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import get_settings_instance
from ..core.database import unit_of_work
from ..core.exceptions import (
    DuplicateIdentifierError,
    EntityNotFoundError,
    NotFoundError,
    ValidationError,
)
from ..core.logging import get_logger
from ..llm.client import LLMResponse
from ..models import Configuration
from ..schemas.configuration import ConfigurationCreate, ConfigurationUpdate
from ..schemas.model import ModelListItem
from .completion_service import CompletionService
from .providers.adapter_base import get_adapter_from_provider
from .repositories import ConfigurationRepository, ModelRepository, ProviderRepository

logger = get_logger(__name__)


class ConfigurationService:
    """Service for managing generation configurations."""

    def __init__(
        self,
        db: AsyncSession,
        http_client: Optional[httpx.AsyncClient] = None,
        completion_service: Optional[CompletionService] = None,
    ):
        self.db = db
        self.repository = ConfigurationRepository(db)
        self.models = ModelRepository(db)
        self.providers = ProviderRepository(db)
        self.completion_service = completion_service or CompletionService(http_client=http_client)

    async def get_by_uid(self, uid: int) -> Configuration:
        configuration = await self.repository.find_by_uid(uid)
        if configuration is None:
            raise EntityNotFoundError("configuration", uid)
        return configuration

    async def get_configuration(self, identifier: str) -> Configuration:
        """Active configuration by identifier; inactive ones count as missing."""
        configuration = await self.repository.find_active_by_identifier(identifier)
        if configuration is None:
            raise NotFoundError(f'Configuration "{identifier}" not found')
        return configuration

    async def get_default_configuration(self) -> Configuration:
        configuration = await self.repository.find_default()
        if configuration is None:
            raise NotFoundError("No default configuration set")
        return configuration

    async def list_configurations(self, active_only: bool = False) -> list[Configuration]:
        if active_only:
            return await self.repository.find_active()
        return await self.repository.find_all()

    async def _require_model(self, model_uid: int) -> None:
        if await self.models.find_by_uid(model_uid) is None:
            raise EntityNotFoundError("model", model_uid)

    async def create_configuration(self, data: ConfigurationCreate) -> Configuration:
        async with unit_of_work(self.db):
            if not await self.repository.is_identifier_unique(data.identifier):
                raise DuplicateIdentifierError("configuration", data.identifier)
            if data.model_uid is not None:
                await self._require_model(data.model_uid)

            configuration = Configuration(**data.model_dump())
            await self.repository.add(configuration)

        logger.info("Created configuration", extra={"uid": configuration.uid, "identifier": configuration.identifier})
        return configuration

    async def update_configuration(self, uid: int, data: ConfigurationUpdate) -> Configuration:
        changes = data.model_dump(exclude_unset=True)
        async with unit_of_work(self.db):
            configuration = await self.get_by_uid(uid)

            identifier = changes.get("identifier")
            if identifier and not await self.repository.is_identifier_unique(identifier, exclude_uid=uid):
                raise DuplicateIdentifierError("configuration", identifier)
            if changes.get("model_uid") is not None:
                await self._require_model(changes["model_uid"])

            for key, value in changes.items():
                if value is None and key not in ("description", "model_uid", "system_prompt"):
                    continue
                setattr(configuration, key, value)

            if not configuration.is_active and configuration.is_default:
                configuration.is_default = False
            await self.repository.save(configuration)

        logger.info("Updated configuration", extra={"uid": uid})
        return configuration

    async def delete_configuration(self, uid: int) -> None:
        async with unit_of_work(self.db):
            configuration = await self.get_by_uid(uid)
            await self.repository.delete(configuration)
        logger.info("Deleted configuration", extra={"uid": uid})

    async def get_models(self, provider_identifier: str) -> dict[str, Any]:
        """Registered active models of an available provider, plus its default model id."""
        provider = await self.providers.find_active_by_identifier(provider_identifier)
        if provider is None or not get_adapter_from_provider(provider).is_available():
            raise NotFoundError("Provider not available")

        models = await self.models.find_by_provider(provider.uid)
        default_model = next((m for m in models if m.is_default), models[0] if models else None)
        return {
            "models": [ModelListItem.model_validate(m) for m in models],
            "default_model": default_model.model_id if default_model else None,
        }

    async def test_configuration(self, uid: int) -> LLMResponse:
        configuration = await self.get_by_uid(uid)
        if configuration.model is None or configuration.model.provider is None:
            raise ValidationError("Configuration has no model assigned")
        prompt = get_settings_instance().quick_test_default_prompt
        return await self.completion_service.complete_with_configuration(prompt, configuration)
