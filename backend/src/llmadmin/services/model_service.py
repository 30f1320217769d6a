"""
Model service.

CRUD for registered models, per-provider listings and the one-word model
test.
"""

from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import unit_of_work
from ..core.exceptions import DuplicateIdentifierError, EntityNotFoundError, ValidationError
from ..core.logging import get_logger
from ..llm.client import LLMResponse
from ..models import Model
from ..schemas.model import ModelCreate, ModelListItem, ModelUpdate
from .completion_service import CompletionService
from .repositories import ModelRepository, ProviderRepository

logger = get_logger(__name__)

MODEL_TEST_PROMPT = "Respond with exactly one word: Hello"
MODEL_TEST_OPTIONS = {"max_tokens": 100, "temperature": 0.0}


class ModelService:
    """Service for managing registered models."""

    def __init__(
        self,
        db: AsyncSession,
        http_client: Optional[httpx.AsyncClient] = None,
        completion_service: Optional[CompletionService] = None,
    ):
        self.db = db
        self.repository = ModelRepository(db)
        self.providers = ProviderRepository(db)
        self.completion_service = completion_service or CompletionService(http_client=http_client)

    async def get_model(self, uid: int) -> Model:
        model = await self.repository.find_by_uid(uid)
        if model is None:
            raise EntityNotFoundError("model", uid)
        return model

    async def list_models(self, active_only: bool = False) -> list[Model]:
        if active_only:
            return await self.repository.find_active()
        return await self.repository.find_all()

    async def get_by_provider(self, provider_uid: int) -> list[ModelListItem]:
        """Active models of one provider as compact list items."""
        models = await self.repository.find_by_provider(provider_uid)
        return [ModelListItem.model_validate(m) for m in models]

    async def _require_provider(self, provider_uid: int) -> None:
        if await self.providers.find_by_uid(provider_uid) is None:
            raise EntityNotFoundError("provider", provider_uid)

    async def create_model(self, data: ModelCreate) -> Model:
        async with unit_of_work(self.db):
            if not await self.repository.is_identifier_unique(data.identifier):
                raise DuplicateIdentifierError("model", data.identifier)
            await self._require_provider(data.provider_uid)

            fields = data.model_dump(exclude={"capabilities"})
            model = Model(**fields)
            model.capabilities = [c.value for c in data.capabilities]
            await self.repository.add(model)

        logger.info("Created model", extra={"uid": model.uid, "identifier": model.identifier})
        return model

    async def update_model(self, uid: int, data: ModelUpdate) -> Model:
        changes = data.model_dump(exclude_unset=True)
        async with unit_of_work(self.db):
            model = await self.get_model(uid)

            identifier = changes.get("identifier")
            if identifier and not await self.repository.is_identifier_unique(identifier, exclude_uid=uid):
                raise DuplicateIdentifierError("model", identifier)
            if changes.get("provider_uid") is not None:
                await self._require_provider(changes["provider_uid"])

            if "capabilities" in changes:
                capabilities = changes.pop("capabilities") or []
                model.capabilities = [getattr(c, "value", c) for c in capabilities]
            for key, value in changes.items():
                if value is None and key in ("identifier", "name", "provider_uid", "model_id"):
                    continue
                setattr(model, key, value)

            # A deactivated model cannot stay the default
            if not model.is_active and model.is_default:
                model.is_default = False
            await self.repository.save(model)

        logger.info("Updated model", extra={"uid": uid})
        return model

    async def delete_model(self, uid: int) -> None:
        async with unit_of_work(self.db):
            model = await self.get_model(uid)
            await self.repository.delete(model)
        logger.info("Deleted model", extra={"uid": uid})

    async def test_model(self, uid: int) -> LLMResponse:
        """Ask the model for a single word to prove it is reachable."""
        model = await self.get_model(uid)
        if model.provider is None:
            raise ValidationError("Model has no provider configured")
        return await self.completion_service.complete_with_model(
            MODEL_TEST_PROMPT, model, MODEL_TEST_OPTIONS, max_retries=0
        )
