"""
Unit tests for ModelService.
"""

import json

import pytest

from llmadmin.core.exceptions import DuplicateIdentifierError, EntityNotFoundError, LLMAuthenticationError
from llmadmin.schemas.model import ModelCreate, ModelUpdate
from llmadmin.services.configuration_service import ConfigurationService
from llmadmin.services.model_service import MODEL_TEST_PROMPT, ModelService


@pytest.fixture
def service(db_session, outbound_client) -> ModelService:
    return ModelService(db_session, http_client=outbound_client)


class TestModelCrud:
    @pytest.mark.asyncio
    async def test_create_model(self, service, seed) -> None:
        provider = await seed.provider()
        model = await service.create_model(
            ModelCreate(
                identifier="gpt-4o",
                name="GPT-4o",
                provider_uid=provider.uid,
                model_id="gpt-4o",
                capabilities=["chat", "vision", "chat"],
                max_output_tokens=4096,
            )
        )
        assert model.capabilities == ["chat", "vision"]
        assert model.provider_identifier == "openai-main"
        assert model.is_default is False

    @pytest.mark.asyncio
    async def test_create_for_unknown_provider(self, service) -> None:
        with pytest.raises(EntityNotFoundError, match="Provider not found"):
            await service.create_model(ModelCreate(identifier="m", name="M", provider_uid=77, model_id="m"))

    @pytest.mark.asyncio
    async def test_duplicate_identifier(self, service, seed) -> None:
        provider = await seed.provider()
        await seed.model(provider, "gpt-4o")
        with pytest.raises(DuplicateIdentifierError):
            await service.create_model(
                ModelCreate(identifier="gpt-4o", name="Again", provider_uid=provider.uid, model_id="gpt-4o")
            )

    @pytest.mark.asyncio
    async def test_deactivating_default_via_update_clears_flag(self, service, seed) -> None:
        provider = await seed.provider()
        model = await seed.model(provider, is_default=True)

        updated = await service.update_model(model.uid, ModelUpdate(is_active=False))
        assert updated.is_active is False
        assert updated.is_default is False

    @pytest.mark.asyncio
    async def test_delete_detaches_configurations(self, service, seed, db_session) -> None:
        provider = await seed.provider()
        model = await seed.model(provider)
        configuration = await seed.configuration(model)

        await service.delete_model(model.uid)

        reloaded = await ConfigurationService(db_session).get_by_uid(configuration.uid)
        assert reloaded.model_uid is None

    @pytest.mark.asyncio
    async def test_get_by_provider(self, service, seed) -> None:
        provider = await seed.provider()
        await seed.model(provider, "gpt-4o", is_default=True)
        await seed.model(provider, "retired", is_active=False)

        items = await service.get_by_provider(provider.uid)
        assert [(i.identifier, i.is_default) for i in items] == [("gpt-4o", True)]


class TestModelProbe:
    @pytest.mark.asyncio
    async def test_one_word_prompt(self, service, seed, provider_api) -> None:
        provider = await seed.provider()
        model = await seed.model(provider, max_output_tokens=50)
        provider_api.chat_reply(content="Hello")

        response = await service.test_model(model.uid)

        assert response.content == "Hello"
        sent = json.loads(provider_api.requests[-1].content)
        assert sent["messages"] == [{"role": "user", "content": MODEL_TEST_PROMPT}]
        assert sent["temperature"] == 0.0
        # 100 requested, clamped to the model's output limit
        assert sent["max_tokens"] == 50

    @pytest.mark.asyncio
    async def test_authentication_failure_not_retried(self, service, seed, provider_api) -> None:
        provider = await seed.provider()
        model = await seed.model(provider)
        provider_api.reply("/chat/completions", status_code=401, json={"error": {"message": "invalid"}})

        with pytest.raises(LLMAuthenticationError):
            await service.test_model(model.uid)
        assert len(provider_api.requests) == 1
