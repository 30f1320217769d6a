"""
Model API endpoints.

Covers model CRUD, default selection, per-provider listings, remote model
discovery, limit detection and the model test.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, status

from ..core.exceptions import LLMError, ValidationError
from ..core.identifiers import parse_uid
from ..core.logging import get_logger
from ..core.response import ApiResponse
from ..schemas.model import ModelCreate, ModelResponse, ModelUpdate
from ..services.completion_service import usage_from_response
from ..services.entity_manager import EntityStateManager
from ..services.model_service import ModelService
from ..services.provider_service import ProviderService
from .dependencies import get_entity_manager, get_model_service, get_provider_service

logger = get_logger(__name__)

router = APIRouter(prefix="/models", tags=["models"])


@router.post("/toggle-active")
async def toggle_model_active(
    uid: Optional[str] = Form(None),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    is_active = await manager.toggle_active("model", parse_uid(uid, "model"))
    return ApiResponse.success(isActive=is_active)


@router.post("/set-default")
async def set_default_model(
    uid: Optional[str] = Form(None),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    """Make one model the single default."""
    await manager.set_default("model", parse_uid(uid, "model"))
    return ApiResponse.success()


@router.post("/by-provider")
async def get_models_by_provider(
    provider_uid: Optional[str] = Form(None, alias="providerUid"),
    service: ModelService = Depends(get_model_service),
):
    models = await service.get_by_provider(parse_uid(provider_uid, "provider"))
    return ApiResponse.success(models=models)


@router.post("/test")
async def test_model(
    uid: Optional[str] = Form(None),
    service: ModelService = Depends(get_model_service),
):
    """Send a one-word prompt to the model."""
    try:
        response = await service.test_model(parse_uid(uid, "model"))
    except LLMError as e:
        logger.error(f"Model test failed: {e.message}")
        return ApiResponse.failure(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return ApiResponse.success(
        message=f"Model responded: {response.content}",
        content=response.content,
        model=response.model,
        usage=usage_from_response(response),
    )


@router.post("/fetch-available")
async def fetch_available_models(
    provider_uid: Optional[str] = Form(None, alias="providerUid"),
    service: ProviderService = Depends(get_provider_service),
):
    """List the models the provider advertises remotely."""
    uid = parse_uid(provider_uid, "provider")
    try:
        provider, models = await service.fetch_available_models(uid)
    except LLMError as e:
        logger.error(f"Fetching available models failed: {e.message}")
        return ApiResponse.failure(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return ApiResponse.success(providerName=provider.name, models=models)


@router.post("/detect-limits")
async def detect_model_limits(
    provider_uid: Optional[str] = Form(None, alias="providerUid"),
    model_id: Optional[str] = Form(None, alias="modelId"),
    service: ProviderService = Depends(get_provider_service),
):
    uid = parse_uid(provider_uid, "provider")
    if not model_id or not model_id.strip():
        raise ValidationError("No model ID specified")
    try:
        limits = await service.detect_limits(uid, model_id.strip())
    except LLMError as e:
        logger.error(f"Limit detection failed: {e.message}")
        return ApiResponse.failure(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return ApiResponse.success(modelId=model_id.strip(), **limits.model_dump(by_alias=True))


@router.get("")
async def list_models(
    active_only: bool = False,
    service: ModelService = Depends(get_model_service),
):
    models = await service.list_models(active_only=active_only)
    return ApiResponse.success(models=[ModelResponse.model_validate(m) for m in models])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_model(model_data: ModelCreate, service: ModelService = Depends(get_model_service)):
    model = await service.create_model(model_data)
    return ApiResponse.created(model=ModelResponse.model_validate(model))


@router.get("/{uid}")
async def get_model(uid: int, service: ModelService = Depends(get_model_service)):
    model = await service.get_model(parse_uid(uid, "model"))
    return ApiResponse.success(model=ModelResponse.model_validate(model))


@router.put("/{uid}")
async def update_model(
    uid: int,
    model_data: ModelUpdate,
    service: ModelService = Depends(get_model_service),
):
    model = await service.update_model(parse_uid(uid, "model"), model_data)
    return ApiResponse.success(model=ModelResponse.model_validate(model))


@router.delete("/{uid}")
async def delete_model(uid: int, service: ModelService = Depends(get_model_service)):
    await service.delete_model(parse_uid(uid, "model"))
    return ApiResponse.success()
