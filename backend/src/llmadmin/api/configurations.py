"""
Configuration API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, status

from ..core.exceptions import LLMError, ValidationError
from ..core.identifiers import parse_uid
from ..core.logging import get_logger
from ..core.response import ApiResponse
from ..schemas.configuration import ConfigurationCreate, ConfigurationResponse, ConfigurationUpdate
from ..services.completion_service import usage_from_response
from ..services.configuration_service import ConfigurationService
from ..services.entity_manager import EntityStateManager
from .dependencies import get_configuration_service, get_entity_manager

logger = get_logger(__name__)

router = APIRouter(prefix="/configurations", tags=["configurations"])


@router.post("/toggle-active")
async def toggle_configuration_active(
    uid: Optional[str] = Form(None),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    is_active = await manager.toggle_active("configuration", parse_uid(uid, "configuration"))
    return ApiResponse.success(isActive=is_active)


@router.post("/set-default")
async def set_default_configuration(
    uid: Optional[str] = Form(None),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    await manager.set_default("configuration", parse_uid(uid, "configuration"))
    return ApiResponse.success()


@router.post("/models")
async def get_provider_models(
    provider: Optional[str] = Form(None),
    service: ConfigurationService = Depends(get_configuration_service),
):
    """Models selectable for a configuration of the given provider."""
    if not provider:
        raise ValidationError("No provider specified")
    result = await service.get_models(provider)
    return ApiResponse.success(models=result["models"], defaultModel=result["default_model"])


@router.post("/test")
async def test_configuration(
    uid: Optional[str] = Form(None),
    service: ConfigurationService = Depends(get_configuration_service),
):
    """Run the greeting prompt through the configuration."""
    try:
        response = await service.test_configuration(parse_uid(uid, "configuration"))
    except LLMError as e:
        logger.error(f"Configuration test failed: {e.message}")
        return ApiResponse.failure(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return ApiResponse.success(
        content=response.content,
        model=response.model,
        usage=usage_from_response(response),
    )


@router.get("/default")
async def get_default_configuration(service: ConfigurationService = Depends(get_configuration_service)):
    configuration = await service.get_default_configuration()
    return ApiResponse.success(configuration=ConfigurationResponse.model_validate(configuration))


@router.get("/by-identifier/{identifier}")
async def get_configuration_by_identifier(
    identifier: str,
    service: ConfigurationService = Depends(get_configuration_service),
):
    configuration = await service.get_configuration(identifier)
    return ApiResponse.success(configuration=ConfigurationResponse.model_validate(configuration))


@router.get("")
async def list_configurations(
    active_only: bool = False,
    service: ConfigurationService = Depends(get_configuration_service),
):
    configurations = await service.list_configurations(active_only=active_only)
    return ApiResponse.success(configurations=[ConfigurationResponse.model_validate(c) for c in configurations])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_configuration(
    configuration_data: ConfigurationCreate,
    service: ConfigurationService = Depends(get_configuration_service),
):
    configuration = await service.create_configuration(configuration_data)
    return ApiResponse.created(configuration=ConfigurationResponse.model_validate(configuration))


@router.get("/{uid}")
async def get_configuration(uid: int, service: ConfigurationService = Depends(get_configuration_service)):
    configuration = await service.get_by_uid(parse_uid(uid, "configuration"))
    return ApiResponse.success(configuration=ConfigurationResponse.model_validate(configuration))


@router.put("/{uid}")
async def update_configuration(
    uid: int,
    configuration_data: ConfigurationUpdate,
    service: ConfigurationService = Depends(get_configuration_service),
):
    configuration = await service.update_configuration(parse_uid(uid, "configuration"), configuration_data)
    return ApiResponse.success(configuration=ConfigurationResponse.model_validate(configuration))


@router.delete("/{uid}")
async def delete_configuration(uid: int, service: ConfigurationService = Depends(get_configuration_service)):
    await service.delete_configuration(parse_uid(uid, "configuration"))
    return ApiResponse.success()
