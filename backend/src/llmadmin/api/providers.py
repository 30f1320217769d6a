"""
Provider API endpoints.

CRUD takes JSON bodies; the action endpoints (toggle-active, test-connection)
take form-encoded fields.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, status

from ..core.identifiers import parse_uid
from ..core.logging import get_logger
from ..core.response import ApiResponse
from ..schemas.provider import ProviderCreate, ProviderResponse, ProviderUpdate
from ..services.entity_manager import EntityStateManager
from ..services.provider_service import ProviderService
from .dependencies import get_entity_manager, get_provider_service

logger = get_logger(__name__)

router = APIRouter(prefix="/providers", tags=["providers"])


@router.post("/toggle-active")
async def toggle_provider_active(
    uid: Optional[str] = Form(None),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    """Flip a provider between active and inactive."""
    is_active = await manager.toggle_active("provider", parse_uid(uid, "provider"))
    return ApiResponse.success(isActive=is_active)


@router.post("/test-connection")
async def test_provider_connection(
    uid: Optional[str] = Form(None),
    service: ProviderService = Depends(get_provider_service),
):
    """List the provider's remote models to check endpoint and credentials."""
    result = await service.test_connection(parse_uid(uid, "provider"))
    if result.success:
        return ApiResponse.success(message=result.message, models=result.models)
    # An unreachable provider is a test outcome, not a request error
    return ApiResponse.failure(
        result.message, status_code=status.HTTP_200_OK, message=result.message, models=result.models
    )


@router.get("/highest-priority")
async def get_highest_priority_provider(service: ProviderService = Depends(get_provider_service)):
    provider = await service.find_highest_priority()
    return ApiResponse.success(provider=ProviderResponse.model_validate(provider) if provider else None)


@router.get("")
async def list_providers(
    active_only: bool = False,
    service: ProviderService = Depends(get_provider_service),
):
    providers = await service.list_providers(active_only=active_only)
    return ApiResponse.success(providers=[ProviderResponse.model_validate(p) for p in providers])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_provider(
    provider_data: ProviderCreate,
    service: ProviderService = Depends(get_provider_service),
):
    """Create a provider; the API key is stored encrypted."""
    provider = await service.create_provider(provider_data)
    return ApiResponse.created(provider=ProviderResponse.model_validate(provider))


@router.get("/{uid}")
async def get_provider(uid: int, service: ProviderService = Depends(get_provider_service)):
    provider = await service.get_provider(parse_uid(uid, "provider"))
    return ApiResponse.success(provider=ProviderResponse.model_validate(provider))


@router.put("/{uid}")
async def update_provider(
    uid: int,
    provider_data: ProviderUpdate,
    service: ProviderService = Depends(get_provider_service),
):
    provider = await service.update_provider(parse_uid(uid, "provider"), provider_data)
    return ApiResponse.success(provider=ProviderResponse.model_validate(provider))


@router.delete("/{uid}")
async def delete_provider(uid: int, service: ProviderService = Depends(get_provider_service)):
    """Delete a provider together with its models."""
    await service.delete_provider(parse_uid(uid, "provider"))
    return ApiResponse.success()
