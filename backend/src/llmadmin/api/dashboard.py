"""Dashboard and health endpoints.

The dashboard summarizes the registry: active/total counts per entity kind,
the current defaults, and breakdowns by adapter type and task category.
"""

import time

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import get_settings_instance
from ..core.database import check_db_connection
from ..core.logging import get_logger
from ..core.response import ApiResponse
from ..schemas.configuration import ConfigurationResponse
from ..schemas.model import ModelResponse
from ..services.entity_manager import EntityStateManager
from ..services.repositories import ProviderRepository, TaskRepository
from .dependencies import get_db, get_entity_manager

logger = get_logger(__name__)

router = APIRouter(tags=["dashboard"])

settings = get_settings_instance()


@router.get("/dashboard")
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    counts = await manager.counts()
    default_model = await manager.find_default("model")
    default_configuration = await manager.find_default("configuration")

    return ApiResponse.success(
        counts=counts,
        defaultModel=ModelResponse.model_validate(default_model) if default_model else None,
        defaultConfiguration=(
            ConfigurationResponse.model_validate(default_configuration) if default_configuration else None
        ),
        providersByAdapter=await ProviderRepository(db).count_by_adapter_type(),
        tasksByCategory=await TaskRepository(db).count_by_category(),
    )


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report database connectivity; answers 503 when the database is unreachable."""
    started = time.perf_counter()
    database_ok = await check_db_connection(db)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    checks = {"database": {"status": "healthy" if database_ok else "unhealthy", "responseTimeMs": elapsed_ms}}
    if not database_ok:
        logger.warning("Health check failed: database unreachable")
        return ApiResponse.failure(
            "Database unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            status="unhealthy",
            checks=checks,
        )

    return ApiResponse.success(
        status="healthy",
        version=settings.version,
        environment=settings.environment,
        checks=checks,
    )
