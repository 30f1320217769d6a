"""
FastAPI dependencies for the LLM admin backend.

This module provides reusable dependencies for database sessions, the
outbound HTTP client and the per-request services built on them.
"""

from typing import AsyncGenerator

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db as core_get_db
from ..core.http_client import get_http_client
from ..services.configuration_service import ConfigurationService
from ..services.entity_manager import EntityStateManager
from ..services.model_service import ModelService
from ..services.provider_service import ProviderService
from ..services.quick_test import QuickTestDispatcher
from ..services.task_service import TaskService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields an async database session and ensures it's closed after use.
    """
    async for session in core_get_db():
        yield session


async def get_outbound_client() -> httpx.AsyncClient:
    """Shared HTTP client for provider calls."""
    return await get_http_client()


def get_entity_manager(db: AsyncSession = Depends(get_db)) -> EntityStateManager:
    return EntityStateManager(db)


def get_provider_service(
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_outbound_client),
) -> ProviderService:
    return ProviderService(db, http_client=http_client)


def get_model_service(
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_outbound_client),
) -> ModelService:
    return ModelService(db, http_client=http_client)


def get_configuration_service(
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_outbound_client),
) -> ConfigurationService:
    return ConfigurationService(db, http_client=http_client)


def get_task_service(
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_outbound_client),
) -> TaskService:
    return TaskService(db, http_client=http_client)


def get_quick_test_dispatcher(
    db: AsyncSession = Depends(get_db),
    http_client: httpx.AsyncClient = Depends(get_outbound_client),
) -> QuickTestDispatcher:
    return QuickTestDispatcher(db, http_client=http_client)
