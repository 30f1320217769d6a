"""
Shared pytest fixtures and path setup for unit tests.

Tests run against an in-memory SQLite registry and a fake provider HTTP API;
no network or PostgreSQL server is needed.
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from cryptography.fernet import Fernet

# Set required environment variables BEFORE any llmadmin imports to prevent
# Pydantic Settings validation errors. These are test-only defaults.
os.environ.setdefault("LLMADMIN_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LLMADMIN_ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("LLMADMIN_LOG_TO_FILE", "false")

# Add backend/src to sys.path so llmadmin.* imports work when running pytest from repo root.
PROJECT_SRC = Path(__file__).resolve().parents[2]
if str(PROJECT_SRC) not in sys.path:
    sys.path.insert(0, str(PROJECT_SRC))

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from llmadmin.core.database import Base, build_session_factory
from llmadmin.core.encryption import get_encryption_service
from llmadmin.models import Configuration, Model, Provider, Task, register_all_models


@asynccontextmanager
async def registry_engine():
    """A fresh in-memory database with all registry tables."""
    register_all_models()
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


class RegistrySeeder:
    """Creates registry rows in their own committed session."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _add(self, entity):
        async with self.session_factory() as session:
            session.add(entity)
            await session.commit()
            await session.refresh(entity)
        return entity

    async def provider(self, identifier: str = "openai-main", api_key: str | None = "sk-test", **fields) -> Provider:
        fields.setdefault("name", identifier.replace("-", " ").title())
        fields.setdefault("adapter_type", "openai")
        provider = Provider(identifier=identifier, **fields)
        if api_key:
            provider.api_key = get_encryption_service().encrypt(api_key)
        return await self._add(provider)

    async def model(self, provider: Provider, identifier: str = "gpt-4o", **fields) -> Model:
        fields.setdefault("name", identifier)
        fields.setdefault("model_id", identifier)
        capabilities = fields.pop("capabilities", ["chat"])
        model = Model(identifier=identifier, provider_uid=provider.uid, **fields)
        model.capabilities = capabilities
        return await self._add(model)

    async def configuration(self, model: Model | None = None, identifier: str = "default-chat", **fields) -> Configuration:
        fields.setdefault("name", identifier.replace("-", " ").title())
        configuration = Configuration(
            identifier=identifier,
            model_uid=model.uid if model is not None else None,
            **fields,
        )
        return await self._add(configuration)

    async def task(
        self,
        configuration: Configuration | None = None,
        identifier: str = "summarize",
        prompt_template: str = "Summarize: {{input}}",
        **fields,
    ) -> Task:
        fields.setdefault("name", identifier.title())
        task = Task(
            identifier=identifier,
            configuration_uid=configuration.uid if configuration is not None else None,
            prompt_template=prompt_template,
            **fields,
        )
        return await self._add(task)


class FakeProviderAPI:
    """httpx MockTransport handler that answers by URL path suffix."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, list[httpx.Response]] = {}

    def reply(self, path_suffix: str, status_code: int = 200, json=None, repeat: int = 1) -> None:
        queue = self.routes.setdefault(path_suffix, [])
        for _ in range(repeat):
            queue.append(httpx.Response(status_code, json=json))

    def chat_reply(self, content: str = "Hello!", model: str = "gpt-4o", prompt_tokens: int = 12, completion_tokens: int = 3):
        self.reply(
            "/chat/completions",
            json={
                "model": model,
                "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
                "usage": {
                    "prompt_tokens": prompt_tokens,
                    "completion_tokens": completion_tokens,
                    "total_tokens": prompt_tokens + completion_tokens,
                },
            },
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, queue in self.routes.items():
            if request.url.path.endswith(suffix) and queue:
                return queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(404, json={"error": {"message": f"No fake route for {request.url.path}"}})


@pytest.fixture
def fresh_registry():
    """Opens an isolated registry per call; for property tests that need one per example."""

    @asynccontextmanager
    async def _open():
        async with registry_engine() as engine:
            factory = build_session_factory(engine)
            yield factory, RegistrySeeder(factory)

    return _open


@pytest_asyncio.fixture
async def session_factory():
    async with registry_engine() as engine:
        yield build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory) -> RegistrySeeder:
    return RegistrySeeder(session_factory)


@pytest.fixture
def provider_api() -> FakeProviderAPI:
    return FakeProviderAPI()


@pytest_asyncio.fixture
async def outbound_client(provider_api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(provider_api)) as client:
        yield client


@pytest_asyncio.fixture
async def api_client(session_factory, outbound_client):
    """HTTP client bound to the app with the database and provider calls replaced."""
    from llmadmin.api.dependencies import get_db, get_outbound_client
    from llmadmin.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def override_get_outbound_client():
        return outbound_client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_outbound_client] = override_get_outbound_client
    try:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
