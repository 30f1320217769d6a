"""
Repositories for the four registry collections.

Each repository wraps an AsyncSession and owns the queries for one entity
kind. Reads on an empty store return empty results, never errors. Writes
only flush; the caller decides when to commit (see core.database.unit_of_work).
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import Configuration, Model, ModelCapability, Provider, Task
from ..models.base import BaseModel

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class EntityRepository(Generic[T]):
    """Queries shared by every collection."""

    model: type[T]
    kind: str

    def __init__(self, db: AsyncSession):
        self.db = db

    def _order_by(self) -> Sequence[Any]:
        return (self.model.sorting, self.model.name)

    async def find_by_uid(self, uid: int) -> T | None:
        return await self.db.get(self.model, uid)

    async def find_by_identifier(self, identifier: str) -> T | None:
        result = await self.db.execute(select(self.model).where(self.model.identifier == identifier))
        return result.scalar_one_or_none()

    async def find_all(self) -> list[T]:
        result = await self.db.execute(select(self.model).order_by(*self._order_by()))
        return list(result.scalars().all())

    async def find_active(self) -> list[T]:
        result = await self.db.execute(
            select(self.model).where(self.model.is_active == True).order_by(*self._order_by())  # noqa: E712
        )
        return list(result.scalars().all())

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.model.is_active == True)  # noqa: E712
        )
        return int(result.scalar_one())

    async def is_identifier_unique(self, identifier: str, exclude_uid: int | None = None) -> bool:
        stmt = select(func.count()).select_from(self.model).where(self.model.identifier == identifier)
        if exclude_uid is not None:
            stmt = stmt.where(self.model.uid != exclude_uid)
        result = await self.db.execute(stmt)
        return int(result.scalar_one()) == 0

    async def add(self, entity: T) -> T:
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        logger.debug(f"Added {self.kind} uid={entity.uid}")
        return entity

    async def save(self, entity: T) -> T:
        """Flush pending changes and reload relationships of an existing entity."""
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: T) -> None:
        await self.db.delete(entity)
        await self.db.flush()
        logger.debug(f"Deleted {self.kind} uid={entity.uid}")


class DefaultOwningRepository(EntityRepository[T]):
    """Repository for collections with a single default entity.

    `select_default` is the only writer of ``is_default``.
    """

    async def find_default(self) -> T | None:
        result = await self.db.execute(
            select(self.model)
            .where(self.model.is_default == True, self.model.is_active == True)  # noqa: E712
            .order_by(self.model.uid)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def unset_all_defaults(self, except_uid: int | None = None) -> None:
        stmt = update(self.model).where(self.model.is_default == True)  # noqa: E712
        if except_uid is not None:
            stmt = stmt.where(self.model.uid != except_uid)
        await self.db.execute(stmt.values(is_default=False))

    async def select_default(self, entity: T) -> T:
        """Make `entity` the only default of its collection."""
        await self.unset_all_defaults(except_uid=entity.uid)
        entity.is_default = True
        await self.db.flush()
        return entity

    async def clear_default(self, entity: T) -> None:
        entity.is_default = False
        await self.db.flush()


class ProviderRepository(EntityRepository[Provider]):
    model = Provider
    kind = "provider"

    async def find_active_by_priority(self) -> list[Provider]:
        result = await self.db.execute(
            select(Provider)
            .where(Provider.is_active == True)  # noqa: E712
            .order_by(Provider.priority.desc(), Provider.name)
        )
        return list(result.scalars().all())

    async def find_highest_priority(self) -> Provider | None:
        providers = await self.find_active_by_priority()
        return providers[0] if providers else None

    async def find_active_by_identifier(self, identifier: str) -> Provider | None:
        result = await self.db.execute(
            select(Provider).where(Provider.identifier == identifier, Provider.is_active == True)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def find_by_adapter_type(self, adapter_type: str) -> list[Provider]:
        result = await self.db.execute(
            select(Provider).where(Provider.adapter_type == adapter_type).order_by(*self._order_by())
        )
        return list(result.scalars().all())

    async def count_by_adapter_type(self) -> dict[str, int]:
        result = await self.db.execute(
            select(Provider.adapter_type, func.count()).group_by(Provider.adapter_type)
        )
        return {adapter_type: int(count) for adapter_type, count in result.all()}

    async def find_with_api_key(self) -> list[Provider]:
        result = await self.db.execute(
            select(Provider)
            .where(Provider.api_key.is_not(None), Provider.api_key != "")
            .order_by(*self._order_by())
        )
        return list(result.scalars().all())


class ModelRepository(DefaultOwningRepository[Model]):
    model = Model
    kind = "model"

    async def find_by_provider(self, provider_uid: int) -> list[Model]:
        """Active models of one provider."""
        result = await self.db.execute(
            select(Model)
            .where(Model.provider_uid == provider_uid, Model.is_active == True)  # noqa: E712
            .order_by(*self._order_by())
        )
        return list(result.scalars().all())

    async def count_by_provider(self, provider_uid: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Model).where(Model.provider_uid == provider_uid)
        )
        return int(result.scalar_one())

    async def find_by_capability(self, capability: ModelCapability | str) -> list[Model]:
        tag = ModelCapability(capability).value
        result = await self.db.execute(
            select(Model)
            .where(Model.is_active == True, Model._capabilities.contains(tag))  # noqa: E712
            .order_by(*self._order_by())
        )
        # LIKE is only a prefilter; compare whole tags
        return [m for m in result.scalars().all() if m.has_capability(tag)]

    async def find_chat_models(self) -> list[Model]:
        return await self.find_by_capability(ModelCapability.CHAT)

    async def find_embedding_models(self) -> list[Model]:
        return await self.find_by_capability(ModelCapability.EMBEDDINGS)

    async def find_vision_models(self) -> list[Model]:
        return await self.find_by_capability(ModelCapability.VISION)


class ConfigurationRepository(DefaultOwningRepository[Configuration]):
    model = Configuration
    kind = "configuration"

    def _order_by(self) -> Sequence[Any]:
        return (Configuration.name,)

    async def find_active_by_identifier(self, identifier: str) -> Configuration | None:
        result = await self.db.execute(
            select(Configuration).where(
                Configuration.identifier == identifier,
                Configuration.is_active == True,  # noqa: E712
            )
        )
        return result.scalar_one_or_none()

    async def find_by_model(self, model_uid: int) -> list[Configuration]:
        result = await self.db.execute(
            select(Configuration).where(Configuration.model_uid == model_uid).order_by(*self._order_by())
        )
        return list(result.scalars().all())


class TaskRepository(EntityRepository[Task]):
    model = Task
    kind = "task"

    def _order_by(self) -> Sequence[Any]:
        return (Task.category, Task.sorting, Task.name)

    async def find_by_category(self, category: str) -> list[Task]:
        result = await self.db.execute(
            select(Task)
            .where(Task.category == category, Task.is_active == True)  # noqa: E712
            .order_by(*self._order_by())
        )
        return list(result.scalars().all())

    async def find_system_tasks(self) -> list[Task]:
        result = await self.db.execute(
            select(Task).where(Task.is_system == True).order_by(*self._order_by())  # noqa: E712
        )
        return list(result.scalars().all())

    async def find_user_tasks(self) -> list[Task]:
        result = await self.db.execute(
            select(Task).where(Task.is_system == False).order_by(*self._order_by())  # noqa: E712
        )
        return list(result.scalars().all())

    async def find_by_input_type(self, input_type: str) -> list[Task]:
        result = await self.db.execute(
            select(Task)
            .where(Task.input_type == input_type, Task.is_active == True)  # noqa: E712
            .order_by(*self._order_by())
        )
        return list(result.scalars().all())

    async def find_by_configuration(self, configuration_uid: int) -> list[Task]:
        result = await self.db.execute(
            select(Task).where(Task.configuration_uid == configuration_uid).order_by(*self._order_by())
        )
        return list(result.scalars().all())

    async def count_by_category(self) -> dict[str, int]:
        result = await self.db.execute(select(Task.category, func.count()).group_by(Task.category))
        return {category: int(count) for category, count in result.all()}
