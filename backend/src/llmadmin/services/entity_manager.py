"""
Active-state and default-selection management.

All flag changes across the four collections go through EntityStateManager,
one unit of work per call.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import unit_of_work
from ..core.exceptions import EntityNotFoundError, ValidationError
from ..core.logging import get_logger
from .repositories import (
    ConfigurationRepository,
    DefaultOwningRepository,
    EntityRepository,
    ModelRepository,
    ProviderRepository,
    TaskRepository,
)

logger = get_logger(__name__)

REPOSITORIES: dict[str, type[EntityRepository]] = {
    "provider": ProviderRepository,
    "model": ModelRepository,
    "configuration": ConfigurationRepository,
    "task": TaskRepository,
}


class EntityStateManager:
    """Toggles activity and selects defaults for registry entities."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def repository(self, kind: str) -> EntityRepository:
        try:
            return REPOSITORIES[kind](self.db)
        except KeyError:
            raise ValidationError(f"Unknown entity kind '{kind}'") from None

    def _default_repository(self, kind: str) -> DefaultOwningRepository:
        repo = self.repository(kind)
        if not isinstance(repo, DefaultOwningRepository):
            raise ValidationError(f"{kind.capitalize()} has no default selection")
        return repo

    async def toggle_active(self, kind: str, uid: int) -> bool:
        """Flip ``is_active`` and return the new value.

        Deactivating the default entity also clears its default flag.
        """
        repo = self.repository(kind)
        async with unit_of_work(self.db):
            entity = await repo.find_by_uid(uid)
            if entity is None:
                raise EntityNotFoundError(kind, uid)

            entity.is_active = not entity.is_active
            if not entity.is_active and getattr(entity, "is_default", False):
                entity.is_default = False
                logger.info(f"Cleared default flag of deactivated {kind}", extra={"kind": kind, "uid": uid})
            await self.db.flush()
            is_active = entity.is_active

        logger.info(
            f"Toggled {kind} active state",
            extra={"kind": kind, "uid": uid, "is_active": is_active},
        )
        return is_active

    async def set_default(self, kind: str, uid: int) -> None:
        """Make the entity the single default of its collection.

        Unknown and inactive targets are rejected before anything changes.
        """
        repo = self._default_repository(kind)
        async with unit_of_work(self.db):
            entity = await repo.find_by_uid(uid)
            if entity is None:
                raise EntityNotFoundError(kind, uid)
            if not entity.is_active:
                raise ValidationError(f"Cannot set an inactive {kind} as default")
            await repo.select_default(entity)

        logger.info(f"Set default {kind}", extra={"kind": kind, "uid": uid})

    async def find_default(self, kind: str):
        return await self._default_repository(kind).find_default()

    async def counts(self) -> dict[str, dict[str, int]]:
        """Active and total counts for every collection."""
        result = {}
        for kind in REPOSITORIES:
            repo = self.repository(kind)
            result[kind] = {"active": await repo.count_active(), "total": await repo.count_all()}
        return result
