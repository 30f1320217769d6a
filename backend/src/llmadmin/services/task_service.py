"""
Task service.

CRUD for tasks and task execution: the prompt template is filled with the
caller's input and run against the task's configuration, or the default
configuration when the task has none.
"""

from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import unit_of_work
from ..core.exceptions import DuplicateIdentifierError, EntityNotFoundError, LLMConfigurationError, ValidationError
from ..core.logging import get_logger
from ..llm.client import LLMResponse
from ..models import Task
from ..schemas.task import TaskCreate, TaskUpdate
from .completion_service import CompletionService
from .repositories import ConfigurationRepository, TaskRepository

logger = get_logger(__name__)


class TaskService:
    """Service for managing and executing tasks."""

    def __init__(
        self,
        db: AsyncSession,
        http_client: Optional[httpx.AsyncClient] = None,
        completion_service: Optional[CompletionService] = None,
    ):
        self.db = db
        self.repository = TaskRepository(db)
        self.configurations = ConfigurationRepository(db)
        self.completion_service = completion_service or CompletionService(http_client=http_client)

    async def get_task(self, uid: int) -> Task:
        task = await self.repository.find_by_uid(uid)
        if task is None:
            raise EntityNotFoundError("task", uid)
        return task

    async def list_tasks(self, category: Optional[str] = None, active_only: bool = False) -> list[Task]:
        if category:
            return await self.repository.find_by_category(category)
        if active_only:
            return await self.repository.find_active()
        return await self.repository.find_all()

    async def _require_configuration(self, configuration_uid: int) -> None:
        if await self.configurations.find_by_uid(configuration_uid) is None:
            raise EntityNotFoundError("configuration", configuration_uid)

    async def create_task(self, data: TaskCreate) -> Task:
        async with unit_of_work(self.db):
            if not await self.repository.is_identifier_unique(data.identifier):
                raise DuplicateIdentifierError("task", data.identifier)
            if data.configuration_uid is not None:
                await self._require_configuration(data.configuration_uid)

            task = Task(**data.model_dump(mode="json"))
            await self.repository.add(task)

        logger.info("Created task", extra={"uid": task.uid, "identifier": task.identifier})
        return task

    async def update_task(self, uid: int, data: TaskUpdate) -> Task:
        changes = data.model_dump(exclude_unset=True, mode="json")
        async with unit_of_work(self.db):
            task = await self.get_task(uid)

            identifier = changes.get("identifier")
            if identifier and not await self.repository.is_identifier_unique(identifier, exclude_uid=uid):
                raise DuplicateIdentifierError("task", identifier)
            if changes.get("configuration_uid") is not None:
                await self._require_configuration(changes["configuration_uid"])

            for key, value in changes.items():
                if value is None and key not in ("description", "configuration_uid", "input_source"):
                    continue
                setattr(task, key, value)
            await self.repository.save(task)

        logger.info("Updated task", extra={"uid": uid})
        return task

    async def delete_task(self, uid: int) -> None:
        async with unit_of_work(self.db):
            task = await self.get_task(uid)
            await self.repository.delete(task)
        logger.info("Deleted task", extra={"uid": uid})

    async def execute(self, uid: int, task_input: str) -> tuple[Task, LLMResponse]:
        task = await self.get_task(uid)
        if not task.is_active:
            raise ValidationError("Task is not active")

        prompt = task.build_prompt({"input": task_input})

        configuration = task.configuration
        if configuration is None or not configuration.is_active:
            configuration = await self.configurations.find_default()
        if configuration is None:
            raise LLMConfigurationError("No configuration available to execute the task")

        logger.info(
            "Executing task",
            extra={"uid": uid, "task": task.identifier, "configuration": configuration.identifier},
        )
        response = await self.completion_service.complete_with_configuration(prompt, configuration)
        return task, response
