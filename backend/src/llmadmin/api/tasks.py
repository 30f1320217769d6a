"""
Task API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, status

from ..core.exceptions import LLMError
from ..core.identifiers import parse_uid
from ..core.logging import get_logger
from ..core.response import ApiResponse
from ..schemas.task import TaskCreate, TaskResponse, TaskUpdate
from ..services.completion_service import usage_from_response
from ..services.entity_manager import EntityStateManager
from ..services.task_service import TaskService
from .dependencies import get_entity_manager, get_task_service

logger = get_logger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("/toggle-active")
async def toggle_task_active(
    uid: Optional[str] = Form(None),
    manager: EntityStateManager = Depends(get_entity_manager),
):
    is_active = await manager.toggle_active("task", parse_uid(uid, "task"))
    return ApiResponse.success(isActive=is_active)


@router.post("/execute")
async def execute_task(
    uid: Optional[str] = Form(None),
    task_input: str = Form("", alias="input"),
    service: TaskService = Depends(get_task_service),
):
    """Fill the task template with the input and run it."""
    try:
        task, response = await service.execute(parse_uid(uid, "task"), task_input)
    except LLMError as e:
        logger.error(f"Task execution failed: {e.message}")
        return ApiResponse.failure(e.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return ApiResponse.success(
        content=response.content,
        model=response.model,
        outputFormat=task.output_format,
        usage=usage_from_response(response),
    )


@router.get("")
async def list_tasks(
    category: Optional[str] = None,
    active_only: bool = False,
    service: TaskService = Depends(get_task_service),
):
    tasks = await service.list_tasks(category=category, active_only=active_only)
    return ApiResponse.success(tasks=[TaskResponse.model_validate(t) for t in tasks])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, service: TaskService = Depends(get_task_service)):
    task = await service.create_task(task_data)
    return ApiResponse.created(task=TaskResponse.model_validate(task))


@router.get("/{uid}")
async def get_task(uid: int, service: TaskService = Depends(get_task_service)):
    task = await service.get_task(parse_uid(uid, "task"))
    return ApiResponse.success(task=TaskResponse.model_validate(task))


@router.put("/{uid}")
async def update_task(uid: int, task_data: TaskUpdate, service: TaskService = Depends(get_task_service)):
    task = await service.update_task(parse_uid(uid, "task"), task_data)
    return ApiResponse.success(task=TaskResponse.model_validate(task))


@router.delete("/{uid}")
async def delete_task(uid: int, service: TaskService = Depends(get_task_service)):
    await service.delete_task(parse_uid(uid, "task"))
    return ApiResponse.success()
