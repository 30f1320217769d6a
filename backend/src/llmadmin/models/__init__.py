"""
Database models for the LLM admin backend.

This package contains SQLAlchemy models for all database tables
used by the application.
"""

from .base import Base, BaseModel
from .configuration import Configuration
from .enums import AdapterType, ModelCapability, TaskCategory, TaskInputType, TaskOutputFormat
from .model import Model
from .provider import Provider
from .task import Task


def register_all_models() -> list[type[BaseModel]]:
    """Return every mapped model; importing this package registers their tables."""
    return [Provider, Model, Configuration, Task]


__all__ = [
    "AdapterType",
    "Base",
    "BaseModel",
    "Configuration",
    "Model",
    "ModelCapability",
    "Provider",
    "Task",
    "TaskCategory",
    "TaskInputType",
    "TaskOutputFormat",
    "register_all_models",
]
