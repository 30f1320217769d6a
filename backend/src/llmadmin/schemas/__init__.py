"""
Pydantic schemas for request validation and response serialization.
"""

from .common import UsageInfo
from .configuration import ConfigurationCreate, ConfigurationResponse, ConfigurationUpdate
from .model import DetectedLimits, ModelCreate, ModelListItem, ModelResponse, ModelUpdate
from .provider import AvailableModel, ConnectionTestResult, ProviderCreate, ProviderResponse, ProviderUpdate
from .task import TaskCreate, TaskResponse, TaskUpdate

__all__ = [
    "AvailableModel",
    "ConfigurationCreate",
    "ConfigurationResponse",
    "ConfigurationUpdate",
    "ConnectionTestResult",
    "DetectedLimits",
    "ModelCreate",
    "ModelListItem",
    "ModelResponse",
    "ModelUpdate",
    "ProviderCreate",
    "ProviderResponse",
    "ProviderUpdate",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
    "UsageInfo",
]
