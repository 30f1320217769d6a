"""Task schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.enums import TaskCategory, TaskInputType, TaskOutputFormat
from .common import clean_identifier, clean_name


class TaskBase(BaseModel):
    identifier: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: TaskCategory = TaskCategory.GENERAL
    configuration_uid: Optional[int] = Field(None, gt=0)
    prompt_template: str = Field(..., min_length=1)
    input_type: TaskInputType = TaskInputType.MANUAL
    input_source: Optional[str] = Field(None, max_length=255)
    output_format: TaskOutputFormat = TaskOutputFormat.MARKDOWN
    is_active: bool = True
    is_system: bool = False
    sorting: int = 0

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)


class TaskCreate(TaskBase):
    """Schema for creating tasks."""


class TaskUpdate(BaseModel):
    """Schema for updating tasks."""

    identifier: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[TaskCategory] = None
    configuration_uid: Optional[int] = Field(None, gt=0)
    prompt_template: Optional[str] = Field(None, min_length=1)
    input_type: Optional[TaskInputType] = None
    input_source: Optional[str] = Field(None, max_length=255)
    output_format: Optional[TaskOutputFormat] = None
    is_active: Optional[bool] = None
    is_system: Optional[bool] = None
    sorting: Optional[int] = None

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: Optional[str]) -> Optional[str]:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)


class TaskResponse(BaseModel):
    """Schema for task responses."""

    model_config = ConfigDict(from_attributes=True)

    uid: int
    identifier: str
    name: str
    description: Optional[str] = None
    category: str
    configuration_uid: Optional[int] = Field(None, serialization_alias="configurationUid")
    prompt_template: str = Field(serialization_alias="promptTemplate")
    input_type: str = Field(serialization_alias="inputType")
    input_source: Optional[str] = Field(None, serialization_alias="inputSource")
    output_format: str = Field(serialization_alias="outputFormat")
    is_active: bool = Field(serialization_alias="isActive")
    is_system: bool = Field(serialization_alias="isSystem")
    sorting: int
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
