"""Model schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.enums import ModelCapability
from .common import clean_identifier, clean_name


class ModelBase(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    identifier: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    provider_uid: int = Field(..., gt=0)
    model_id: str = Field(..., min_length=1, max_length=150)
    context_length: int = Field(0, ge=0)
    max_output_tokens: int = Field(0, ge=0)
    capabilities: List[ModelCapability] = Field(default_factory=lambda: [ModelCapability.CHAT])
    default_timeout: int = Field(120, ge=1)
    cost_input: int = Field(0, ge=0, description="Cents per 1M input tokens")
    cost_output: int = Field(0, ge=0, description="Cents per 1M output tokens")
    sorting: int = 0
    is_active: bool = True

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("model_id")
    @classmethod
    def validate_model_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Model ID cannot be empty")
        return v.strip()


class ModelCreate(ModelBase):
    """Schema for creating models. The default flag is set through set-default only."""


class ModelUpdate(BaseModel):
    """Schema for updating models."""

    model_config = ConfigDict(protected_namespaces=())

    identifier: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    provider_uid: Optional[int] = Field(None, gt=0)
    model_id: Optional[str] = Field(None, min_length=1, max_length=150)
    context_length: Optional[int] = Field(None, ge=0)
    max_output_tokens: Optional[int] = Field(None, ge=0)
    capabilities: Optional[List[ModelCapability]] = None
    default_timeout: Optional[int] = Field(None, ge=1)
    cost_input: Optional[int] = Field(None, ge=0)
    cost_output: Optional[int] = Field(None, ge=0)
    sorting: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: Optional[str]) -> Optional[str]:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)


class ModelResponse(BaseModel):
    """Schema for model responses."""

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    uid: int
    identifier: str
    name: str
    description: Optional[str] = None
    provider_uid: int = Field(serialization_alias="providerUid")
    provider_identifier: Optional[str] = Field(None, serialization_alias="providerIdentifier")
    model_id: str = Field(serialization_alias="modelId")
    context_length: int = Field(serialization_alias="contextLength")
    max_output_tokens: int = Field(serialization_alias="maxOutputTokens")
    capabilities: List[str] = Field(default_factory=list)
    default_timeout: int = Field(serialization_alias="defaultTimeout")
    cost_input: int = Field(serialization_alias="costInput")
    cost_output: int = Field(serialization_alias="costOutput")
    sorting: int
    is_active: bool = Field(serialization_alias="isActive")
    is_default: bool = Field(serialization_alias="isDefault")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class ModelListItem(BaseModel):
    """Compact model entry used by selection lists."""

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    uid: int
    identifier: str
    name: str
    model_id: str = Field(serialization_alias="modelId")
    is_default: bool = Field(serialization_alias="isDefault")


class DetectedLimits(BaseModel):
    context_length: int = Field(0, serialization_alias="contextLength")
    max_output_tokens: int = Field(0, serialization_alias="maxOutputTokens")
    capabilities: List[str] = Field(default_factory=list)
