"""Configuration schemas."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import clean_identifier, clean_name


class ConfigurationBase(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    identifier: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    model_uid: Optional[int] = Field(None, gt=0)
    system_prompt: Optional[str] = None
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(1000, ge=1)
    top_p: float = Field(1.0, ge=0.0, le=1.0)
    frequency_penalty: float = Field(0.0, ge=-2.0, le=2.0)
    presence_penalty: float = Field(0.0, ge=-2.0, le=2.0)
    options: Dict[str, Any] = Field(default_factory=dict)
    max_requests_per_day: int = Field(0, ge=0)
    max_tokens_per_day: int = Field(0, ge=0)
    max_cost_per_day: int = Field(0, ge=0, description="Cents; 0 = unlimited")
    is_active: bool = True

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)


class ConfigurationCreate(ConfigurationBase):
    """Schema for creating configurations."""


class ConfigurationUpdate(BaseModel):
    """Schema for updating configurations.

    ``model_uid`` set explicitly to null detaches the model.
    """

    model_config = ConfigDict(protected_namespaces=())

    identifier: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    model_uid: Optional[int] = Field(None, gt=0)
    system_prompt: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, ge=1)
    top_p: Optional[float] = Field(None, ge=0.0, le=1.0)
    frequency_penalty: Optional[float] = Field(None, ge=-2.0, le=2.0)
    presence_penalty: Optional[float] = Field(None, ge=-2.0, le=2.0)
    options: Optional[Dict[str, Any]] = None
    max_requests_per_day: Optional[int] = Field(None, ge=0)
    max_tokens_per_day: Optional[int] = Field(None, ge=0)
    max_cost_per_day: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: Optional[str]) -> Optional[str]:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)


class ConfigurationResponse(BaseModel):
    """Schema for configuration responses."""

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    uid: int
    identifier: str
    name: str
    description: Optional[str] = None
    model_uid: Optional[int] = Field(None, serialization_alias="modelUid")
    model_identifier: Optional[str] = Field(None, serialization_alias="modelIdentifier")
    system_prompt: Optional[str] = Field(None, serialization_alias="systemPrompt")
    temperature: float
    max_tokens: int = Field(serialization_alias="maxTokens")
    top_p: float = Field(serialization_alias="topP")
    frequency_penalty: float = Field(serialization_alias="frequencyPenalty")
    presence_penalty: float = Field(serialization_alias="presencePenalty")
    options: Optional[Dict[str, Any]] = None
    max_requests_per_day: int = Field(serialization_alias="maxRequestsPerDay")
    max_tokens_per_day: int = Field(serialization_alias="maxTokensPerDay")
    max_cost_per_day: int = Field(serialization_alias="maxCostPerDay")
    is_active: bool = Field(serialization_alias="isActive")
    is_default: bool = Field(serialization_alias="isDefault")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")
