"""
Provider schemas.

Request bodies use snake_case; responses are dumped by alias (camelCase).
The stored API key is never returned, only whether one is set.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.enums import AdapterType
from .common import clean_identifier, clean_name


class ProviderBase(BaseModel):
    identifier: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    adapter_type: AdapterType = AdapterType.OPENAI
    endpoint_url: Optional[str] = Field(None, max_length=255)
    organization_id: Optional[str] = Field(None, max_length=100)
    api_timeout: int = Field(30, ge=1, le=3600)
    max_retries: int = Field(3, ge=0, le=10)
    options: Dict[str, Any] = Field(default_factory=dict)
    priority: int = 50
    sorting: int = 0
    is_active: bool = True

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: Optional[str]) -> Optional[str]:
        return clean_identifier(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Empty string means "use the adapter default"."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint URL must start with http:// or https://")
        return v.rstrip("/")


class ProviderCreate(ProviderBase):
    """Schema for creating providers."""

    api_key: Optional[str] = Field(None, description="Plain API key; stored encrypted")


class ProviderUpdate(BaseModel):
    """Schema for updating providers. Omitted fields are left unchanged.

    ``api_key``: omitted keeps the stored key, an empty string removes it.
    """

    identifier: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    adapter_type: Optional[AdapterType] = None
    endpoint_url: Optional[str] = Field(None, max_length=255)
    api_key: Optional[str] = None
    organization_id: Optional[str] = Field(None, max_length=100)
    api_timeout: Optional[int] = Field(None, ge=1, le=3600)
    max_retries: Optional[int] = Field(None, ge=0, le=10)
    options: Optional[Dict[str, Any]] = None
    priority: Optional[int] = None
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


class ProviderResponse(BaseModel):
    """Schema for provider responses."""

    model_config = ConfigDict(from_attributes=True)

    uid: int
    identifier: str
    name: str
    description: Optional[str] = None
    adapter_type: str = Field(serialization_alias="adapterType")
    endpoint_url: Optional[str] = Field(None, serialization_alias="endpointUrl")
    effective_endpoint: Optional[str] = Field(None, serialization_alias="effectiveEndpoint")
    has_api_key: bool = Field(False, serialization_alias="hasApiKey")
    organization_id: Optional[str] = Field(None, serialization_alias="organizationId")
    api_timeout: int = Field(serialization_alias="apiTimeout")
    max_retries: int = Field(serialization_alias="maxRetries")
    options: Optional[Dict[str, Any]] = None
    priority: int
    sorting: int
    is_active: bool = Field(serialization_alias="isActive")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class ConnectionTestResult(BaseModel):
    """Outcome of a provider connection test."""

    success: bool
    message: str
    models: List[str] = Field(default_factory=list)


class AvailableModel(BaseModel):
    """A model advertised by a provider's remote listing."""

    id: str
    name: str
    context_length: int = Field(0, serialization_alias="contextLength")
    max_output_tokens: int = Field(0, serialization_alias="maxOutputTokens")
    capabilities: List[str] = Field(default_factory=list)
