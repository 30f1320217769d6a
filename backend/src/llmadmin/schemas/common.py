"""Shared schema helpers."""

from typing import Optional

from pydantic import BaseModel, Field


def clean_identifier(v: Optional[str]) -> Optional[str]:
    """Strip an identifier and reject blank or whitespace-containing values."""
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Identifier cannot be empty")
    if any(ch.isspace() for ch in v):
        raise ValueError("Identifier cannot contain whitespace")
    return v


def clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Name cannot be empty")
    return v.strip()


class UsageInfo(BaseModel):
    """Token usage of one completion call."""

    prompt_tokens: int = Field(0, ge=0, serialization_alias="promptTokens")
    completion_tokens: int = Field(0, ge=0, serialization_alias="completionTokens")
    total_tokens: int = Field(0, ge=0, serialization_alias="totalTokens")

