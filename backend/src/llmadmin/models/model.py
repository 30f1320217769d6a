"""
Model database model.

A model is one provider-specific model id registered for use, with its
limits, capabilities and pricing.
"""

from typing import Iterable

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import ModelCapability


class Model(BaseModel):
    """Database model for registered LLM models."""

    __tablename__ = "models"

    identifier = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    provider_uid = Column(Integer, ForeignKey("providers.uid", ondelete="CASCADE"), nullable=False, index=True)
    model_id = Column(String(150), nullable=False)  # "gpt-4o", "claude-3-5-sonnet-latest"

    # Limits
    context_length = Column(Integer, default=0, nullable=False)
    max_output_tokens = Column(Integer, default=0, nullable=False)
    default_timeout = Column(Integer, default=120, nullable=False)

    # Comma-separated ModelCapability values, exposed as a list via `capabilities`
    _capabilities = Column("capabilities", String(255), nullable=True)

    # Pricing in cents per 1M tokens
    cost_input = Column(Integer, default=0, nullable=False)
    cost_output = Column(Integer, default=0, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_default = Column(Boolean, default=False, nullable=False)
    sorting = Column(Integer, default=0, nullable=False)

    provider = relationship("Provider", back_populates="models", lazy="selectin")
    configurations = relationship("Configuration", back_populates="model")

    @property
    def capabilities(self) -> list[str]:
        if not self._capabilities:
            return []
        return [c for c in self._capabilities.split(",") if c]

    @capabilities.setter
    def capabilities(self, values: Iterable[str] | None) -> None:
        ordered: list[str] = []
        for value in values or []:
            tag = ModelCapability(value).value
            if tag not in ordered:
                ordered.append(tag)
        self._capabilities = ",".join(ordered) if ordered else None

    @property
    def provider_identifier(self) -> str | None:
        return self.provider.identifier if self.provider is not None else None

    def has_capability(self, capability: ModelCapability | str) -> bool:
        return ModelCapability(capability).value in self.capabilities

    def __repr__(self) -> str:
        return f"<Model(identifier='{self.identifier}', model_id='{self.model_id}', default={self.is_default})>"
