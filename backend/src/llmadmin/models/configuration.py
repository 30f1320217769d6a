"""Configuration database model.

A configuration is a named set of generation parameters (system prompt,
temperature, token limits, penalties) bound to an optional model, plus
daily usage limits.
"""

from sqlalchemy import JSON, Boolean, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class Configuration(BaseModel):
    """Database model for generation configurations."""

    __tablename__ = "configurations"

    identifier = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    model_uid = Column(Integer, ForeignKey("models.uid", ondelete="SET NULL"), nullable=True, index=True)

    # Generation parameters
    system_prompt = Column(Text, nullable=True)
    temperature = Column(Float, default=0.7, nullable=False)
    max_tokens = Column(Integer, default=1000, nullable=False)
    top_p = Column(Float, default=1.0, nullable=False)
    frequency_penalty = Column(Float, default=0.0, nullable=False)
    presence_penalty = Column(Float, default=0.0, nullable=False)
    options = Column(JSON, nullable=True)

    # Daily limits, 0 = unlimited
    max_requests_per_day = Column(Integer, default=0, nullable=False)
    max_tokens_per_day = Column(Integer, default=0, nullable=False)
    max_cost_per_day = Column(Integer, default=0, nullable=False)  # cents

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_default = Column(Boolean, default=False, nullable=False)

    model = relationship("Model", back_populates="configurations", lazy="selectin")
    tasks = relationship("Task", back_populates="configuration")

    @property
    def model_identifier(self) -> str | None:
        return self.model.identifier if self.model is not None else None

    def to_options(self) -> dict:
        """Generation options for an outbound request.

        Values from `options` are merged last and win over the columns.
        """
        result = {
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
            "frequency_penalty": self.frequency_penalty,
            "presence_penalty": self.presence_penalty,
        }
        if self.system_prompt:
            result["system_prompt"] = self.system_prompt
        if isinstance(self.options, dict):
            result.update(self.options)
        return result

    def has_daily_limits(self) -> bool:
        return bool(self.max_requests_per_day or self.max_tokens_per_day or self.max_cost_per_day)

    def __repr__(self) -> str:
        return f"<Configuration(identifier='{self.identifier}', default={self.is_default}, active={self.is_active})>"
