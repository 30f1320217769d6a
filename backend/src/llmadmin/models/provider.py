"""
Provider database model.

A provider is one configured endpoint of an LLM vendor (or a local runtime)
together with its credentials and request defaults.
"""

from sqlalchemy import JSON, Boolean, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import AdapterType


class Provider(BaseModel):
    """Database model for LLM providers."""

    __tablename__ = "providers"

    identifier = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    adapter_type = Column(String(50), nullable=False, default=AdapterType.OPENAI.value, index=True)

    # Connection settings
    endpoint_url = Column(String(255), nullable=True)  # overrides the adapter default
    api_key = Column(Text, nullable=True)  # Fernet-encrypted
    organization_id = Column(String(100), nullable=True)
    api_timeout = Column(Integer, default=30, nullable=False)
    max_retries = Column(Integer, default=3, nullable=False)
    options = Column(JSON, nullable=True)

    # Selection
    priority = Column(Integer, default=50, nullable=False)  # higher is preferred
    sorting = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    models = relationship("Model", back_populates="provider", cascade="all, delete-orphan")

    @property
    def adapter(self) -> AdapterType:
        return AdapterType(self.adapter_type)

    @property
    def effective_endpoint(self) -> str | None:
        """Endpoint URL to call: the explicit override, else the adapter default."""
        if self.endpoint_url:
            return self.endpoint_url.rstrip("/")
        return self.adapter.default_endpoint

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def get_options(self) -> dict:
        return dict(self.options) if isinstance(self.options, dict) else {}

    def __repr__(self) -> str:
        return f"<Provider(identifier='{self.identifier}', adapter='{self.adapter_type}', active={self.is_active})>"
