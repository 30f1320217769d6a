"""Task database model."""

import re

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import TaskCategory, TaskInputType, TaskOutputFormat

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Task(BaseModel):
    """A reusable prompt template run against a configuration."""

    __tablename__ = "tasks"

    identifier = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), default=TaskCategory.GENERAL.value, nullable=False, index=True)

    configuration_uid = Column(
        Integer, ForeignKey("configurations.uid", ondelete="SET NULL"), nullable=True, index=True
    )

    prompt_template = Column(Text, nullable=False, default="")
    input_type = Column(String(50), default=TaskInputType.MANUAL.value, nullable=False)
    input_source = Column(String(255), nullable=True)
    output_format = Column(String(20), default=TaskOutputFormat.MARKDOWN.value, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_system = Column(Boolean, default=False, nullable=False)
    sorting = Column(Integer, default=0, nullable=False)

    configuration = relationship("Configuration", back_populates="tasks", lazy="selectin")

    def build_prompt(self, variables: dict[str, str]) -> str:
        """Substitute `{{name}}` placeholders; unknown placeholders are left as written."""

        def _replace(match: re.Match) -> str:
            key = match.group(1)
            return str(variables[key]) if key in variables else match.group(0)

        return _PLACEHOLDER.sub(_replace, self.prompt_template or "")

    def placeholders(self) -> list[str]:
        seen: list[str] = []
        for name in _PLACEHOLDER.findall(self.prompt_template or ""):
            if name not in seen:
                seen.append(name)
        return seen

    def __repr__(self) -> str:
        return f"<Task(identifier='{self.identifier}', category='{self.category}', active={self.is_active})>"
