"""
Provider adapters package.

Import built-in adapters so they register with the adapter registry.
"""

# Import adapters for side-effect registration
from .adapters import anthropic_adapter  # noqa: F401
from .adapters import azure_openai_adapter  # noqa: F401
from .adapters import gemini_adapter  # noqa: F401
from .adapters import ollama_adapter  # noqa: F401
from .adapters import openai_adapter  # noqa: F401

__all__ = [
    "anthropic_adapter",
    "azure_openai_adapter",
    "gemini_adapter",
    "ollama_adapter",
    "openai_adapter",
]
