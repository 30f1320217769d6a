"""
LLM integration package.

Provides the provider-agnostic client used by quick tests, model tests and
task execution.
"""

from .client import LLMClient, LLMResponse

__all__ = ["LLMClient", "LLMResponse"]
