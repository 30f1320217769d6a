from typing import Any, Dict

from llmadmin.models.enums import AdapterType

from ..adapter_base import register_adapter
from .completions_adapter import CompletionsAdapter


class OpenAIAdapter(CompletionsAdapter):
    adapter_type = AdapterType.OPENAI

    def get_authorization_header(self) -> Dict[str, Any]:
        auth = super().get_authorization_header()
        if self.provider.organization_id:
            auth["headers"]["OpenAI-Organization"] = self.provider.organization_id
        return auth


class OpenRouterAdapter(CompletionsAdapter):
    adapter_type = AdapterType.OPENROUTER

    def get_authorization_header(self) -> Dict[str, Any]:
        auth = super().get_authorization_header()
        auth["headers"]["X-Title"] = self.settings.app_name
        return auth

    def get_model_information_path(self) -> str:
        return (
            "data[*].{id: id, name: name, context_length: context_length, "
            "max_output_tokens: top_provider.max_completion_tokens}"
        )


class MistralAdapter(CompletionsAdapter):
    adapter_type = AdapterType.MISTRAL

    def get_model_information_path(self) -> str:
        return "data[*].{id: id, name: id, context_length: max_context_length}"


class GroqAdapter(CompletionsAdapter):
    adapter_type = AdapterType.GROQ

    def get_model_information_path(self) -> str:
        return "data[*].{id: id, name: id, context_length: context_window, max_output_tokens: max_completion_tokens}"


class CustomCompletionsAdapter(CompletionsAdapter):
    """Any OpenAI-compatible server; the endpoint must be configured."""

    adapter_type = AdapterType.CUSTOM


register_adapter(AdapterType.OPENAI.value, OpenAIAdapter)
register_adapter(AdapterType.OPENROUTER.value, OpenRouterAdapter)
register_adapter(AdapterType.MISTRAL.value, MistralAdapter)
register_adapter(AdapterType.GROQ.value, GroqAdapter)
register_adapter(AdapterType.CUSTOM.value, CustomCompletionsAdapter)
