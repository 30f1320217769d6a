from typing import Any, Dict

from llmadmin.models.enums import AdapterType

from ..adapter_base import register_adapter
from .completions_adapter import CompletionsAdapter

DEFAULT_API_VERSION = "2024-06-01"


class AzureOpenAIAdapter(CompletionsAdapter):
    """Azure OpenAI deployments; the model id is the deployment name."""

    adapter_type = AdapterType.AZURE_OPENAI

    def _api_version(self) -> str:
        return str(self.provider.get_options().get("api_version") or DEFAULT_API_VERSION)

    def get_chat_endpoint(self, model: str) -> str:
        return f"/openai/deployments/{model}/chat/completions?api-version={self._api_version()}"

    def get_models_endpoint(self) -> str:
        return f"/openai/models?api-version={self._api_version()}"

    def get_authorization_header(self) -> Dict[str, Any]:
        headers: Dict[str, Any] = {}
        if self.api_key:
            headers["api-key"] = self.api_key
        return {"scheme": "api-key", "headers": headers}

    def inject_model_parameter(self, model_value: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        # The deployment in the URL selects the model
        return payload


register_adapter(AdapterType.AZURE_OPENAI.value, AzureOpenAIAdapter)
