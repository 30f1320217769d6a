from typing import Any, Dict, List

import jmespath

from llmadmin.core.logging import get_logger
from llmadmin.models.enums import AdapterType

from ..adapter_base import BaseProviderAdapter, ProviderCompletionResult, register_adapter

logger = get_logger(__name__)


class OllamaAdapter(BaseProviderAdapter):
    """Adapter for Ollama's native /api/chat endpoint."""

    adapter_type = AdapterType.OLLAMA

    def get_chat_endpoint(self, model: str) -> str:
        return "/chat"

    def get_models_endpoint(self) -> str:
        return "/tags"

    def get_authorization_header(self) -> Dict[str, Any]:
        # Local default: no auth header unless a reverse proxy needs one.
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        return {"scheme": None, "headers": headers}

    def get_model_information_path(self) -> str:
        return "models[*].{id: name, name: name}"

    def set_messages_in_payload(self, messages: List[Dict[str, str]], payload: Dict[str, Any]) -> Dict[str, Any]:
        payload["messages"] = messages
        return payload

    def inject_generation_parameters(self, params: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        key_map = {
            "temperature": "temperature",
            "top_p": "top_p",
            "max_tokens": "num_predict",
            "frequency_penalty": "frequency_penalty",
            "presence_penalty": "presence_penalty",
        }
        options = {target: params[source] for source, target in key_map.items() if params.get(source) is not None}
        if options:
            payload["options"] = options
        return payload

    def post_process_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        payload["stream"] = False
        return payload

    def handle_provider_completion(self, data: Dict[str, Any], model: str) -> ProviderCompletionResult:
        self._update_usage(data.get("prompt_eval_count", 0), data.get("eval_count", 0))
        return ProviderCompletionResult(
            content=jmespath.search("message.content", data) or "",
            model=data.get("model") or model,
            usage=self.usage,
            finish_reason=data.get("done_reason"),
        )


register_adapter(AdapterType.OLLAMA.value, OllamaAdapter)
