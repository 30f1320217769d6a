from typing import Any, Dict, List

import jmespath

from llmadmin.core.logging import get_logger
from llmadmin.models.enums import AdapterType

from ..adapter_base import BaseProviderAdapter, ProviderCompletionResult, register_adapter

logger = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
# The messages API requires max_tokens
DEFAULT_MAX_TOKENS = 1024


class AnthropicAdapter(BaseProviderAdapter):
    adapter_type = AdapterType.ANTHROPIC

    def get_chat_endpoint(self, model: str) -> str:
        return "/messages"

    def get_models_endpoint(self) -> str:
        return "/models"

    def get_authorization_header(self) -> Dict[str, Any]:
        return {
            "scheme": "x-api-key",
            "headers": {"x-api-key": f"{self.api_key}", "anthropic-version": ANTHROPIC_VERSION},
        }

    def get_model_information_path(self) -> str:
        return "data[*].{id: id, name: display_name}"

    def set_messages_in_payload(self, messages: List[Dict[str, str]], payload: Dict[str, Any]) -> Dict[str, Any]:
        system_messages: List[str] = []
        formatted_messages: List[Dict[str, Any]] = []

        for msg in messages:
            role = msg.get("role")
            content = msg.get("content")
            if role == "system":
                if isinstance(content, str):
                    system_messages.append(content)
                continue

            formatted_messages.append({"role": role, "content": content})

        if system_messages:
            payload["system"] = "\n\n".join(system_messages)

        payload["messages"] = formatted_messages
        return payload

    def inject_generation_parameters(self, params: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        # Anthropic has no frequency/presence penalties and caps temperature at 1
        if params.get("temperature") is not None:
            payload["temperature"] = min(float(params["temperature"]), 1.0)
        if params.get("top_p") is not None:
            payload["top_p"] = params["top_p"]
        payload["max_tokens"] = params.get("max_tokens") or DEFAULT_MAX_TOKENS
        return payload

    def handle_provider_completion(self, data: Dict[str, Any], model: str) -> ProviderCompletionResult:
        usage = jmespath.search("usage", data) or {}
        self._update_usage(usage.get("input_tokens", 0), usage.get("output_tokens", 0))

        text_parts = jmespath.search("content[?type=='text'].text", data) or []
        return ProviderCompletionResult(
            content="".join(text_parts),
            model=data.get("model") or model,
            usage=self.usage,
            finish_reason=data.get("stop_reason"),
        )


register_adapter(AdapterType.ANTHROPIC.value, AnthropicAdapter)
