from typing import Any, Dict, List

import jmespath

from llmadmin.core.logging import get_logger

from ..adapter_base import BaseProviderAdapter, ProviderCompletionResult

logger = get_logger(__name__)

LENGTH_EXCEEDED_MESSAGE = "No response received because the output exceeded the maximum tokens."


class CompletionsAdapter(BaseProviderAdapter):
    """Base adapter for providers implementing OpenAI-style /chat/completions."""

    def get_chat_endpoint(self, model: str) -> str:
        return "/chat/completions"

    def get_models_endpoint(self) -> str:
        return "/models"

    def get_authorization_header(self) -> Dict[str, Any]:
        headers: Dict[str, Any] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return {"scheme": "bearer", "headers": headers}

    def set_messages_in_payload(self, messages: List[Dict[str, str]], payload: Dict[str, Any]) -> Dict[str, Any]:
        payload["messages"] = messages
        return payload

    def post_process_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        payload["stream"] = False
        return payload

    def handle_provider_completion(self, data: Dict[str, Any], model: str) -> ProviderCompletionResult:
        finish_reason = jmespath.search("choices[0].finish_reason", data)
        content = jmespath.search("choices[0].message.content", data)

        # If the provider interrupts for length, we may not get any response at all.
        if finish_reason == "length" and not content:
            content = LENGTH_EXCEEDED_MESSAGE

        usage = jmespath.search("usage", data) or {}
        self._update_usage(
            usage.get("prompt_tokens", 0),
            usage.get("completion_tokens", 0),
            usage.get("total_tokens", 0),
        )

        return ProviderCompletionResult(
            content=content or "",
            model=jmespath.search("model", data) or model,
            usage=self.usage,
            finish_reason=finish_reason,
        )
