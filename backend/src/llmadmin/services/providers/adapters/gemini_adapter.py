from typing import Any, Dict, List

import jmespath

from llmadmin.core.logging import get_logger
from llmadmin.models.enums import AdapterType

from ..adapter_base import BaseProviderAdapter, ProviderCompletionResult, register_adapter

logger = get_logger(__name__)


class GeminiAdapter(BaseProviderAdapter):
    adapter_type = AdapterType.GEMINI

    def get_chat_endpoint(self, model: str) -> str:
        return f"/models/{self.normalize_model_id(model)}:generateContent"

    def get_models_endpoint(self) -> str:
        return "/models"

    def get_authorization_header(self) -> Dict[str, Any]:
        return {"scheme": "api-key", "headers": {"x-goog-api-key": f"{self.api_key}"}}

    def get_model_information_path(self) -> str:
        return (
            "models[?contains(supportedGenerationMethods, 'generateContent')]"
            ".{id: name, name: displayName, context_length: inputTokenLimit, max_output_tokens: outputTokenLimit}"
        )

    def normalize_model_id(self, model_id: str) -> str:
        return model_id.removeprefix("models/")

    def inject_model_parameter(self, model_value: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        # The model is part of the URL
        return payload

    def set_messages_in_payload(self, messages: List[Dict[str, str]], payload: Dict[str, Any]) -> Dict[str, Any]:
        system_parts: List[Dict[str, Any]] = []
        contents: List[Dict[str, Any]] = []

        for msg in messages:
            role = msg.get("role", "")
            content = msg.get("content", "")
            if role == "system":
                system_parts.append({"text": content})
                continue
            contents.append({"role": "user" if role == "user" else "model", "parts": [{"text": content}]})

        if system_parts:
            payload["system_instruction"] = {"parts": system_parts}

        payload["contents"] = contents
        return payload

    def inject_generation_parameters(self, params: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        # Move generation knobs under generationConfig as Gemini expects
        key_map = {
            "temperature": "temperature",
            "top_p": "topP",
            "max_tokens": "maxOutputTokens",
            "frequency_penalty": "frequencyPenalty",
            "presence_penalty": "presencePenalty",
        }
        generation_config = dict(payload.get("generationConfig") or {})
        for source, target in key_map.items():
            if params.get(source) is not None:
                generation_config[target] = params[source]
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    def handle_provider_completion(self, data: Dict[str, Any], model: str) -> ProviderCompletionResult:
        usage = data.get("usageMetadata") or {}
        self._update_usage(
            usage.get("promptTokenCount", 0),
            usage.get("candidatesTokenCount", 0),
            usage.get("totalTokenCount", 0),
        )

        text_parts = jmespath.search("candidates[0].content.parts[*].text", data) or []
        return ProviderCompletionResult(
            content="".join(text_parts),
            model=data.get("modelVersion") or model,
            usage=self.usage,
            finish_reason=jmespath.search("candidates[0].finishReason", data),
        )


register_adapter(AdapterType.GEMINI.value, GeminiAdapter)
