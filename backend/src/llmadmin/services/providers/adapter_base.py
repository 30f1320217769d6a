"""Provider adapter base interface and factory.

Adapters encapsulate provider-specific behavior for one-shot completions and
model discovery: endpoints, auth headers, payload shape, and the JMESPath
expressions used to read replies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from llmadmin.core.config import get_settings_instance
from llmadmin.core.encryption import get_encryption_service
from llmadmin.core.exceptions import EncryptionError, LLMConfigurationError
from llmadmin.core.logging import get_logger
from llmadmin.models.enums import AdapterType, ModelCapability
from llmadmin.models.provider import Provider

logger = get_logger(__name__)


@dataclass
class ProviderAdapterContext:
    """Execution context passed to adapters.

    Attributes:
        provider: Provider ORM row
        api_key: Plain API key; when omitted the stored key is decrypted

    """

    provider: Provider
    api_key: Optional[str] = None


@dataclass
class ProviderCompletionResult:
    """Normalized completion reply of one provider call."""

    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: Optional[str] = None


class BaseProviderAdapter:
    """Base class for provider adapters.

    Subclasses override helpers to translate generic requests into
    provider-specific payloads and to parse replies.
    """

    adapter_type: AdapterType

    def __init__(self, context: ProviderAdapterContext):
        self.provider = context.provider
        self.settings = get_settings_instance()
        self.api_key = context.api_key
        self.usage: Dict[str, int] = {}

        if self.api_key is None and self.provider.api_key:
            self.api_key = self._decrypt_api_key(self.provider.api_key)

    def _decrypt_api_key(self, encrypted_key: str) -> str:
        """Decrypt stored API key."""
        try:
            return get_encryption_service().decrypt(encrypted_key)
        except EncryptionError as e:
            logger.error(f"Failed to decrypt API key for provider {self.provider.identifier}: {e.message}")
            raise LLMConfigurationError(f"Failed to decrypt API key: {e.message}") from e

    def _update_usage(self, input_tokens: Any, output_tokens: Any, total_tokens: Any = None) -> Dict[str, int]:
        prompt = max(int(input_tokens or 0), 0)
        completion = max(int(output_tokens or 0), 0)
        total = max(int(total_tokens or 0), prompt + completion)
        self.usage = {"prompt_tokens": prompt, "completion_tokens": completion, "total_tokens": total}
        return self.usage

    # GENERAL PROVIDER SETTINGS
    def requires_api_key(self) -> bool:
        return self.adapter_type.requires_api_key

    def is_available(self) -> bool:
        """A provider is usable when it has an endpoint and, if needed, a key."""
        if not self.get_api_base_url():
            return False
        return bool(self.api_key) or not self.requires_api_key()

    def get_api_base_url(self) -> Optional[str]:
        return self.provider.effective_endpoint

    def get_chat_endpoint(self, model: str) -> str:
        raise NotImplementedError("Function get_chat_endpoint is not implemented.")

    def get_models_endpoint(self) -> str:
        raise NotImplementedError("Function get_models_endpoint is not implemented.")

    def get_authorization_header(self) -> Dict[str, Any]:
        raise NotImplementedError("Function get_authorization_header is not implemented.")

    def get_model_information_path(self) -> str:
        """JMESPath producing ``[{id, name, context_length?, max_output_tokens?}]``."""
        return "data[*].{id: id, name: id}"

    def build_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        auth_def = self.get_authorization_header()
        if isinstance(auth_def, dict):
            for k, v in (auth_def.get("headers") or {}).items():
                headers[k] = str(v)
        return headers

    def normalize_model_id(self, model_id: str) -> str:
        return model_id

    def infer_capabilities(self, model_id: str) -> List[str]:
        """Best-effort capability tags for a discovered model id."""
        lowered = model_id.lower()
        if "embed" in lowered:
            return [ModelCapability.EMBEDDINGS.value]
        capabilities = [ModelCapability.CHAT.value, ModelCapability.STREAMING.value]
        if any(marker in lowered for marker in ("vision", "llava", "gpt-4o", "gpt-4.1", "claude-3", "claude-sonnet", "claude-opus", "gemini")):
            capabilities.append(ModelCapability.VISION.value)
        if any(marker in lowered for marker in ("gpt-4", "claude", "gemini", "mistral-large", "llama-3", "qwen")):
            capabilities.append(ModelCapability.TOOLS.value)
        return capabilities

    # PAYLOAD BUILDERS
    def set_messages_in_payload(self, messages: List[Dict[str, str]], payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError("Function set_messages_in_payload is not implemented.")

    def inject_model_parameter(self, model_value: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        payload["model"] = model_value
        return payload

    def inject_generation_parameters(self, params: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        for key in ("temperature", "max_tokens", "top_p", "frequency_penalty", "presence_penalty"):
            if params.get(key) is not None:
                payload[key] = params[key]
        return payload

    def post_process_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return payload

    def build_payload(self, messages: List[Dict[str, str]], model: str, params: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        payload = self.inject_model_parameter(model, payload)
        payload = self.set_messages_in_payload(messages, payload)
        payload = self.inject_generation_parameters(params, payload)
        return self.post_process_payload(payload)

    # PROVIDER HANDLERS
    def handle_provider_completion(self, data: Dict[str, Any], model: str) -> ProviderCompletionResult:
        raise NotImplementedError("Function handle_provider_completion is not implemented.")


# Registry mapping adapter name -> class
_ADAPTERS: Dict[str, Type[BaseProviderAdapter]] = {}


def register_adapter(name: str, cls: Type[BaseProviderAdapter]) -> None:
    _ADAPTERS[name] = cls


def registered_adapters() -> List[str]:
    return sorted(_ADAPTERS)


def get_adapter(name: str, context: ProviderAdapterContext) -> BaseProviderAdapter:
    if name not in _ADAPTERS:
        raise LLMConfigurationError(f"Unknown provider adapter '{name}'")
    return _ADAPTERS[name](context)


def get_adapter_from_provider(provider: Provider, api_key: Optional[str] = None) -> BaseProviderAdapter:
    return get_adapter(provider.adapter_type, ProviderAdapterContext(provider=provider, api_key=api_key))
