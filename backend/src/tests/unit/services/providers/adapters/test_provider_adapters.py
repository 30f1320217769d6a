"""
Unit tests for provider adapters: endpoints, headers, payload shapes and
completion parsing for each protocol family.
"""

import pytest

from llmadmin.core.exceptions import LLMConfigurationError
from llmadmin.models import Provider
from llmadmin.services.providers.adapter_base import (
    ProviderAdapterContext,
    get_adapter,
    get_adapter_from_provider,
    registered_adapters,
)
from llmadmin.services.providers.adapters.completions_adapter import LENGTH_EXCEEDED_MESSAGE

MESSAGES = [
    {"role": "system", "content": "Be brief."},
    {"role": "user", "content": "Hi"},
]


def make_adapter(adapter_type: str, api_key: str | None = "secret", **fields):
    provider = Provider(identifier=f"{adapter_type}-test", name="Test", adapter_type=adapter_type, **fields)
    return get_adapter(adapter_type, ProviderAdapterContext(provider=provider, api_key=api_key))


class TestRegistry:
    def test_all_adapter_types_registered(self) -> None:
        assert registered_adapters() == sorted(
            ["anthropic", "azure_openai", "custom", "gemini", "groq", "mistral", "ollama", "openai", "openrouter"]
        )

    def test_unknown_adapter(self) -> None:
        provider = Provider(identifier="odd", name="Odd", adapter_type="carrier-pigeon")
        with pytest.raises(LLMConfigurationError, match="Unknown provider adapter 'carrier-pigeon'"):
            get_adapter_from_provider(provider)

    def test_availability(self) -> None:
        assert make_adapter("openai").is_available() is True
        assert make_adapter("openai", api_key=None).is_available() is False
        assert make_adapter("ollama", api_key=None).is_available() is True
        # custom has no default endpoint
        assert make_adapter("custom").is_available() is False
        assert make_adapter("custom", endpoint_url="http://llm.local/v1").is_available() is True

    @pytest.mark.parametrize(
        "model_id, expected",
        [
            ("text-embedding-3-small", ["embeddings"]),
            ("gpt-4o", ["chat", "streaming", "vision", "tools"]),
            ("gpt-3.5-turbo", ["chat", "streaming"]),
            ("llava:13b", ["chat", "streaming", "vision"]),
        ],
    )
    def test_infer_capabilities(self, model_id, expected) -> None:
        assert make_adapter("openai").infer_capabilities(model_id) == expected


class TestOpenAICompatible:
    def test_headers_include_bearer_and_organization(self) -> None:
        adapter = make_adapter("openai", organization_id="org-42")
        headers = adapter.build_headers()
        assert headers["Authorization"] == "Bearer secret"
        assert headers["OpenAI-Organization"] == "org-42"
        assert headers["Content-Type"] == "application/json"

    def test_payload(self) -> None:
        payload = make_adapter("groq").build_payload(MESSAGES, "llama-3.1-8b", {"temperature": 0.2, "max_tokens": 10})
        assert payload == {
            "model": "llama-3.1-8b",
            "messages": MESSAGES,
            "temperature": 0.2,
            "max_tokens": 10,
            "stream": False,
        }

    def test_openrouter_sends_app_title(self) -> None:
        assert "X-Title" in make_adapter("openrouter").build_headers()

    def test_completion_parsing(self) -> None:
        result = make_adapter("openai").handle_provider_completion(
            {
                "model": "gpt-4o-2024-08-06",
                "choices": [{"message": {"content": "Hello"}, "finish_reason": "stop"}],
                "usage": {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6},
            },
            "gpt-4o",
        )
        assert result.content == "Hello"
        assert result.model == "gpt-4o-2024-08-06"
        assert result.usage == {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6}

    def test_length_cutoff_without_content(self) -> None:
        result = make_adapter("openai").handle_provider_completion(
            {"choices": [{"message": {"content": None}, "finish_reason": "length"}]}, "gpt-4o"
        )
        assert result.content == LENGTH_EXCEEDED_MESSAGE
        assert result.model == "gpt-4o"
        assert result.usage["total_tokens"] == 0


class TestAzureOpenAI:
    def test_deployment_endpoint_and_key_header(self) -> None:
        adapter = make_adapter(
            "azure_openai",
            endpoint_url="https://acme.openai.azure.com/",
            options={"api_version": "2024-10-21"},
        )
        assert adapter.get_api_base_url() == "https://acme.openai.azure.com"
        assert adapter.get_chat_endpoint("gpt4o-prod") == "/openai/deployments/gpt4o-prod/chat/completions?api-version=2024-10-21"
        headers = adapter.build_headers()
        assert headers["api-key"] == "secret"
        assert "Authorization" not in headers
        assert "model" not in adapter.build_payload(MESSAGES, "gpt4o-prod", {})


class TestAnthropic:
    def test_system_messages_are_lifted(self) -> None:
        payload = make_adapter("anthropic").build_payload(MESSAGES, "claude-3-5-haiku", {"temperature": 1.7})
        assert payload["system"] == "Be brief."
        assert payload["messages"] == [{"role": "user", "content": "Hi"}]
        assert payload["temperature"] == 1.0
        assert payload["max_tokens"] == 1024
        assert "frequency_penalty" not in payload

    def test_headers(self) -> None:
        headers = make_adapter("anthropic").build_headers()
        assert headers["x-api-key"] == "secret"
        assert headers["anthropic-version"] == "2023-06-01"

    def test_completion_parsing(self) -> None:
        result = make_adapter("anthropic").handle_provider_completion(
            {
                "model": "claude-3-5-haiku-20241022",
                "content": [{"type": "text", "text": "Hel"}, {"type": "text", "text": "lo"}],
                "stop_reason": "end_turn",
                "usage": {"input_tokens": 9, "output_tokens": 2},
            },
            "claude-3-5-haiku",
        )
        assert result.content == "Hello"
        assert result.usage == {"prompt_tokens": 9, "completion_tokens": 2, "total_tokens": 11}
        assert result.finish_reason == "end_turn"


class TestGemini:
    def test_endpoint_strips_models_prefix(self) -> None:
        adapter = make_adapter("gemini")
        assert adapter.get_chat_endpoint("models/gemini-1.5-flash") == "/models/gemini-1.5-flash:generateContent"
        assert adapter.build_headers()["x-goog-api-key"] == "secret"

    def test_payload_shape(self) -> None:
        payload = make_adapter("gemini").build_payload(
            MESSAGES + [{"role": "assistant", "content": "Hey"}],
            "gemini-1.5-flash",
            {"temperature": 0.4, "max_tokens": 256},
        )
        assert "model" not in payload
        assert payload["system_instruction"] == {"parts": [{"text": "Be brief."}]}
        assert [c["role"] for c in payload["contents"]] == ["user", "model"]
        assert payload["generationConfig"] == {"temperature": 0.4, "maxOutputTokens": 256}

    def test_completion_parsing(self) -> None:
        result = make_adapter("gemini").handle_provider_completion(
            {
                "candidates": [{"content": {"parts": [{"text": "Hi there"}]}, "finishReason": "STOP"}],
                "usageMetadata": {"promptTokenCount": 4, "candidatesTokenCount": 2, "totalTokenCount": 6},
            },
            "gemini-1.5-flash",
        )
        assert result.content == "Hi there"
        assert result.model == "gemini-1.5-flash"
        assert result.usage["total_tokens"] == 6


class TestOllama:
    def test_options_and_no_auth_by_default(self) -> None:
        adapter = make_adapter("ollama", api_key=None)
        payload = adapter.build_payload(MESSAGES, "llama3", {"temperature": 0.1, "max_tokens": 50})
        assert payload["options"] == {"temperature": 0.1, "num_predict": 50}
        assert payload["stream"] is False
        assert "Authorization" not in adapter.build_headers()
        assert adapter.get_api_base_url() == "http://localhost:11434/api"

    def test_completion_parsing(self) -> None:
        result = make_adapter("ollama", api_key=None).handle_provider_completion(
            {"model": "llama3", "message": {"content": "ok"}, "prompt_eval_count": 3, "eval_count": 1, "done_reason": "stop"},
            "llama3",
        )
        assert result.content == "ok"
        assert result.usage == {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4}
