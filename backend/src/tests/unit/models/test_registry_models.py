"""
Unit tests for the registry ORM models.

These exercise the pure-Python helpers on the models; persistence is covered
by the repository tests.
"""

import pytest

from llmadmin.models import AdapterType, Configuration, Model, ModelCapability, Provider, Task


class TestAdapterType:
    def test_only_ollama_runs_without_api_key(self) -> None:
        keyless = [a for a in AdapterType if not a.requires_api_key]
        assert keyless == [AdapterType.OLLAMA]

    def test_azure_and_custom_need_an_endpoint(self) -> None:
        assert AdapterType.AZURE_OPENAI.default_endpoint is None
        assert AdapterType.CUSTOM.default_endpoint is None
        assert AdapterType.OPENAI.default_endpoint == "https://api.openai.com/v1"

    def test_values(self) -> None:
        assert "anthropic" in AdapterType.values()
        assert AdapterType.GEMINI.label == "Google Gemini"


class TestProvider:
    def test_effective_endpoint_prefers_override(self) -> None:
        provider = Provider(identifier="local", name="Local", adapter_type="openai", endpoint_url="http://proxy:8080/v1/")
        assert provider.effective_endpoint == "http://proxy:8080/v1"

    def test_effective_endpoint_falls_back_to_adapter_default(self) -> None:
        provider = Provider(identifier="claude", name="Claude", adapter_type="anthropic")
        assert provider.effective_endpoint == "https://api.anthropic.com/v1"
        assert not provider.has_api_key

    def test_get_options_copies(self) -> None:
        provider = Provider(identifier="p", name="P", adapter_type="openai", options={"api_version": "1"})
        options = provider.get_options()
        options["api_version"] = "2"
        assert provider.options == {"api_version": "1"}
        assert Provider(identifier="q", name="Q", adapter_type="openai").get_options() == {}


class TestModelCapabilities:
    def test_capabilities_deduplicated_in_order(self) -> None:
        model = Model(identifier="m", name="M", model_id="gpt-4o")
        model.capabilities = ["chat", "vision", "chat", ModelCapability.TOOLS]
        assert model.capabilities == ["chat", "vision", "tools"]
        assert model.has_capability("vision")
        assert not model.has_capability(ModelCapability.EMBEDDINGS)

    def test_empty_capabilities(self) -> None:
        model = Model(identifier="m", name="M", model_id="gpt-4o")
        model.capabilities = []
        assert model.capabilities == []

    def test_unknown_capability_rejected(self) -> None:
        model = Model(identifier="m", name="M", model_id="gpt-4o")
        with pytest.raises(ValueError):
            model.capabilities = ["telepathy"]


class TestConfigurationOptions:
    def test_options_merged_last(self) -> None:
        configuration = Configuration(
            identifier="c",
            name="C",
            temperature=0.2,
            max_tokens=300,
            top_p=1.0,
            frequency_penalty=0.0,
            presence_penalty=0.0,
            system_prompt="Be terse.",
            options={"temperature": 0.9},
        )
        options = configuration.to_options()
        assert options["temperature"] == 0.9
        assert options["max_tokens"] == 300
        assert options["system_prompt"] == "Be terse."

    def test_daily_limits(self) -> None:
        configuration = Configuration(identifier="c", name="C", max_requests_per_day=0, max_tokens_per_day=0, max_cost_per_day=0)
        assert not configuration.has_daily_limits()
        configuration.max_tokens_per_day = 10_000
        assert configuration.has_daily_limits()


class TestTaskPrompt:
    def test_input_placeholder_filled(self) -> None:
        task = Task(identifier="t", name="T", prompt_template="Summarize:\n{{ input }}")
        assert task.build_prompt({"input": "line one"}) == "Summarize:\nline one"

    def test_unknown_placeholder_left_as_written(self) -> None:
        task = Task(identifier="t", name="T", prompt_template="{{input}} for {{audience}}")
        assert task.build_prompt({"input": "logs"}) == "logs for {{audience}}"

    def test_placeholders_listed_once(self) -> None:
        task = Task(identifier="t", name="T", prompt_template="{{input}} {{lang}} {{input}}")
        assert task.placeholders() == ["input", "lang"]
