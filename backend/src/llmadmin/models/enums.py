"""Enumerations shared by the registry models."""

from enum import Enum


class AdapterType(str, Enum):
    """Protocol family a provider speaks."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OPENROUTER = "openrouter"
    MISTRAL = "mistral"
    GROQ = "groq"
    OLLAMA = "ollama"
    AZURE_OPENAI = "azure_openai"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _ADAPTER_LABELS[self]

    @property
    def default_endpoint(self) -> str | None:
        return _ADAPTER_ENDPOINTS.get(self)

    @property
    def requires_api_key(self) -> bool:
        return self is not AdapterType.OLLAMA

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


_ADAPTER_LABELS = {
    AdapterType.OPENAI: "OpenAI",
    AdapterType.ANTHROPIC: "Anthropic",
    AdapterType.GEMINI: "Google Gemini",
    AdapterType.OPENROUTER: "OpenRouter",
    AdapterType.MISTRAL: "Mistral AI",
    AdapterType.GROQ: "Groq",
    AdapterType.OLLAMA: "Ollama (Local)",
    AdapterType.AZURE_OPENAI: "Azure OpenAI",
    AdapterType.CUSTOM: "Custom (OpenAI-compatible)",
}

# azure_openai and custom have no default; the provider must set endpoint_url.
_ADAPTER_ENDPOINTS = {
    AdapterType.OPENAI: "https://api.openai.com/v1",
    AdapterType.ANTHROPIC: "https://api.anthropic.com/v1",
    AdapterType.GEMINI: "https://generativelanguage.googleapis.com/v1beta",
    AdapterType.OPENROUTER: "https://openrouter.ai/api/v1",
    AdapterType.MISTRAL: "https://api.mistral.ai/v1",
    AdapterType.GROQ: "https://api.groq.com/openai/v1",
    AdapterType.OLLAMA: "http://localhost:11434/api",
}


class ModelCapability(str, Enum):
    CHAT = "chat"
    COMPLETION = "completion"
    EMBEDDINGS = "embeddings"
    VISION = "vision"
    STREAMING = "streaming"
    TOOLS = "tools"
    JSON_MODE = "json_mode"
    AUDIO = "audio"


class TaskCategory(str, Enum):
    LOG_ANALYSIS = "log_analysis"
    CONTENT = "content"
    SYSTEM = "system"
    DEVELOPER = "developer"
    GENERAL = "general"


class TaskInputType(str, Enum):
    MANUAL = "manual"
    SYSLOG = "syslog"
    DEPRECATION_LOG = "deprecation_log"
    TABLE = "table"
    FILE = "file"


class TaskOutputFormat(str, Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    PLAIN = "plain"
    HTML = "html"
