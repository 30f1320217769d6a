"""Configuration management for the LLM admin backend.

Uses Pydantic Settings for type-safe, environment-based configuration.
"""

from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
# Use override=True to ensure .env changes take effect immediately
load_dotenv(override=True)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App configuration
    app_name: str = Field("LLM Admin", alias="LLMADMIN_APP_NAME")
    debug: bool = Field(False, alias="LLMADMIN_DEBUG")
    version: str = Field("0.0.0-dev", alias="LLMADMIN_APP_VERSION")

    # API configuration
    api_v1_prefix: str = "/api/v1"
    api_host: str = Field("127.0.0.1", alias="LLMADMIN_API_HOST")
    api_port: int = Field(8000, alias="LLMADMIN_API_PORT")
    environment: str = Field("development", alias="LLMADMIN_ENVIRONMENT")
    allowed_origins: list[str] = ["*"]
    cors_credentials: bool = True

    # Database configuration
    database_url: str = Field(alias="LLMADMIN_DATABASE_URL")
    database_pool_size: int = 20
    database_max_overflow: int = 30
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600

    # Logging configuration
    log_level: str = Field("INFO", alias="LLMADMIN_LOG_LEVEL")
    log_format: str = Field("text", alias="LLMADMIN_LOG_FORMAT")  # text or json
    log_dir: str = Field("./data/logs", alias="LLMADMIN_LOG_DIR")
    log_to_file: bool = Field(True, alias="LLMADMIN_LOG_TO_FILE")
    log_retention_days: int = Field(14, alias="LLMADMIN_LOG_RETENTION_DAYS")

    # Provider API keys are stored encrypted with this Fernet key
    encryption_key: str | None = Field(None, alias="LLMADMIN_ENCRYPTION_KEY")

    # LLM call defaults
    llm_global_timeout: int = Field(30, alias="LLMADMIN_LLM_GLOBAL_TIMEOUT")
    llm_read_timeout: int = Field(120, alias="LLMADMIN_LLM_READ_TIMEOUT")
    llm_max_tokens_default: int = Field(1000, alias="LLMADMIN_LLM_MAX_TOKENS_DEFAULT")
    llm_temperature_default: float = Field(0.7, alias="LLMADMIN_LLM_TEMPERATURE_DEFAULT")
    quick_test_default_prompt: str = Field(
        "Hello, please respond with a brief greeting.",
        alias="LLMADMIN_QUICK_TEST_DEFAULT_PROMPT",
    )

    @staticmethod
    def _repo_root_from_this_file() -> Path:
        """Resolve repository root for both local and container layouts.

        - Local dev: <repo>/backend/src/llmadmin/core/config.py -> repo root = <repo>
        - Container: /app/src/llmadmin/core/config.py -> repo root = /app
        """
        here = Path(__file__).resolve()
        src_dir = here.parents[2]
        candidate_parent = src_dir.parent
        return candidate_parent.parent if candidate_parent.name == "backend" else candidate_parent

    @field_validator("log_dir", mode="before")
    @classmethod
    def _resolve_log_dir(cls, v: str) -> str:
        p = Path(v)
        if p.is_absolute():
            return str(p)
        return str((cls._repo_root_from_this_file() / p).resolve())

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
            raise ValueError("Database URL must use postgresql+asyncpg or sqlite+aiosqlite")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment setting."""
        valid_environments = ["development", "staging", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("llm_temperature_default")
    @classmethod
    def validate_temperature_default(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("Default temperature must be between 0.0 and 2.0")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Build a fresh settings instance from the environment."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance - will be created when first accessed
settings = None


def get_settings_instance() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global settings  # noqa: PLW0603
    if settings is None:
        settings = get_settings()
    return settings


class ConfigurationManager:
    """Resolves generation parameters through the priority cascade:
    Configuration → Model limits → Global Defaults.

    Designed for dependency injection; use get_config_manager_dependency() in
    FastAPI endpoints and pass a Settings instance in tests.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def get_temperature(self, config_options: dict[str, Any] | None = None) -> float:
        """Get temperature with configuration override.

        Priority: config_options → global_default
        """
        if config_options and config_options.get("temperature") is not None:
            return float(config_options["temperature"])
        return self.settings.llm_temperature_default

    def get_max_tokens(
        self,
        config_options: dict[str, Any] | None = None,
        model_max_output_tokens: int | None = None,
    ) -> int:
        """Get max_tokens, clamped to the model's output limit when known.

        Priority: config_options → global_default
        """
        if config_options and config_options.get("max_tokens"):
            value = int(config_options["max_tokens"])
        else:
            value = self.settings.llm_max_tokens_default
        if model_max_output_tokens and model_max_output_tokens > 0:
            value = min(value, model_max_output_tokens)
        return value

    def resolve_llm_params(
        self,
        config_options: dict[str, Any] | None = None,
        model_max_output_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Build the full parameter set sent to the provider adapter."""
        params: dict[str, Any] = {
            "temperature": self.get_temperature(config_options),
            "max_tokens": self.get_max_tokens(config_options, model_max_output_tokens),
        }
        for key in ("top_p", "frequency_penalty", "presence_penalty"):
            if config_options and config_options.get(key) is not None:
                params[key] = float(config_options[key])
        return params
