"""
Completion plumbing shared by quick tests, model tests, configuration tests
and task execution.

Generation parameters are resolved through the ConfigurationManager cascade
(configuration value, then model limit, then global default).
"""

from typing import Any, Dict, Optional

import httpx

from ..core.config import ConfigurationManager, get_settings_instance
from ..core.exceptions import LLMConfigurationError
from ..core.logging import get_logger
from ..llm.client import LLMClient, LLMResponse
from ..models import Configuration, Model
from ..schemas.common import UsageInfo

logger = get_logger(__name__)


def usage_from_response(response: LLMResponse) -> UsageInfo:
    usage = response.usage or {}
    return UsageInfo(
        prompt_tokens=max(int(usage.get("prompt_tokens", 0) or 0), 0),
        completion_tokens=max(int(usage.get("completion_tokens", 0) or 0), 0),
        total_tokens=max(int(usage.get("total_tokens", 0) or 0), 0),
    )


class CompletionService:
    """Runs one-shot completions against registered models."""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        self.http_client = http_client
        self.config_manager = config_manager or ConfigurationManager(get_settings_instance())

    def client_for(self, model: Model, max_retries: Optional[int] = None) -> LLMClient:
        if model.provider is None:
            raise LLMConfigurationError("Model has no provider configured")
        return LLMClient(model.provider, http_client=self.http_client, max_retries=max_retries)

    async def complete_with_model(
        self,
        prompt: str,
        model: Model,
        config_options: Optional[Dict[str, Any]] = None,
        max_retries: Optional[int] = None,
    ) -> LLMResponse:
        """Send `prompt` to `model`; `config_options` may carry a system_prompt."""
        client = self.client_for(model, max_retries=max_retries)
        options = dict(config_options or {})
        params = self.config_manager.resolve_llm_params(options, model.max_output_tokens or None)
        logger.debug(
            "Running completion",
            extra={"model": model.identifier, "provider": model.provider.identifier, "params": params},
        )
        return await client.complete(
            prompt,
            model.model_id,
            system_prompt=options.get("system_prompt"),
            llm_params=params,
        )

    async def complete_with_configuration(self, prompt: str, configuration: Configuration) -> LLMResponse:
        if configuration.model is None or configuration.model.provider is None:
            raise LLMConfigurationError("Configuration has no model assigned")
        return await self.complete_with_model(prompt, configuration.model, configuration.to_options())
