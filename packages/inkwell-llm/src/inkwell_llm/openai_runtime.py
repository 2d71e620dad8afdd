"""OpenAI-compatible generation service powered by pydantic-ai."""

from __future__ import annotations

from typing import cast

import openai
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.models.openai import OpenAIChatModel, OpenAIChatModelSettings
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from inkwell_core.errors import ServiceError
from inkwell_core.ports.llm import GenerationServiceProtocol
from inkwell_core.util.logging import get_logger
from inkwell_schemas.config import GenerationConfig

logger = get_logger(__name__)


class OpenAICompatibleService(GenerationServiceProtocol):
    """Generation service for hosted OpenAI-compatible endpoints (Gemini included)."""

    def __init__(self, config: GenerationConfig) -> None:
        """Initialize the service.

        Args:
            config: Generation settings; ``api_key`` must be set.

        Raises:
            ValueError: If no API key is configured.
        """
        if config.api_key is None:
            raise ValueError("OpenAI-compatible service requires an api_key")
        self.config = config
        provider = OpenAIProvider(
            base_url=config.base_url,
            api_key=config.api_key.get_secret_value(),
        )
        self._model = OpenAIChatModel(config.model, provider=provider)
        self._settings: OpenAIChatModelSettings = {
            "temperature": config.temperature,
            "top_p": config.top_p,
            "timeout": config.timeout_s,
        }

    async def generate(self, prompt: str, system_instruction: str) -> str:
        """Run *prompt* under *system_instruction* and return the text output.

        Returns:
            str: Generated text.

        Raises:
            ServiceError: If the request fails or the model returns no text.
        """
        agent = Agent(self._model, instructions=system_instruction)
        try:
            result = await agent.run(prompt, model_settings=cast(ModelSettings, self._settings))
        except (AgentRunError, openai.APIError) as exc:
            logger.warning("Generation request to %s failed: %s", self.config.model, exc)
            raise ServiceError(str(exc), provider=self.config.provider) from exc
        text = str(result.output)
        if not text.strip():
            raise ServiceError("Model returned an empty response", provider=self.config.provider)
        return text
