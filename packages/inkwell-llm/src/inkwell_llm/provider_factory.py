"""Selects the generation service for a configuration.

The configuration is passed in explicitly; nothing here holds module-level
provider state.
"""

from __future__ import annotations

import httpx

from inkwell_core.ports.llm import GenerationServiceProtocol
from inkwell_llm.ollama import OllamaService
from inkwell_llm.openai_runtime import OpenAICompatibleService
from inkwell_schemas.config import GenerationConfig
from inkwell_schemas.primitives import GenerationProvider


def build_generation_service(
    config: GenerationConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> GenerationServiceProtocol:
    """Return the service matching ``config.provider``.

    Args:
        config: Generation settings.
        http_client: Optional HTTP client for the Ollama service.

    Returns:
        GenerationServiceProtocol: Ready-to-use generation service.
    """
    if config.provider == GenerationProvider.OLLAMA:
        return OllamaService(config, http_client=http_client)
    return OpenAICompatibleService(config)
