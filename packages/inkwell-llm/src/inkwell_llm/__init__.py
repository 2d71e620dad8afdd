"""inkwell-llm: Generation service adapters."""

from inkwell_llm.ollama import OllamaService, check_ollama
from inkwell_llm.openai_runtime import OpenAICompatibleService
from inkwell_llm.provider_factory import build_generation_service

__all__ = [
    "OllamaService",
    "OpenAICompatibleService",
    "build_generation_service",
    "check_ollama",
]
