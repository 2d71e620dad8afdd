"""Configuration schemas for generation backends."""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator, model_validator

from inkwell_schemas.base import BaseSchema
from inkwell_schemas.primitives import GenerationProvider

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"


class GenerationConfig(BaseSchema):
    """Explicit generation settings handed to a service at construction time."""

    provider: GenerationProvider = Field(GenerationProvider.GEMINI, description="Backend to call")
    api_key: SecretStr | None = Field(None, description="API key for hosted providers")
    base_url: str = Field(GEMINI_OPENAI_BASE_URL, description="OpenAI-compatible endpoint base URL")
    model: str = Field("gemini-3-pro-preview", min_length=1, description="Hosted model identifier")
    ollama_endpoint: str = Field(DEFAULT_OLLAMA_ENDPOINT, description="Local Ollama server URL")
    ollama_model: str = Field("llama3", min_length=1, description="Local Ollama model name")
    temperature: float = Field(0.8, ge=0, le=2, description="Sampling temperature")
    top_p: float = Field(0.95, ge=0, le=1, description="Top-p sampling")
    timeout_s: float = Field(120.0, gt=0, description="Request timeout in seconds")

    @field_validator("base_url", "ollama_endpoint")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"expected an http(s) URL, got {value!r}")
        return value

    @model_validator(mode="after")
    def validate_credentials(self) -> GenerationConfig:
        """Ensure hosted providers carry an API key.

        Returns:
            GenerationConfig: The validated configuration.

        Raises:
            ValueError: If the hosted provider is selected without an API key.
        """
        if self.provider == GenerationProvider.GEMINI and (
            self.api_key is None or not self.api_key.get_secret_value()
        ):
            raise ValueError("api_key is required for the gemini provider")
        return self
