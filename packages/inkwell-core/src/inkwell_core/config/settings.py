"""Runtime settings and environment loading utilities."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from inkwell_schemas.config import DEFAULT_OLLAMA_ENDPOINT, GEMINI_OPENAI_BASE_URL, GenerationConfig
from inkwell_schemas.primitives import GenerationProvider

_ENV_PATH = Path(".env")


class StudioSettings(BaseSettings):
    """Settings loaded from ``INKWELL_*`` environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=_ENV_PATH,
        env_file_encoding="utf-8",
        env_prefix="INKWELL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Persistence
    data_dir: Path = Field(default=Path(".inkwell"))
    owner_id: str = Field(default="local")

    # Sync behaviour
    debounce_seconds: float = Field(default=0.5, gt=0)
    max_scan_chars: int = Field(default=30_000, gt=0)
    log_level: str = Field(default="info")

    # Generation backend
    provider: GenerationProvider = Field(default=GenerationProvider.GEMINI)
    api_key: SecretStr | None = Field(default=None)
    base_url: str = Field(default=GEMINI_OPENAI_BASE_URL)
    model: str = Field(default="gemini-3-pro-preview")
    ollama_endpoint: str = Field(default=DEFAULT_OLLAMA_ENDPOINT)
    ollama_model: str = Field(default="llama3")

    def to_generation_config(self) -> GenerationConfig:
        """Build the explicit generation config handed to service adapters.

        Returns:
            GenerationConfig: Validated generation settings.
        """
        return GenerationConfig(
            provider=self.provider,
            api_key=self.api_key,
            base_url=self.base_url,
            model=self.model,
            ollama_endpoint=self.ollama_endpoint,
            ollama_model=self.ollama_model,
        )


@lru_cache(maxsize=1)
def get_settings() -> StudioSettings:
    """Return cached settings loaded from the environment."""
    return StudioSettings()
