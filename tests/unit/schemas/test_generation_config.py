"""Unit tests for generation configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from inkwell_schemas import GenerationConfig, GenerationProvider
from inkwell_schemas.config import DEFAULT_OLLAMA_ENDPOINT


def test_gemini_requires_api_key() -> None:
    """The hosted provider cannot be configured without a key."""
    with pytest.raises(ValidationError, match="api_key"):
        GenerationConfig(provider=GenerationProvider.GEMINI)


def test_ollama_defaults() -> None:
    """Ollama needs no key and defaults to a local llama3 server."""
    config = GenerationConfig(provider=GenerationProvider.OLLAMA)

    assert config.ollama_endpoint == DEFAULT_OLLAMA_ENDPOINT == "http://localhost:11434"
    assert config.ollama_model == "llama3"
    assert config.temperature == 0.8
    assert config.top_p == 0.95


def test_api_key_is_secret() -> None:
    """API keys never appear in reprs."""
    config = GenerationConfig(api_key="sk-secret")

    assert "sk-secret" not in repr(config)
    assert config.api_key is not None
    assert config.api_key.get_secret_value() == "sk-secret"


@pytest.mark.parametrize("url", ["localhost:11434", "ftp://example.com", "http://"])
def test_rejects_non_http_endpoints(url: str) -> None:
    """Endpoints must be absolute http(s) URLs."""
    with pytest.raises(ValidationError, match="http"):
        GenerationConfig(provider=GenerationProvider.OLLAMA, ollama_endpoint=url)
