"""Generation service for a local Ollama server."""

from __future__ import annotations

import httpx

from inkwell_core.errors import ServiceError
from inkwell_core.ports.llm import GenerationServiceProtocol
from inkwell_core.util.logging import get_logger
from inkwell_schemas.config import GenerationConfig
from inkwell_schemas.primitives import GenerationProvider

logger = get_logger(__name__)

PROVIDER = GenerationProvider.OLLAMA.value


class OllamaService(GenerationServiceProtocol):
    """Calls ``POST /api/generate`` with streaming disabled."""

    def __init__(
        self,
        config: GenerationConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Generation settings; ``ollama_endpoint`` and
                ``ollama_model`` are used.
            http_client: Optional pre-configured HTTP client. If None, a
                client is created per request.
        """
        self.config = config
        self._http_client = http_client

    @property
    def generate_url(self) -> str:
        """Full URL of the generate endpoint."""
        return f"{self.config.ollama_endpoint.rstrip('/')}/api/generate"

    async def generate(self, prompt: str, system_instruction: str) -> str:
        """Send one non-streaming generate request.

        Returns:
            str: The ``response`` field of the reply.

        Raises:
            ServiceError: If the server is unreachable, answers with an
                error status, or returns no text.
        """
        payload = {
            "model": self.config.ollama_model,
            "prompt": f"System: {system_instruction}\n\nUser: {prompt}",
            "stream": False,
        }
        if self._http_client is not None:
            data = await self._post(self._http_client, payload)
        else:
            async with httpx.AsyncClient(timeout=self.config.timeout_s) as client:
                data = await self._post(client, payload)

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise ServiceError("Ollama returned an empty response", provider=PROVIDER)
        return text

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, object]) -> object:
        try:
            response = await client.post(self.generate_url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            message = f"Ollama error: HTTP {exc.response.status_code}"
            logger.warning("%s from %s", message, self.generate_url)
            raise ServiceError(message, provider=PROVIDER) from exc
        except httpx.HTTPError as exc:
            message = f"Cannot reach Ollama at {self.config.ollama_endpoint}: {exc}"
            logger.warning(message)
            raise ServiceError(message, provider=PROVIDER) from exc
        except ValueError as exc:
            raise ServiceError("Ollama returned invalid JSON", provider=PROVIDER) from exc


async def check_ollama(endpoint: str, http_client: httpx.AsyncClient | None = None) -> bool:
    """Return True when an Ollama server answers ``GET /api/tags`` at *endpoint*."""
    url = f"{endpoint.rstrip('/')}/api/tags"
    try:
        if http_client is not None:
            response = await http_client.get(url)
        else:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(url)
    except httpx.HTTPError as exc:
        logger.debug("Ollama health check at %s failed: %s", url, exc)
        return False
    return response.is_success
