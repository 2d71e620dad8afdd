"""Protocol definitions for generative text services."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class GenerationServiceProtocol(Protocol):
    """Protocol for generative text adapters.

    Implementations raise ``inkwell_core.errors.ServiceError`` on any failure,
    including timeouts and empty responses.
    """

    async def generate(self, prompt: str, system_instruction: str) -> str:
        """Return generated text for *prompt* under *system_instruction*."""
        raise NotImplementedError
