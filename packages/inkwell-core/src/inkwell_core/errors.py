"""Error taxonomy for the manuscript/codex synchronization core."""

from __future__ import annotations


class InkwellError(Exception):
    """Base class for recoverable inkwell errors."""


class ParseError(InkwellError):
    """Raised when generated or pasted text cannot be parsed at all."""

    def __init__(self, message: str, *, raw_text: str | None = None) -> None:
        """Initialize the parse error.

        Args:
            message: Human-readable description of the failure.
            raw_text: Offending input, kept for diagnostics.
        """
        super().__init__(message)
        self.raw_text = raw_text


class ServiceError(InkwellError):
    """Raised by generation services on transport or provider failure."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        """Initialize the service error.

        Args:
            message: Human-readable description of the failure.
            provider: Provider label that produced the failure.
        """
        super().__init__(message)
        self.provider = provider


class ScanError(InkwellError):
    """Raised when a codex scan fails; the codex is left unchanged."""


class DraftError(InkwellError):
    """Raised when AI-assisted drafting fails; scene text is left unchanged."""


class ChatError(InkwellError):
    """Raised when a workshop chat message cannot be answered."""
