"""Recently used generation prompts."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from inkwell_schemas.base import BaseSchema
from inkwell_schemas.primitives import EntityId, new_id, utc_now

MAX_PROMPTS = 50


class PromptLog(BaseSchema):
    """A prompt the author sent to the generation service."""

    id: EntityId = Field(default_factory=new_id)
    text: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=utc_now)


class PromptHistory:
    """Newest-first list of the most recent prompts."""

    def __init__(self, entries: list[PromptLog] | None = None, *, limit: int = MAX_PROMPTS) -> None:
        """Initialize the history.

        Args:
            entries: Previously stored prompts, newest first.
            limit: Number of prompts to keep.
        """
        self.limit = limit
        self._entries = list(entries or [])[:limit]
        self.changed = False

    @property
    def entries(self) -> list[PromptLog]:
        """All kept prompts, newest first."""
        return list(self._entries)

    def record(self, text: str) -> PromptLog | None:
        """Add *text* to the front of the history; blank prompts are ignored."""
        if not text.strip():
            return None
        entry = PromptLog(text=text)
        self._entries = [entry, *self._entries][: self.limit]
        self.changed = True
        return entry

    def recent(self, count: int = 5) -> list[PromptLog]:
        """Return the *count* newest prompts."""
        return self._entries[:count]
