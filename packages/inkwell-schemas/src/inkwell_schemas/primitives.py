"""Primitive types and enums shared across inkwell schemas."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated
from uuid import uuid4

from pydantic import Field

ID_LENGTH = 12

type EntityId = Annotated[str, Field(min_length=1, description="Opaque entity identifier")]
type Base64Image = Annotated[str, Field(description="Base64-encoded image payload")]


class SceneStatus(StrEnum):
    """Writing status of a scene."""

    DRAFT = "Draft"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class CodexEntryType(StrEnum):
    """Kinds of world-building entries kept in the codex."""

    CHARACTER = "Character"
    LOCATION = "Location"
    ITEM = "Item"
    LORE = "Lore"


class PrintSize(StrEnum):
    """Page formats offered for the print projection."""

    A4 = "A4"
    A5 = "A5"
    US_LETTER = "US Letter"


class GenerationProvider(StrEnum):
    """Generative text backends."""

    GEMINI = "gemini"
    OLLAMA = "ollama"


def new_id() -> str:
    """Return a fresh opaque identifier for a manuscript or codex entity."""
    return uuid4().hex[:ID_LENGTH]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)
