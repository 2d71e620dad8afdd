"""Data models for the manuscript tree and edit patches."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import Field, field_validator, model_validator

from inkwell_schemas.base import BaseSchema
from inkwell_schemas.codex import CodexEntry
from inkwell_schemas.primitives import (
    Base64Image,
    CodexEntryType,
    EntityId,
    PrintSize,
    SceneStatus,
    new_id,
    utc_now,
)


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Return *tags* stripped, without blanks or duplicates, in first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


class Scene(BaseSchema):
    """A single scene of prose."""

    id: EntityId = Field(default_factory=new_id, description="Unique scene identifier.")
    title: str = Field(default="Untitled Scene", description="Scene title.")
    content: str = Field(default="", description="Full scene text.")
    synopsis: str = Field(default="", description="Short summary of the scene.")
    status: SceneStatus = Field(default=SceneStatus.DRAFT, description="Writing status.")
    word_count: int = Field(default=0, ge=0, description="Derived from content on every commit.")
    image: Base64Image | None = Field(default=None, description="Optional scene illustration.")


class Act(BaseSchema):
    """Ordered group of scenes."""

    id: EntityId = Field(default_factory=new_id, description="Unique act identifier.")
    title: str = Field(..., description="Act title.", examples=["Act 1"])
    scenes: list[Scene] = Field(default_factory=list, description="Scenes in narrative order.")


class Project(BaseSchema):
    """A manuscript with its codex, owned by a single user."""

    id: EntityId = Field(default_factory=new_id, description="Unique project identifier.")
    owner_id: str = Field(..., min_length=1, description="Identifier of the owning user.")
    title: str = Field(default="Untitled Project", description="Working title.")
    genre: str = Field(default="Fiction", description="Genre label.")
    tags: list[str] = Field(default_factory=list, description="Distinct tags, in insertion order.")
    last_edited: datetime = Field(default_factory=utc_now, description="Timestamp of the latest edit.")
    word_count: int = Field(default=0, ge=0, description="Sum of scene word counts; derived.")
    acts: list[Act] = Field(default_factory=list, description="Acts in narrative order.")
    codex: list[CodexEntry] = Field(default_factory=list, description="Codex entries, unique by id.")
    front_cover: Base64Image | None = Field(default=None, description="Front cover image.")
    back_cover: Base64Image | None = Field(default=None, description="Back cover image.")
    back_synopsis: str | None = Field(default=None, description="Back-cover synopsis.")
    print_size: PrintSize = Field(default=PrintSize.A5, description="Page format for print output.")

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)

    @model_validator(mode="after")
    def validate_codex_ids(self) -> Project:
        """Ensure codex entries are unique by id.

        Returns:
            Project: The validated instance.

        Raises:
            ValueError: If two codex entries share an id.
        """
        ids = [entry.id for entry in self.codex]
        if len(set(ids)) != len(ids):
            raise ValueError("codex entries must have unique ids")
        return self

    def iter_scenes(self) -> list[Scene]:
        """Return every scene across all acts in narrative order."""
        return [scene for act in self.acts for scene in act.scenes]


class ProjectPatch(BaseSchema):
    """Project-level edit. Only explicitly set fields are applied."""

    title: str | None = None
    genre: str | None = None
    tags: list[str] | None = None
    back_synopsis: str | None = None
    front_cover: Base64Image | None = None
    back_cover: Base64Image | None = None
    print_size: PrintSize | None = None
    codex: list[CodexEntry] | None = Field(
        default=None, description="Full replacement of the codex set (the only implicit deletion path)."
    )

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else normalize_tags(value)


class ActPatch(BaseSchema):
    """Edit targeting one act."""

    act_id: EntityId
    title: str | None = None


class ScenePatch(BaseSchema):
    """Edit targeting one scene. Content edits are debounced; the rest commit immediately."""

    scene_id: EntityId
    title: str | None = None
    synopsis: str | None = None
    status: SceneStatus | None = None
    image: Base64Image | None = None
    content: str | None = None

    @property
    def touches_content(self) -> bool:
        """Return True when this patch changes scene text."""
        return "content" in self.model_fields_set

    @property
    def touches_metadata(self) -> bool:
        """Return True when this patch changes anything besides scene text."""
        return bool(self.model_fields_set - {"scene_id", "content"})


class ProjectStats(BaseSchema):
    """Derived statistics shown on the review screen."""

    word_count: int = Field(..., ge=0)
    act_count: int = Field(..., ge=0)
    scene_count: int = Field(..., ge=0)
    reading_minutes: int = Field(..., ge=0, description="Words divided by 200, rounded down.")
    scenes_by_status: dict[SceneStatus, int] = Field(default_factory=dict)
    codex_by_type: dict[CodexEntryType, int] = Field(default_factory=dict)
