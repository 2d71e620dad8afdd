"""Data models for codex entries and parser candidates."""

from __future__ import annotations

from pydantic import Field, field_validator

from inkwell_schemas.base import BaseSchema
from inkwell_schemas.primitives import Base64Image, CodexEntryType, EntityId, new_id

UNKNOWN = "Unknown"


class CodexEntry(BaseSchema):
    """World-building entry attached to a project."""

    id: EntityId = Field(default_factory=new_id, description="Unique entry identifier.")
    name: str = Field(..., description="Display name; matched case-insensitively by scans.", examples=["Aria"])
    type: CodexEntryType = Field(default=CodexEntryType.CHARACTER, description="Entry category.")
    description: str = Field(default="", description="Short description (a character's role).")
    details: str = Field(default="", description="Free text, conventionally 'Key: Value' lines.")
    notes: str = Field(default="", description="Free-form notes.")
    is_locked: bool = Field(
        default=False, description="When set, automated scans never overwrite description/details/notes."
    )
    image: Base64Image | None = Field(default=None, description="Optional portrait or illustration.")


class CandidateCharacter(BaseSchema):
    """Unvalidated character record produced by a parser, not yet merged."""

    name: str = Field(..., min_length=1, description="Character name; candidates without one are dropped.")
    role: str = Field(default=UNKNOWN, description="Narrative role.")
    age: str = Field(default=UNKNOWN, description="Age as free text.")
    appearance: str = Field(default=UNKNOWN, description="Physical appearance.")
    personality: str = Field(default=UNKNOWN, description="Personality summary.")
    background: str = Field(default=UNKNOWN, description="Backstory.")
    traits: str = Field(default=UNKNOWN, description="Notable traits.")
    character_arc: str | None = Field(default=None, description="Arc notes from manual imports.")
    relationships: str | None = Field(default=None, description="Key relationships from manual imports.")
    notes: str | None = Field(default=None, description="Unrecognized manual-import sections.")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped
