"""inkwell-schemas: Pydantic data model shared across inkwell packages."""

from inkwell_schemas.base import BaseSchema
from inkwell_schemas.codex import UNKNOWN, CandidateCharacter, CodexEntry
from inkwell_schemas.config import GenerationConfig
from inkwell_schemas.manuscript import (
    Act,
    ActPatch,
    Project,
    ProjectPatch,
    ProjectStats,
    Scene,
    ScenePatch,
)
from inkwell_schemas.primitives import (
    CodexEntryType,
    GenerationProvider,
    PrintSize,
    SceneStatus,
    new_id,
    utc_now,
)

__all__ = [
    "UNKNOWN",
    "Act",
    "ActPatch",
    "BaseSchema",
    "CandidateCharacter",
    "CodexEntry",
    "CodexEntryType",
    "GenerationConfig",
    "GenerationProvider",
    "PrintSize",
    "Project",
    "ProjectPatch",
    "ProjectStats",
    "Scene",
    "ScenePatch",
    "SceneStatus",
    "new_id",
    "utc_now",
]
