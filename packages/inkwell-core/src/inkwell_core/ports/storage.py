"""Protocol definitions and errors for durable project and prompt storage."""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol, runtime_checkable

from pydantic import Field

from inkwell_core.history import PromptLog
from inkwell_schemas.base import BaseSchema
from inkwell_schemas.manuscript import Project


class StoreErrorCode(StrEnum):
    """Categorized error codes for storage operations."""

    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"
    SERIALIZATION_ERROR = "serialization_error"
    VALIDATION_ERROR = "validation_error"


class StoreErrorDetails(BaseSchema):
    """Detailed storage error context."""

    operation: str | None = Field(None, description="Storage operation name")
    project_id: str | None = Field(None, description="Project identifier")
    owner_id: str | None = Field(None, description="Owning user identifier")
    path: str | None = Field(None, description="Filesystem path")
    reason: str | None = Field(None, description="Additional error context")


class StoreErrorInfo(BaseSchema):
    """Structured storage error data."""

    code: StoreErrorCode = Field(..., description="Storage error code")
    message: str = Field(..., min_length=1, description="Error message")
    details: StoreErrorDetails | None = Field(None, description="Error details")


class StoreError(Exception):
    """Storage error with structured details."""

    def __init__(self, info: StoreErrorInfo) -> None:
        """Initialize the storage error.

        Args:
            info: Structured storage error information.
        """
        super().__init__(info.message)
        self.info = info


@runtime_checkable
class ProjectStoreProtocol(Protocol):
    """Protocol for persisting whole projects, nested structure included."""

    async def save_project(self, project: Project) -> None:
        """Persist *project*, replacing any previous copy."""
        raise NotImplementedError

    async def get_all_projects(self, owner_id: str) -> list[Project]:
        """Return every project owned by *owner_id*."""
        raise NotImplementedError

    async def delete_project(self, project_id: str) -> None:
        """Remove a project from durable storage."""
        raise NotImplementedError


@runtime_checkable
class PromptHistoryStoreProtocol(Protocol):
    """Protocol for persisting the prompt history, newest first."""

    async def load_prompts(self) -> list[PromptLog]:
        """Return stored prompts, or an empty list when none were saved."""
        raise NotImplementedError

    async def save_prompts(self, prompts: list[PromptLog]) -> None:
        """Replace the stored prompts with *prompts*."""
        raise NotImplementedError
