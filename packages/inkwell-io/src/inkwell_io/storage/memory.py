"""In-memory project store for embedding and tests."""

from __future__ import annotations

from inkwell_core.ports.storage import (
    ProjectStoreProtocol,
    StoreError,
    StoreErrorCode,
    StoreErrorDetails,
    StoreErrorInfo,
)
from inkwell_schemas.manuscript import Project


class InMemoryProjectStore(ProjectStoreProtocol):
    """Project store keeping validated copies in a dict."""

    def __init__(self, projects: list[Project] | None = None) -> None:
        """Initialize the store with optional seed projects."""
        self._projects: dict[str, Project] = {}
        for project in projects or []:
            self._projects[project.id] = project.model_copy(deep=True)
        self.save_count = 0

    async def save_project(self, project: Project) -> None:
        """Store a deep copy of *project*."""
        self._projects[project.id] = project.model_copy(deep=True)
        self.save_count += 1

    async def get_all_projects(self, owner_id: str) -> list[Project]:
        """Return copies of the projects owned by *owner_id*, newest edit first.

        Returns:
            list[Project]: Stored projects of the owner.
        """
        owned = [project.model_copy(deep=True) for project in self._projects.values() if project.owner_id == owner_id]
        owned.sort(key=lambda project: project.last_edited, reverse=True)
        return owned

    async def delete_project(self, project_id: str) -> None:
        """Remove *project_id*.

        Raises:
            StoreError: If the project is not stored.
        """
        if self._projects.pop(project_id, None) is None:
            raise StoreError(
                StoreErrorInfo(
                    code=StoreErrorCode.NOT_FOUND,
                    message=f"Project {project_id} is not stored",
                    details=StoreErrorDetails(operation="delete_project", project_id=project_id),
                )
            )

    def stored(self, project_id: str) -> Project | None:
        """Return the stored copy of *project_id* without going through the async API."""
        return self._projects.get(project_id)
