"""Common pytest configuration."""

from __future__ import annotations

import pytest

from inkwell_core.ports.storage import StoreError, StoreErrorCode, StoreErrorInfo
from inkwell_schemas.codex import CodexEntry
from inkwell_schemas.manuscript import Act, Project, Scene


@pytest.fixture
def anyio_backend() -> str:
    """Force asyncio backend for anyio-powered tests.

    Returns:
        str: The backend name.
    """
    return "asyncio"


@pytest.fixture
def sample_project() -> Project:
    """Build a two-act project with known ids and content.

    Returns:
        Project: Project owned by ``writer-1``.
    """
    return Project(
        id="proj-1",
        owner_id="writer-1",
        title="The Salt Road",
        genre="Fantasy",
        tags=["draft", "quest"],
        acts=[
            Act(
                id="act-1",
                title="Act 1",
                scenes=[
                    Scene(id="scene-1", title="Harbor", content="a b c"),
                    Scene(id="scene-2", title="Market", content=""),
                ],
            ),
            Act(
                id="act-2",
                title="Act 2",
                scenes=[Scene(id="scene-3", title="Pass", content="Aria climbed.")],
            ),
        ],
        codex=[CodexEntry(id="cx-1", name="Aria", description="Scout")],
    )


class RecordingProjectStore:
    """Project store double recording every save, with switchable failures."""

    def __init__(self) -> None:
        self.saved: list[Project] = []
        self.deleted: list[str] = []
        self.stored: dict[str, Project] = {}
        self.fail_saves = False
        self.fail_deletes = False

    async def save_project(self, project: Project) -> None:
        if self.fail_saves:
            raise StoreError(StoreErrorInfo(code=StoreErrorCode.IO_ERROR, message="disk unavailable"))
        self.saved.append(project)
        self.stored[project.id] = project

    async def get_all_projects(self, owner_id: str) -> list[Project]:
        return [project for project in self.stored.values() if project.owner_id == owner_id]

    async def delete_project(self, project_id: str) -> None:
        if self.fail_deletes:
            raise StoreError(StoreErrorInfo(code=StoreErrorCode.IO_ERROR, message="disk unavailable"))
        self.deleted.append(project_id)
        self.stored.pop(project_id, None)


@pytest.fixture
def recording_backend(sample_project: Project) -> RecordingProjectStore:
    """Provide a recording store seeded with the sample project.

    Returns:
        RecordingProjectStore: Store double holding ``proj-1``.
    """
    backend = RecordingProjectStore()
    backend.stored[sample_project.id] = sample_project
    return backend
