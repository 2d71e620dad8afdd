"""Filesystem-backed project store."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

import orjson
from pydantic import ValidationError

from inkwell_core.ports.storage import (
    ProjectStoreProtocol,
    StoreError,
    StoreErrorCode,
    StoreErrorDetails,
    StoreErrorInfo,
)
from inkwell_core.util.logging import get_logger
from inkwell_schemas.manuscript import Project

logger = get_logger(__name__)


class FileSystemProjectStore(ProjectStoreProtocol):
    """One JSON document per project under ``<base_dir>/projects``."""

    def __init__(self, base_dir: str | Path) -> None:
        """Initialize the project store."""
        self._base_dir = Path(base_dir)
        self._projects_dir = self._base_dir / "projects"
        self.unreadable: list[StoreError] = []

    def path_for(self, project_id: str) -> Path:
        """Return the document path of *project_id*."""
        return self._projects_dir / f"{project_id}.json"

    async def save_project(self, project: Project) -> None:
        """Write *project* atomically, replacing any previous copy.

        Raises:
            StoreError: If the document cannot be written.
        """
        path = self.path_for(project.id)
        try:
            await asyncio.to_thread(_write_project_file, path, project)
        except OSError as exc:
            raise StoreError(
                StoreErrorInfo(
                    code=StoreErrorCode.IO_ERROR,
                    message=str(exc),
                    details=StoreErrorDetails(
                        operation="save_project",
                        project_id=project.id,
                        owner_id=project.owner_id,
                        path=str(path),
                    ),
                )
            ) from exc

    async def get_all_projects(self, owner_id: str) -> list[Project]:
        """Load every project owned by *owner_id*, most recently edited first.

        Documents that are not valid JSON or fail validation are skipped with a
        warning and kept in ``unreadable`` so callers can report them.

        Returns:
            list[Project]: Readable stored projects of the owner.

        Raises:
            StoreError: If the projects directory cannot be listed.
        """
        try:
            projects, unreadable = await asyncio.to_thread(_read_project_files, self._projects_dir)
        except OSError as exc:
            raise StoreError(
                StoreErrorInfo(
                    code=StoreErrorCode.IO_ERROR,
                    message=str(exc),
                    details=StoreErrorDetails(
                        operation="get_all_projects",
                        owner_id=owner_id,
                        path=str(self._projects_dir),
                    ),
                )
            ) from exc
        self.unreadable = unreadable
        owned = [project for project in projects if project.owner_id == owner_id]
        owned.sort(key=lambda project: project.last_edited, reverse=True)
        return owned

    async def delete_project(self, project_id: str) -> None:
        """Remove the document of *project_id*.

        Raises:
            StoreError: If no document exists or it cannot be removed.
        """
        path = self.path_for(project_id)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError as exc:
            raise StoreError(
                StoreErrorInfo(
                    code=StoreErrorCode.NOT_FOUND,
                    message=f"Project {project_id} is not stored",
                    details=StoreErrorDetails(
                        operation="delete_project",
                        project_id=project_id,
                        path=str(path),
                    ),
                )
            ) from exc
        except OSError as exc:
            raise StoreError(
                StoreErrorInfo(
                    code=StoreErrorCode.IO_ERROR,
                    message=str(exc),
                    details=StoreErrorDetails(
                        operation="delete_project",
                        project_id=project_id,
                        path=str(path),
                    ),
                )
            ) from exc


def _write_project_file(path: Path, project: Project) -> None:
    write_json_atomic(path, orjson.dumps(project.model_dump(mode="json"), option=orjson.OPT_INDENT_2))


def write_json_atomic(path: Path, payload: bytes) -> None:
    """Write *payload* to *path* through a temporary file and an atomic rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _read_project_files(projects_dir: Path) -> tuple[list[Project], list[StoreError]]:
    if not projects_dir.exists():
        return [], []
    projects: list[Project] = []
    unreadable: list[StoreError] = []
    for path in sorted(projects_dir.glob("*.json")):
        try:
            projects.append(_read_project_file(path))
        except StoreError as exc:
            logger.warning("Skipping unreadable project document %s: %s", path, exc)
            unreadable.append(exc)
    return projects, unreadable


def _read_project_file(path: Path) -> Project:
    try:
        return Project.model_validate(orjson.loads(path.read_bytes()))
    except orjson.JSONDecodeError as exc:
        raise StoreError(
            StoreErrorInfo(
                code=StoreErrorCode.SERIALIZATION_ERROR,
                message=f"Project document is not valid JSON: {exc}",
                details=StoreErrorDetails(operation="get_all_projects", project_id=path.stem, path=str(path)),
            )
        ) from exc
    except ValidationError as exc:
        raise StoreError(
            StoreErrorInfo(
                code=StoreErrorCode.VALIDATION_ERROR,
                message="Project document failed schema validation",
                details=StoreErrorDetails(
                    operation="get_all_projects",
                    project_id=path.stem,
                    path=str(path),
                    reason=str(exc.errors()[0].get("msg")) if exc.errors() else None,
                ),
            )
        ) from exc
