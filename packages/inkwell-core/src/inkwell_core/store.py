"""In-memory authoritative project state backed by a durable store."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Callable

from inkwell_core.ports.storage import ProjectStoreProtocol, StoreError
from inkwell_core.util.logging import get_logger
from inkwell_schemas.manuscript import Project

logger = get_logger(__name__)

type StoreErrorHandler = Callable[[str, StoreError], None]


class ManuscriptStore:
    """Working copy of one owner's projects plus a persistence adapter.

    In-memory commits are synchronous and optimistic. Durable writes of edits
    read the latest working copy when they run and never roll it back on
    failure: the failure is logged, recorded and reported through
    ``on_error`` once. Creating and deleting projects is the exception; those
    wait for the durable store before touching memory.
    """

    def __init__(
        self,
        backend: ProjectStoreProtocol,
        *,
        on_error: StoreErrorHandler | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            backend: Durable project store.
            on_error: Callback receiving ``(project_id, error)`` for failed writes.
        """
        self.backend = backend
        self.on_error = on_error
        self._projects: dict[str, Project] = {}
        self._write_locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.failures: list[tuple[str, StoreError]] = []

    @property
    def projects(self) -> list[Project]:
        """Projects in insertion order."""
        return list(self._projects.values())

    def get(self, project_id: str) -> Project:
        """Return the working copy of *project_id* or raise if missing.

        Raises:
            KeyError: If the project id is unknown.

        Returns:
            Project: The in-memory project.
        """
        if project_id not in self._projects:
            message = f"Unknown project id: {project_id}"
            raise KeyError(message)
        return self._projects[project_id]

    def __contains__(self, project_id: object) -> bool:
        """Return True when *project_id* is in the working set."""
        return project_id in self._projects

    def commit(self, project: Project) -> None:
        """Replace the working copy of *project* in memory."""
        self._projects[project.id] = project

    async def load(self, owner_id: str) -> list[Project]:
        """Replace the working set with every project stored for *owner_id*.

        Returns:
            list[Project]: Loaded projects.
        """
        projects = await self.backend.get_all_projects(owner_id)
        self._projects = {project.id: project for project in projects}
        logger.info("Loaded %d project(s) for owner %s", len(projects), owner_id)
        return projects

    async def persist(self, project_id: str) -> bool:
        """Write the current working copy of *project_id* to the durable store.

        Writes for the same project are serialized so the last one to finish
        always carries the newest state.

        Returns:
            bool: True on success, False if the write failed or the project is gone.
        """
        async with self._write_locks[project_id]:
            project = self._projects.get(project_id)
            if project is None:
                logger.debug("Skipping write for removed project %s", project_id)
                return False
            try:
                await self.backend.save_project(project)
            except StoreError as exc:
                self._report_failure(project_id, exc)
                return False
        logger.debug("Persisted project %s (%d words)", project_id, project.word_count)
        return True

    async def insert(self, project: Project) -> Project:
        """Durably create *project*, adding it to memory only on success.

        Returns:
            Project: The stored project.

        Raises:
            StoreError: If the durable write fails; memory is left untouched.
        """
        await self.backend.save_project(project)
        self._projects[project.id] = project
        logger.info("Created project %s (%s)", project.id, project.title)
        return project

    async def remove(self, project_id: str) -> None:
        """Durably delete *project_id*, dropping it from memory only on success.

        Raises:
            StoreError: If the durable delete fails; memory is left untouched.
        """
        self.get(project_id)
        async with self._write_locks[project_id]:
            await self.backend.delete_project(project_id)
            self._projects.pop(project_id, None)
        self._write_locks.pop(project_id, None)
        logger.info("Deleted project %s", project_id)

    def _report_failure(self, project_id: str, exc: StoreError) -> None:
        logger.error("Durable write for project %s failed: %s", project_id, exc)
        self.failures.append((project_id, exc))
        if self.on_error is not None:
            self.on_error(project_id, exc)
