"""Edit orchestration: aggregates, optimistic commits and debounced persistence."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from inkwell_core.codex import MergeResult, build_manual_entry, merge
from inkwell_core.debounce import Debouncer
from inkwell_core.edits import Patch, apply_patch, find_act, find_scene
from inkwell_core.errors import ChatError, DraftError, ParseError, ScanError, ServiceError
from inkwell_core.history import PromptHistory
from inkwell_core.parsers import parse_ai_extraction, parse_manual_import
from inkwell_core.ports.llm import GenerationServiceProtocol
from inkwell_core.prompts import (
    CODEX_SCAN_SYSTEM_INSTRUCTION,
    DEFAULT_MAX_SCAN_CHARS,
    WORKSHOP_FALLBACK_REPLY,
    build_codex_scan_prompt,
    build_draft_prompt,
    build_draft_system_instruction,
    build_workshop_system_instruction,
)
from inkwell_core.store import ManuscriptStore
from inkwell_core.util.logging import get_logger
from inkwell_schemas.codex import CodexEntry
from inkwell_schemas.manuscript import Act, Project, ProjectPatch, Scene, ScenePatch

logger = get_logger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


def _scene_key(project_id: str, scene_id: str) -> str:
    return f"{project_id}:{scene_id}"


class SyncController:
    """Update surface exposed to the UI layer.

    Every edit updates the in-memory project synchronously and returns it.
    Scene text edits are written after ``debounce_seconds`` of quiet; all
    other edits are written straight away in the background. Must be used
    from inside a running event loop.
    """

    def __init__(
        self,
        store: ManuscriptStore,
        *,
        generation: GenerationServiceProtocol | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        max_scan_chars: int = DEFAULT_MAX_SCAN_CHARS,
        history: PromptHistory | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            store: Working copy and persistence adapter.
            generation: Generative text service for scans and drafting.
            debounce_seconds: Quiet period before scene text is written.
            max_scan_chars: Cap on manuscript text sent with a codex scan.
            history: Prompt history updated by drafting requests.
        """
        self.store = store
        self.generation = generation
        self.max_scan_chars = max_scan_chars
        self.history = history or PromptHistory()
        self._debouncer = Debouncer(debounce_seconds)
        self._writes: set[asyncio.Task[bool]] = set()
        self._open_scene: tuple[str, str] | None = None

    # ---- edits ----

    def apply_edit(self, project_id: str, patch: Patch) -> Project:
        """Apply *patch* to the working copy and schedule its durable write.

        Returns:
            Project: The updated in-memory project.

        Raises:
            KeyError: If the project, act or scene is unknown.
        """
        updated = apply_patch(self.store.get(project_id), patch)
        self.store.commit(updated)

        if isinstance(patch, ScenePatch) and patch.touches_content and not patch.touches_metadata:
            self._debouncer.schedule(
                _scene_key(project_id, patch.scene_id),
                lambda: self.store.persist(project_id),
            )
        else:
            self._persist_now(project_id)
        return updated

    def add_act(self, project_id: str, title: str | None = None) -> Project:
        """Append a new act; untitled acts are named after their position.

        Returns:
            Project: The updated project.
        """
        project = self.store.get(project_id)
        act = Act(title=title or f"Act {len(project.acts) + 1}")
        return self._commit_structure(project, [*project.acts, act])

    def add_scene(self, project_id: str, act_id: str, title: str | None = None) -> Project:
        """Append a new draft scene to the end of *act_id*.

        Returns:
            Project: The updated project.
        """
        project = self.store.get(project_id)
        find_act(project, act_id)
        scene = Scene(title=title) if title else Scene()
        acts = [
            act.model_copy(update={"scenes": [*act.scenes, scene]}) if act.id == act_id else act
            for act in project.acts
        ]
        return self._commit_structure(project, acts)

    def _commit_structure(self, project: Project, acts: list[Act]) -> Project:
        # Structural changes reuse the patch path so aggregates are re-derived.
        staged = project.model_copy(update={"acts": acts})
        self.store.commit(staged)
        return self.apply_edit(project.id, ProjectPatch())

    # ---- codex ----

    def add_codex_entry(self, project_id: str, entry: CodexEntry) -> Project:
        """Append a user-authored codex entry.

        Returns:
            Project: The updated project.
        """
        project = self.store.get(project_id)
        return self.apply_edit(project_id, ProjectPatch(codex=[*project.codex, entry]))

    def update_codex_entry(self, project_id: str, entry: CodexEntry) -> Project:
        """Replace the codex entry with the same id. User edits ignore the lock.

        Returns:
            Project: The updated project.

        Raises:
            KeyError: If no entry has that id.
        """
        project = self.store.get(project_id)
        if all(existing.id != entry.id for existing in project.codex):
            message = f"Unknown codex entry id: {entry.id}"
            raise KeyError(message)
        codex = [entry if existing.id == entry.id else existing for existing in project.codex]
        return self.apply_edit(project_id, ProjectPatch(codex=codex))

    def delete_codex_entry(self, project_id: str, entry_id: str) -> Project:
        """Remove the codex entry *entry_id* by replacing the codex set.

        Returns:
            Project: The updated project.
        """
        project = self.store.get(project_id)
        codex = [entry for entry in project.codex if entry.id != entry_id]
        return self.apply_edit(project_id, ProjectPatch(codex=codex))

    def import_manual_codex_entry(self, project_id: str, raw_text: str) -> Project:
        """Parse pasted character notes and append them as a locked entry.

        Returns:
            Project: The updated project.

        Raises:
            ParseError: If the text contains no name.
        """
        project = self.store.get(project_id)
        entry = build_manual_entry(parse_manual_import(raw_text))
        logger.info("Imported codex entry %s into project %s", entry.name, project_id)
        return self.apply_edit(project_id, ProjectPatch(codex=[*project.codex, entry]))

    async def run_codex_scan(self, project_id: str) -> Project:
        """Extract characters from the manuscript and merge them into the codex.

        Returns:
            Project: The updated project (unchanged when nothing was merged).

        Raises:
            ScanError: If the service fails or its response cannot be parsed;
                the codex is left unchanged.
        """
        generation = self._require_generation(ScanError)
        project = self.store.get(project_id)
        prompt = build_codex_scan_prompt(project, self.max_scan_chars)
        try:
            response = await generation.generate(prompt, CODEX_SCAN_SYSTEM_INSTRUCTION)
            candidates = parse_ai_extraction(response)
        except ServiceError as exc:
            logger.warning("Codex scan for project %s failed: %s", project_id, exc)
            raise ScanError(f"Generation service failed: {exc}") from exc
        except ParseError as exc:
            logger.warning("Codex scan for project %s returned unparseable output: %s", project_id, exc)
            raise ScanError(f"Could not read the scan result: {exc}") from exc

        # Merge against the latest codex; the author may have edited it meanwhile.
        result: MergeResult = merge(candidates, self.store.get(project_id).codex)
        if not result.changed:
            return self.store.get(project_id)
        return self.apply_edit(project_id, ProjectPatch(codex=result.codex))

    # ---- drafting and chat ----

    async def draft_scene(self, project_id: str, scene_id: str, request: str) -> Project:
        """Ask the service for prose and append it to the scene after a blank line.

        Returns:
            Project: The updated project.

        Raises:
            DraftError: If the service fails or returns nothing; the scene is unchanged.
        """
        generation = self._require_generation(DraftError)
        if not request.strip():
            raise DraftError("Draft request is empty")
        project = self.store.get(project_id)
        scene = find_scene(project, scene_id)
        self.history.record(request)
        try:
            draft = await generation.generate(
                build_draft_prompt(project, request),
                build_draft_system_instruction(scene.content),
            )
        except ServiceError as exc:
            raise DraftError(f"Draft generation failed: {exc}") from exc
        if not draft.strip():
            raise DraftError("Draft generation returned no text")

        current = find_scene(self.store.get(project_id), scene_id).content
        content = f"{current}\n\n{draft}" if current else draft
        return self.apply_edit(project_id, ScenePatch(scene_id=scene_id, content=content))

    async def workshop_chat(self, project_id: str, message: str) -> str:
        """Send a free-form message about the project and return the reply.

        The message is recorded in the prompt history before the call. The
        project itself is never modified.

        Returns:
            str: The reply, or a fallback apology when the service sent nothing.

        Raises:
            ChatError: If the message is empty or the service fails.
        """
        generation = self._require_generation(ChatError)
        if not message.strip():
            raise ChatError("Chat message is empty")
        project = self.store.get(project_id)
        self.history.record(message)
        try:
            reply = await generation.generate(message, build_workshop_system_instruction(project))
        except ServiceError as exc:
            raise ChatError(f"Workshop chat failed: {exc}") from exc
        return reply if reply.strip() else WORKSHOP_FALLBACK_REPLY

    # ---- scene focus and flushing ----

    async def open_scene(self, project_id: str, scene_id: str) -> Scene:
        """Focus *scene_id*, flushing any pending write of the previous scene.

        Returns:
            Scene: The scene now open for editing.
        """
        scene = find_scene(self.store.get(project_id), scene_id)
        if self._open_scene is not None and self._open_scene != (project_id, scene_id):
            await self._debouncer.flush(_scene_key(*self._open_scene))
        self._open_scene = (project_id, scene_id)
        return scene

    async def close_scene(self) -> None:
        """Leave the open scene, writing its pending content immediately."""
        if self._open_scene is None:
            return
        await self._debouncer.flush(_scene_key(*self._open_scene))
        self._open_scene = None

    def has_pending_write(self, project_id: str, scene_id: str) -> bool:
        """Return True while scene text is waiting for its debounce timer."""
        return self._debouncer.is_pending(_scene_key(project_id, scene_id))

    async def flush(self) -> None:
        """Write every pending edit and wait for writes already in flight."""
        await self._debouncer.flush_all()
        if self._writes:
            await asyncio.gather(*list(self._writes))

    # ---- project lifecycle ----

    async def load(self, owner_id: str) -> list[Project]:
        """Load every project of *owner_id* into the working set.

        Returns:
            list[Project]: Loaded projects.
        """
        return await self.store.load(owner_id)

    async def create_project(
        self,
        owner_id: str,
        title: str | None = None,
        genre: str | None = None,
        tags: Iterable[str] = (),
    ) -> Project:
        """Create a project with a single empty act, waiting for the durable write.

        Returns:
            Project: The stored project.

        Raises:
            StoreError: If the durable write fails; the project list is untouched.
        """
        project = Project(
            owner_id=owner_id,
            title=title or "Untitled Project",
            genre=genre or "Fiction",
            tags=list(tags),
            acts=[Act(title="Act 1")],
        )
        return await self.store.insert(project)

    async def delete_project(self, project_id: str) -> None:
        """Delete a project durably before removing it from the working set.

        Raises:
            StoreError: If the durable delete fails; the project list is untouched.
        """
        await self.store.remove(project_id)
        for key in self._debouncer.pending_keys:
            if key.startswith(f"{project_id}:"):
                self._debouncer.cancel(key)
        if self._open_scene is not None and self._open_scene[0] == project_id:
            self._open_scene = None

    # ---- internals ----

    def _persist_now(self, project_id: str) -> None:
        task = asyncio.get_running_loop().create_task(self.store.persist(project_id))
        self._writes.add(task)
        task.add_done_callback(self._writes.discard)

    def _require_generation(self, error: type[ScanError] | type[DraftError] | type[ChatError]) -> GenerationServiceProtocol:
        if self.generation is None:
            raise error("No generation service is configured")
        return self.generation
