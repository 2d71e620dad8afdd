"""Structural merge of edit patches into the project tree."""

from __future__ import annotations

from typing import Any

from inkwell_core.aggregates import recompute
from inkwell_schemas.base import BaseSchema
from inkwell_schemas.manuscript import Act, ActPatch, Project, ProjectPatch, Scene, ScenePatch
from inkwell_schemas.primitives import utc_now

type Patch = ProjectPatch | ActPatch | ScenePatch

# Fields that may be cleared by setting them to None explicitly.
_NULLABLE = {"back_synopsis", "front_cover", "back_cover", "image"}


def find_act(project: Project, act_id: str) -> Act:
    """Return the act *act_id* of *project* or raise if missing.

    Raises:
        KeyError: If the act id is unknown.

    Returns:
        Act: The requested act.
    """
    for act in project.acts:
        if act.id == act_id:
            return act
    message = f"Unknown act id: {act_id}"
    raise KeyError(message)


def find_scene(project: Project, scene_id: str) -> Scene:
    """Return the scene *scene_id* of *project* or raise if missing.

    Raises:
        KeyError: If the scene id is unknown.

    Returns:
        Scene: The requested scene.
    """
    for scene in project.iter_scenes():
        if scene.id == scene_id:
            return scene
    message = f"Unknown scene id: {scene_id}"
    raise KeyError(message)


def _changes(patch: BaseSchema, target: str | None = None) -> dict[str, Any]:
    """Return explicitly set patch fields, skipping None for required fields."""
    changes: dict[str, Any] = {}
    for name in patch.model_fields_set:
        if name == target:
            continue
        value = getattr(patch, name)
        if value is None and name not in _NULLABLE:
            continue
        changes[name] = value
    return changes


def apply_patch(project: Project, patch: Patch) -> Project:
    """Return a copy of *project* with *patch* merged in.

    Only fields explicitly set on the patch are applied. The result always has
    ``last_edited`` refreshed and every word count re-derived from content.

    Args:
        project: Project to edit; never mutated.
        patch: Project-, act- or scene-level edit.

    Returns:
        Project: The updated project.

    Raises:
        KeyError: If the patch targets an unknown act or scene.
        ValueError: If a codex replacement contains duplicate ids.
        TypeError: If *patch* is not a supported patch type.
    """
    if isinstance(patch, ProjectPatch):
        changes = _changes(patch)
        if "codex" in changes:
            ids = [entry.id for entry in changes["codex"]]
            if len(set(ids)) != len(ids):
                raise ValueError("codex entries must have unique ids")
            changes["codex"] = list(changes["codex"])
        updated = project.model_copy(update=changes)
    elif isinstance(patch, ActPatch):
        find_act(project, patch.act_id)
        changes = _changes(patch, "act_id")
        acts = [act.model_copy(update=changes) if act.id == patch.act_id else act for act in project.acts]
        updated = project.model_copy(update={"acts": acts})
    elif isinstance(patch, ScenePatch):
        find_scene(project, patch.scene_id)
        changes = _changes(patch, "scene_id")
        acts = [
            act.model_copy(
                update={
                    "scenes": [
                        scene.model_copy(update=changes) if scene.id == patch.scene_id else scene
                        for scene in act.scenes
                    ]
                }
            )
            for act in project.acts
        ]
        updated = project.model_copy(update={"acts": acts})
    else:
        message = f"Unsupported patch type: {type(patch).__name__}"
        raise TypeError(message)

    return recompute(updated.model_copy(update={"last_edited": utc_now()}))
