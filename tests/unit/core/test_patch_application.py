"""Unit tests for structural patch merging."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from inkwell_core.edits import apply_patch, find_act, find_scene
from inkwell_schemas.codex import CodexEntry
from inkwell_schemas.manuscript import ActPatch, Project, ProjectPatch, ScenePatch
from inkwell_schemas.primitives import PrintSize, SceneStatus

_OLD = datetime(2024, 1, 1, tzinfo=UTC)


def test_scene_content_patch_updates_counts(sample_project: Project) -> None:
    """Content edits re-derive scene and project word counts."""
    project = sample_project.model_copy(update={"last_edited": _OLD})

    updated = apply_patch(project, ScenePatch(scene_id="scene-2", content="four more words here"))

    assert find_scene(updated, "scene-2").content == "four more words here"
    assert find_scene(updated, "scene-2").word_count == 4
    assert updated.word_count == 9
    assert updated.last_edited > _OLD
    assert find_scene(project, "scene-2").content == ""


def test_scene_metadata_patch_leaves_other_fields(sample_project: Project) -> None:
    """Only explicitly set fields are applied."""
    updated = apply_patch(sample_project, ScenePatch(scene_id="scene-1", status=SceneStatus.DONE))

    scene = find_scene(updated, "scene-1")
    assert scene.status == "Done"
    assert scene.title == "Harbor"
    assert scene.content == "a b c"


def test_explicit_none_for_required_field_is_ignored(sample_project: Project) -> None:
    """Setting a non-nullable field to None leaves it unchanged."""
    updated = apply_patch(sample_project, ScenePatch(scene_id="scene-1", title=None, content=None))

    assert find_scene(updated, "scene-1").title == "Harbor"
    assert find_scene(updated, "scene-1").content == "a b c"


def test_nullable_fields_can_be_cleared(sample_project: Project) -> None:
    """Covers and synopsis are cleared by an explicit None."""
    project = apply_patch(sample_project, ProjectPatch(back_synopsis="Blurb", front_cover="Y292ZXI="))
    assert project.back_synopsis == "Blurb"

    cleared = apply_patch(project, ProjectPatch(back_synopsis=None, front_cover=None))

    assert cleared.back_synopsis is None
    assert cleared.front_cover is None


def test_project_patch_fields(sample_project: Project) -> None:
    """Project-level metadata is merged."""
    updated = apply_patch(
        sample_project,
        ProjectPatch(title="Salt and Ash", tags=["quest", "quest", "epic"], print_size=PrintSize.US_LETTER),
    )

    assert updated.title == "Salt and Ash"
    assert updated.tags == ["quest", "epic"]
    assert updated.print_size == "US Letter"
    assert updated.genre == "Fantasy"


def test_act_patch_renames(sample_project: Project) -> None:
    """Act patches target a single act."""
    updated = apply_patch(sample_project, ActPatch(act_id="act-2", title="Finale"))

    assert find_act(updated, "act-2").title == "Finale"
    assert find_act(updated, "act-1").title == "Act 1"


def test_codex_replacement_deletes_entries(sample_project: Project) -> None:
    """Replacing the codex set is the deletion path."""
    updated = apply_patch(sample_project, ProjectPatch(codex=[]))

    assert updated.codex == []


def test_codex_replacement_rejects_duplicate_ids(sample_project: Project) -> None:
    """Duplicate ids in a codex replacement are rejected."""
    entries = [CodexEntry(id="dup", name="A"), CodexEntry(id="dup", name="B")]

    with pytest.raises(ValueError, match="unique ids"):
        apply_patch(sample_project, ProjectPatch(codex=entries))


@pytest.mark.parametrize(
    "patch",
    [ScenePatch(scene_id="missing", content="x"), ActPatch(act_id="missing", title="x")],
)
def test_unknown_targets_raise(sample_project: Project, patch: ScenePatch | ActPatch) -> None:
    """Patches for unknown ids raise KeyError."""
    with pytest.raises(KeyError, match="missing"):
        apply_patch(sample_project, patch)


def test_unsupported_patch_type(sample_project: Project) -> None:
    """Only the three patch kinds are accepted."""
    with pytest.raises(TypeError):
        apply_patch(sample_project, object())  # type: ignore[arg-type]
