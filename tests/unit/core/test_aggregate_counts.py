"""Unit tests for derived word counts and statistics."""

from __future__ import annotations

import pytest

from inkwell_core.aggregates import project_stats, project_word_count, recompute, scene_word_count
from inkwell_schemas.codex import CodexEntry
from inkwell_schemas.manuscript import Act, Project, Scene
from inkwell_schemas.primitives import CodexEntryType, SceneStatus


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("  hello   world  ", 2),
        ("", 0),
        ("   \n\t ", 0),
        (None, 0),
        ("one\ntwo\tthree", 3),
        ("single", 1),
    ],
)
def test_scene_word_count(content: str | None, expected: int) -> None:
    """Words are whitespace-delimited tokens."""
    assert scene_word_count(content) == expected


def test_project_word_count_sums_scenes(sample_project: Project) -> None:
    """The project total is recomputed from every scene's content."""
    assert project_word_count(sample_project) == 5


def test_project_word_count_ignores_stale_fields() -> None:
    """Stored counts are never trusted."""
    project = Project(
        owner_id="w",
        word_count=999,
        acts=[Act(title="A", scenes=[Scene(content="a b c", word_count=42), Scene(content="")])],
    )

    assert project_word_count(project) == 3


def test_recompute_rederives_every_count() -> None:
    """Recompute fixes scene and project counts without touching content."""
    project = Project(
        owner_id="w",
        word_count=999,
        acts=[Act(title="A", scenes=[Scene(content="a b c", word_count=42), Scene(content="", word_count=7)])],
    )

    updated = recompute(project)

    assert [scene.word_count for scene in updated.iter_scenes()] == [3, 0]
    assert updated.word_count == 3
    assert project.word_count == 999


def test_project_stats(sample_project: Project) -> None:
    """Statistics cover structure, status, codex types and reading time."""
    project = sample_project.model_copy(
        update={
            "acts": [
                Act(title="A", scenes=[Scene(content="word " * 450, status=SceneStatus.DONE), Scene()]),
            ],
            "codex": [
                CodexEntry(name="Aria"),
                CodexEntry(name="Port", type=CodexEntryType.LOCATION),
                CodexEntry(name="Bram"),
            ],
        }
    )

    stats = project_stats(project)

    assert stats.word_count == 450
    assert stats.act_count == 1
    assert stats.scene_count == 2
    assert stats.reading_minutes == 2
    assert stats.scenes_by_status == {"Done": 1, "Draft": 1}
    assert stats.codex_by_type == {"Character": 2, "Location": 1}
