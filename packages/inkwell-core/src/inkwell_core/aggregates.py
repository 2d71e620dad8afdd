"""Derived counts for the manuscript tree.

Every function here is pure and total: undefined or blank content counts as
zero words, and nothing is cached between calls.
"""

from __future__ import annotations

from collections import Counter

from inkwell_schemas.manuscript import Act, Project, ProjectStats

WORDS_PER_MINUTE = 200


def scene_word_count(content: str | None) -> int:
    """Return the number of whitespace-delimited tokens in *content*."""
    if not content or not content.strip():
        return 0
    return len(content.split())


def project_word_count(project: Project) -> int:
    """Return the sum of scene word counts, recomputed from content."""
    return sum(scene_word_count(scene.content) for act in project.acts for scene in act.scenes)


def recompute(project: Project) -> Project:
    """Return a copy of *project* with every derived word count re-derived."""
    acts: list[Act] = []
    for act in project.acts:
        scenes = [
            scene.model_copy(update={"word_count": scene_word_count(scene.content)}) for scene in act.scenes
        ]
        acts.append(act.model_copy(update={"scenes": scenes}))
    total = sum(scene.word_count for act in acts for scene in act.scenes)
    return project.model_copy(update={"acts": acts, "word_count": total})


def project_stats(project: Project) -> ProjectStats:
    """Summarize *project* for the review screen."""
    scenes = project.iter_scenes()
    words = project_word_count(project)
    return ProjectStats(
        word_count=words,
        act_count=len(project.acts),
        scene_count=len(scenes),
        reading_minutes=words // WORDS_PER_MINUTE,
        scenes_by_status=dict(Counter(scene.status for scene in scenes)),
        codex_by_type=dict(Counter(entry.type for entry in project.codex)),
    )
