"""Dashboard helpers over an owner's project list."""

from __future__ import annotations

from collections.abc import Iterable

from inkwell_schemas.manuscript import Project


def all_tags(projects: Iterable[Project]) -> list[str]:
    """Return every distinct tag across *projects*, sorted."""
    return sorted({tag for project in projects for tag in project.tags})


def filter_projects(
    projects: Iterable[Project],
    query: str = "",
    tag: str | None = None,
) -> list[Project]:
    """Return projects whose title or genre contains *query* and that carry *tag*.

    Matching on *query* is case-insensitive; an empty query matches everything.
    """
    needle = query.strip().lower()
    return [
        project
        for project in projects
        if (not needle or needle in project.title.lower() or needle in project.genre.lower())
        and (tag is None or tag in project.tags)
    ]
