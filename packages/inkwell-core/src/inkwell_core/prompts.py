"""Prompt builders for generation calls."""

from __future__ import annotations

from inkwell_schemas.manuscript import Project
from inkwell_schemas.primitives import CodexEntryType

DEFAULT_MAX_SCAN_CHARS = 30_000
DRAFT_CONTEXT_CHARS = 1_000
TRUNCATION_MARKER = "\n[... manuscript truncated ...]"

CODEX_SCAN_SYSTEM_INSTRUCTION = (
    "You are a meticulous literary analyst building a character codex. "
    "Return ONLY a JSON array, with no prose and no markdown code fences. "
    "Each element must be an object with the keys "
    '"name", "role", "age", "appearance", "personality", "background" and "traits". '
    'Use "Unknown" for anything the manuscript does not establish. '
    "Include every named character, including ones already known."
)


def manuscript_excerpt(project: Project, max_chars: int = DEFAULT_MAX_SCAN_CHARS) -> str:
    """Return the manuscript as headed plain text, capped at *max_chars* characters."""
    parts: list[str] = []
    for act in project.acts:
        parts.append(f"## {act.title}")
        for scene in act.scenes:
            parts.append(f"### {scene.title}")
            if scene.content.strip():
                parts.append(scene.content.strip())
    text = "\n\n".join(parts)
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def build_codex_scan_prompt(project: Project, max_chars: int = DEFAULT_MAX_SCAN_CHARS) -> str:
    """Build the user prompt for a character extraction scan."""
    known = [entry.name for entry in project.codex if entry.type == CodexEntryType.CHARACTER]
    known_text = ", ".join(known) if known else "None"
    return (
        f'Novel: "{project.title}" ({project.genre})\n'
        f"Known characters: {known_text}\n\n"
        f"Manuscript:\n{manuscript_excerpt(project, max_chars)}"
    )


def build_draft_prompt(project: Project, request: str) -> str:
    """Build the user prompt for drafting prose into a scene."""
    return f'Draft the following for my scene in the novel "{project.title}": {request}'


def build_draft_system_instruction(scene_content: str) -> str:
    """Build the drafting system instruction around the tail of the scene."""
    context = scene_content[-DRAFT_CONTEXT_CHARS:]
    return (
        "You are a world-class novelist. Use immersive, high-quality prose. "
        f"Current scene context: {context}"
    )


WORKSHOP_FALLBACK_REPLY = "I'm sorry, I couldn't process that request."


def build_workshop_system_instruction(project: Project) -> str:
    """Build the system instruction for free-form workshop chat about *project*."""
    return (
        f'You are NovelCrafter AI. Assistant for the project "{project.title}". '
        "Help the author brainstorm, research, or draft."
    )
