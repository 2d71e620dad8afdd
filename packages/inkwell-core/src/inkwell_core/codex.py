"""Reconciliation of extracted characters into a user-owned codex.

Matching uses case-insensitive name equality restricted to Character entries.
This is a heuristic identity: two distinct characters that share a name are
indistinguishable to a scan, and the first one in codex order receives the
update. Entry ids remain the only identity used for persistence and editing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from inkwell_core.util.logging import get_logger
from inkwell_schemas.codex import UNKNOWN, CandidateCharacter, CodexEntry
from inkwell_schemas.primitives import CodexEntryType, new_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of merging a batch of candidates."""

    codex: list[CodexEntry]
    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped_locked: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Return True when the merge produced any mutation."""
        return bool(self.added or self.updated)


def _match_key(name: str) -> str:
    return name.strip().casefold()


def _find_character_index(codex: Sequence[CodexEntry], name: str) -> int | None:
    key = _match_key(name)
    for index, entry in enumerate(codex):
        if entry.type == CodexEntryType.CHARACTER and _match_key(entry.name) == key:
            return index
    return None


def find_character(codex: Iterable[CodexEntry], name: str) -> CodexEntry | None:
    """Return the first Character entry whose name matches *name* case-insensitively."""
    entries = list(codex)
    index = _find_character_index(entries, name)
    return None if index is None else entries[index]


def format_candidate(candidate: CandidateCharacter) -> tuple[str, str, str]:
    """Render a candidate as codex ``(description, details, notes)`` text.

    Missing values keep their "Unknown" placeholder so every character entry
    shows the same field layout.

    Returns:
        tuple[str, str, str]: Description, details and notes text.
    """
    description = candidate.role or UNKNOWN
    detail_lines = [
        f"Age: {candidate.age or UNKNOWN}",
        f"Appearance: {candidate.appearance or UNKNOWN}",
        f"Personality: {candidate.personality or UNKNOWN}",
        f"Background: {candidate.background or UNKNOWN}",
    ]
    if candidate.character_arc:
        detail_lines.append(f"Character Arc: {candidate.character_arc}")
    if candidate.relationships:
        detail_lines.append(f"Key Relationships: {candidate.relationships}")
    notes = f"Traits: {candidate.traits or UNKNOWN}"
    if candidate.notes:
        notes = f"{notes}\n\n{candidate.notes}"
    return description, "\n".join(detail_lines), notes


def _new_character(candidate: CandidateCharacter, *, locked: bool) -> CodexEntry:
    description, details, notes = format_candidate(candidate)
    return CodexEntry(
        id=new_id(),
        name=candidate.name,
        type=CodexEntryType.CHARACTER,
        description=description,
        details=details,
        notes=notes,
        is_locked=locked,
    )


def merge(candidates: Sequence[CandidateCharacter], existing_codex: Sequence[CodexEntry]) -> MergeResult:
    """Merge extracted candidates into a copy of *existing_codex*.

    Locked matches are left untouched. Unlocked matches have description,
    details and notes overwritten while id, lock state and image survive.
    Unmatched candidates are appended as new unlocked Character entries so
    later scans can keep refining them.

    Args:
        candidates: Candidates in extraction order.
        existing_codex: Current codex; never mutated.

    Returns:
        MergeResult: The new codex and a per-name account of what changed.
    """
    codex = list(existing_codex)
    added: list[str] = []
    updated: list[str] = []
    skipped: list[str] = []

    for candidate in candidates:
        index = _find_character_index(codex, candidate.name)
        if index is None:
            codex.append(_new_character(candidate, locked=False))
            added.append(candidate.name)
            continue
        match = codex[index]
        if match.is_locked:
            skipped.append(match.name)
            continue
        description, details, notes = format_candidate(candidate)
        codex[index] = match.model_copy(update={"description": description, "details": details, "notes": notes})
        updated.append(match.name)

    logger.info(
        "Codex merge: %d added, %d updated, %d skipped (locked)",
        len(added),
        len(updated),
        len(skipped),
    )
    return MergeResult(codex=codex, added=added, updated=updated, skipped_locked=skipped)


def build_manual_entry(candidate: CandidateCharacter) -> CodexEntry:
    """Build a codex entry from a manual import.

    Manual imports bypass matching and always start locked, so a later scan
    cannot overwrite what the author typed.

    Returns:
        CodexEntry: A new locked Character entry.
    """
    return _new_character(candidate, locked=True)
