"""Parsers turning loosely structured text into candidate codex records."""

from __future__ import annotations

import re
from collections.abc import Mapping

import orjson
from pydantic import ValidationError

from inkwell_core.errors import ParseError
from inkwell_core.util.logging import get_logger
from inkwell_schemas.codex import UNKNOWN, CandidateCharacter

logger = get_logger(__name__)

_FENCED_BLOCK = re.compile(r"```[A-Za-z]*[ \t]*\n?(.*?)```", re.DOTALL)
_KEY_VALUE = re.compile(r"^([^:]+):(.*)$")
_NAME_PREFIX = re.compile(r"^name\s*:\s*(.+)$", re.IGNORECASE)

_AI_FIELDS = ("role", "age", "appearance", "personality", "background", "traits")

# Keys are matched case-sensitively, exactly as users type them in notes.
MANUAL_KEYS: dict[str, str] = {
    "Role": "role",
    "Age": "age",
    "Appearance": "appearance",
    "Personality": "personality",
    "Background": "background",
    "Character Arc": "character_arc",
    "Key Relationships": "relationships",
    "Notable Traits": "traits",
}
NOTES_KEY = "Notes"


def strip_code_fences(text: str) -> str:
    """Return *text* without surrounding markdown code fences.

    Models asked for bare JSON still answer with ```json blocks, sometimes with
    a sentence of preamble. The first fenced block wins when one exists.
    """
    match = _FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.removeprefix("```json").removeprefix("```JSON").removeprefix("```")
    return stripped.removesuffix("```").strip()


def parse_ai_extraction(raw_response: str) -> list[CandidateCharacter]:
    """Parse a generated character extraction into candidates.

    Args:
        raw_response: Text returned by the generation service.

    Returns:
        list[CandidateCharacter]: Candidates in response order. Records without a
        usable name are dropped without affecting their siblings.

    Raises:
        ParseError: If the response is not valid JSON or has an unexpected shape.
    """
    payload_text = strip_code_fences(raw_response)
    if not payload_text:
        raise ParseError("Extraction response is empty", raw_text=raw_response)
    try:
        payload = orjson.loads(payload_text)
    except orjson.JSONDecodeError as exc:
        raise ParseError(f"Extraction response is not valid JSON: {exc}", raw_text=raw_response) from exc

    records = _extract_records(payload)
    if records is None:
        message = f"Expected a JSON array of characters, got {type(payload).__name__}"
        raise ParseError(message, raw_text=raw_response)

    candidates: list[CandidateCharacter] = []
    for index, record in enumerate(records):
        candidate = _candidate_from_record(record)
        if candidate is None:
            logger.debug("Dropping extraction record %d without a usable name", index)
            continue
        candidates.append(candidate)
    logger.info("Parsed %d of %d extracted character records", len(candidates), len(records))
    return candidates


def _extract_records(payload: object) -> list[object] | None:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        wrapped = payload.get("characters")
        if isinstance(wrapped, list):
            return wrapped
        # A lone object is one record; without a name it is dropped later.
        return [payload]
    return None


def _candidate_from_record(record: object) -> CandidateCharacter | None:
    if not isinstance(record, Mapping):
        return None
    fields = {str(key).strip().lower(): value for key, value in record.items()}
    name = _coerce_text(fields.get("name"))
    if name is None:
        return None
    values = {field: _coerce_text(fields.get(field)) or UNKNOWN for field in _AI_FIELDS}
    try:
        return CandidateCharacter(name=name, **values)
    except ValidationError:
        return None


def _coerce_text(value: object) -> str | None:
    """Return *value* as stripped text, or None when it carries nothing."""
    if value is None or isinstance(value, (dict, bool)):
        return None
    if isinstance(value, list):
        parts = [part for part in (_coerce_text(item) for item in value) if part]
        text = ", ".join(parts)
    else:
        text = str(value)
    text = text.strip()
    return text or None


def parse_manual_import(raw_text: str) -> CandidateCharacter:
    """Parse pasted character notes into a single candidate.

    The first non-empty line is the name. ``Key: Value`` lines open a section;
    lines without a colon continue the most recent section on a new line.
    Unrecognized keys are kept under notes instead of being dropped.

    Args:
        raw_text: Text pasted by the user.

    Returns:
        CandidateCharacter: The parsed candidate.

    Raises:
        ParseError: If the text contains no name line.
    """
    lines = [line.rstrip() for line in raw_text.splitlines()]
    body_start = next((index for index, line in enumerate(lines) if line.strip()), None)
    if body_start is None:
        raise ParseError("Manual import is empty", raw_text=raw_text)

    name = lines[body_start].strip()
    prefixed = _NAME_PREFIX.match(name)
    if prefixed:
        name = prefixed.group(1).strip()

    sections: dict[str, list[str]] = {}
    current_key: str | None = None
    for line in lines[body_start + 1 :]:
        if not line.strip():
            continue
        match = _KEY_VALUE.match(line.strip())
        if match:
            current_key = match.group(1).strip()
            sections.setdefault(current_key, []).append(match.group(2).strip())
            continue
        if current_key is None:
            current_key = NOTES_KEY
        sections.setdefault(current_key, []).append(line.strip())

    values: dict[str, str] = {}
    extra_notes: list[str] = []
    for key, parts in sections.items():
        text = "\n".join(part for part in parts if part)
        field = MANUAL_KEYS.get(key)
        if field is not None:
            if text:
                values[field] = text
        elif key == NOTES_KEY:
            if text:
                extra_notes.append(text)
        else:
            extra_notes.append(f"{key}: {text}" if text else f"{key}:")

    if extra_notes:
        values["notes"] = "\n".join(extra_notes)
    try:
        return CandidateCharacter(name=name, **values)
    except ValidationError as exc:
        raise ParseError(f"Manual import has no usable name: {exc}", raw_text=raw_text) from exc
