"""Unit tests for extraction and manual-import parsers."""

from __future__ import annotations

import pytest

from inkwell_core.errors import ParseError
from inkwell_core.parsers import parse_ai_extraction, parse_manual_import, strip_code_fences


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('```json\n[{"name": "A"}]\n```', '[{"name": "A"}]'),
        ('```\n[]\n```', "[]"),
        ("  []  ", "[]"),
        ('Here you go:\n```json\n{"name": "A"}\n```\nEnjoy!', '{"name": "A"}'),
        ('```json[1]```', "[1]"),
    ],
)
def test_strip_code_fences(raw: str, expected: str) -> None:
    """Fences and surrounding whitespace are removed."""
    assert strip_code_fences(raw) == expected


def test_parse_ai_extraction_reads_fenced_array() -> None:
    """A fenced JSON array yields one candidate per named record."""
    raw = (
        "```json\n"
        '[{"name": "Aria", "role": "Scout", "age": 19, "traits": ["brave", "curious"]},'
        ' {"name": "Bram"}]\n'
        "```"
    )

    candidates = parse_ai_extraction(raw)

    assert [candidate.name for candidate in candidates] == ["Aria", "Bram"]
    aria, bram = candidates
    assert aria.role == "Scout"
    assert aria.age == "19"
    assert aria.traits == "brave, curious"
    assert aria.appearance == "Unknown"
    assert bram.role == "Unknown"


def test_parse_ai_extraction_drops_records_without_name() -> None:
    """Nameless and non-object records are dropped without affecting siblings."""
    raw = '[{"role": "Guard"}, {"name": "  "}, "Aria", 7, {"name": "Bram", "role": "Smith"}]'

    candidates = parse_ai_extraction(raw)

    assert len(candidates) == 1
    assert candidates[0].name == "Bram"
    assert candidates[0].role == "Smith"


def test_parse_ai_extraction_accepts_wrapped_list() -> None:
    """Objects wrapping the list under ``characters`` are accepted."""
    candidates = parse_ai_extraction('{"characters": [{"name": "Aria"}]}')

    assert [candidate.name for candidate in candidates] == ["Aria"]


def test_parse_ai_extraction_accepts_single_record() -> None:
    """A lone character object is treated as a one-element list."""
    candidates = parse_ai_extraction('{"Name": "Aria", "Role": "Scout"}')

    assert candidates[0].name == "Aria"
    assert candidates[0].role == "Scout"


def test_parse_ai_extraction_empty_array() -> None:
    """An empty array is valid and yields nothing."""
    assert parse_ai_extraction("[]") == []


@pytest.mark.parametrize("raw", ["not json at all", "[{]", "", "```json\n```"])
def test_parse_ai_extraction_rejects_malformed(raw: str) -> None:
    """Malformed responses raise ParseError."""
    with pytest.raises(ParseError) as excinfo:
        parse_ai_extraction(raw)

    assert excinfo.value.raw_text == raw


@pytest.mark.parametrize("raw", ['{"role": "Scout", "age": "19"}', '{"summary": "none"}', "```json\n{}\n```"])
def test_parse_ai_extraction_drops_lone_nameless_object(raw: str) -> None:
    """A single object without a name is dropped instead of failing the scan."""
    assert parse_ai_extraction(raw) == []


@pytest.mark.parametrize("raw", ["42", '"Aria"', "null"])
def test_parse_ai_extraction_rejects_unexpected_shape(raw: str) -> None:
    """Valid JSON of the wrong shape raises ParseError."""
    with pytest.raises(ParseError, match="Expected a JSON array"):
        parse_ai_extraction(raw)


def test_parse_manual_import_recognized_keys() -> None:
    """Recognized keys map onto candidate fields."""
    raw = "\n\nMira\nRole: Scout\nAge: 19\nCharacter Arc: Learns to trust\nKey Relationships: Aria's sister\n"

    candidate = parse_manual_import(raw)

    assert candidate.name == "Mira"
    assert candidate.role == "Scout"
    assert candidate.age == "19"
    assert candidate.character_arc == "Learns to trust"
    assert candidate.relationships == "Aria's sister"
    assert candidate.appearance == "Unknown"


def test_parse_manual_import_continuation_lines() -> None:
    """Lines without a colon continue the previous key on a new line."""
    raw = "Mira\nBackground: Grew up on the coast\nand left at twelve\nNotable Traits: Stubborn"

    candidate = parse_manual_import(raw)

    assert candidate.background == "Grew up on the coast\nand left at twelve"
    assert candidate.traits == "Stubborn"


def test_parse_manual_import_keeps_unknown_keys_in_notes() -> None:
    """Unrecognized keys are preserved under notes."""
    raw = "Mira\nFavourite Food: Plums\nrole: lowercase keys are not recognized"

    candidate = parse_manual_import(raw)

    assert candidate.role == "Unknown"
    assert candidate.notes == "Favourite Food: Plums\nrole: lowercase keys are not recognized"


def test_parse_manual_import_strips_name_prefix() -> None:
    """A leading ``Name:`` label is not part of the name."""
    assert parse_manual_import("Name: Mira\nAge: 19").name == "Mira"


def test_parse_manual_import_free_text_goes_to_notes() -> None:
    """Text before any key is kept as notes."""
    candidate = parse_manual_import("Mira\nQuiet, watches everyone.")

    assert candidate.notes == "Quiet, watches everyone."


@pytest.mark.parametrize("raw", ["", "   \n\t\n"])
def test_parse_manual_import_rejects_empty(raw: str) -> None:
    """Only text without any non-empty line is an error."""
    with pytest.raises(ParseError):
        parse_manual_import(raw)
