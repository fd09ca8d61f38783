"""Serialization between NoteEvent lists and line-oriented score text."""

from __future__ import annotations

import re
from typing import Final

from scoregen.score_models import NOTE_STATEMENT, NoteEvent, PField, Score

FIELD_SEPARATOR: Final[str] = " "
LINE_TERMINATOR: Final[str] = "\n"
COMMENT_CHAR: Final[str] = ";"

# Fixed decimal places used before trailing zeros are stripped.
_DECIMAL_PLACES = 6

_INT_PATTERN = re.compile(r"^[+-]?\d+$")
_FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")
_WHITESPACE = re.compile(r"\s")


def format_field(value: PField) -> str:
    """
    Render one p-field in the engine-compatible decimal format.

    Numbers never use exponent notation and carry no trailing zeros:
    ``0.0 -> "0"``, ``0.25 -> "0.25"``, ``3.0 -> "3"``. Floats are rounded to
    six decimal places, so ``0.1234567 -> "0.123457"`` and ``1e-7 -> "0"``;
    this also absorbs float noise such as ``0.30000000000000004 -> "0.3"``.
    Strings are passed through untouched.

    Raises:
        ValueError: If the rendered field is empty or contains whitespace,
                    which would break the line framing.
    """
    if isinstance(value, bool):
        raise ValueError(f"Boolean is not a valid p-field: {value!r}")
    if isinstance(value, int):
        text = str(value)
    elif isinstance(value, float):
        text = f"{value:.{_DECIMAL_PLACES}f}".rstrip("0").rstrip(".")
        if text in ("-0", ""):
            text = "0"
    else:
        text = str(value)

    if not text or _WHITESPACE.search(text):
        raise ValueError(f"P-field must be non-empty and free of whitespace: {value!r}")
    return text


def event_to_line(event: NoteEvent) -> str:
    """Flatten one event into ``<tag><p1> <p2> ...`` without a terminator."""
    if len(event.statement) != 1 or _WHITESPACE.search(event.statement):
        raise ValueError(f"Statement tag must be a single character: {event.statement!r}")
    fields = FIELD_SEPARATOR.join(format_field(value) for value in event.pfields)
    return f"{event.statement}{fields}"


def serialize_score(score: Score) -> str:
    """
    Serialize a Score to text, one newline-terminated line per event.

    An empty Score serializes to the empty string.

    Raises:
        ValueError: If the events do not all share the same p-field arity,
                    or any field fails ``format_field``.
    """
    arities = {event.arity for event in score}
    if len(arities) > 1:
        raise ValueError(f"All events in a score must share one arity, got {sorted(arities)}.")
    return "".join(event_to_line(event) + LINE_TERMINATOR for event in score)


def _parse_field(token: str) -> PField:
    if _INT_PATTERN.match(token):
        return int(token)
    if _FLOAT_PATTERN.match(token):
        return float(token)
    return token


def parse_score_text(text: str, statement: str = NOTE_STATEMENT) -> Score:
    """
    Read score text back into NoteEvents.

    Accepts both ``i1 0 1`` and ``i 1 0 1``. Blank lines, ``;`` comments and
    statements other than *statement* (``f``, ``t``, ``e``, ...) are skipped.
    Numeric tokens become ``int`` or ``float``; anything else stays a string.
    """
    events: Score = []
    for raw_line in text.split(LINE_TERMINATOR):
        line = raw_line.split(COMMENT_CHAR, maxsplit=1)[0].strip()
        if not line or line[0] != statement:
            continue

        tokens = line[1:].split()
        if not tokens:
            continue
        events.append(
            NoteEvent(
                pfields=tuple(_parse_field(token) for token in tokens),
                statement=statement,
            )
        )
    return events
