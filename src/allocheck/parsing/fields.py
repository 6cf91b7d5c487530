# src/allocheck/parsing/fields.py
"""
@brief
Tolerant parsers for the recurring malformed-data shapes in uploaded CSVs.

@details
Two encodings show up in practice:
    - numeric lists : "[1,2,3]", "1,2,3", "[ 1, 2 ]"
    - phase ranges  : "1-3" (inclusive)

parse_phase_spec picks the grammar with a fixed heuristic: a hyphen in text
that does not start with "[" means a range, everything else is a list. A
bracketed value containing a hyphen is therefore parsed (and rejected) as a
list. Keep that precedence in one place; callers must not re-implement it.

Range ends are capped at MAX_PHASE so that one cell cannot expand into an
unbounded phase list.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from allocheck.errors import MalformedListError
from allocheck.schemas.registry import MAX_PHASE
from allocheck.schemas.rows import Cell, as_text, normalize_cell

_INT_RE = re.compile(r"^[+-]?\d+$")


def parse_int(value: Cell) -> int | None:
    """
    @brief
    Interpret a cell as an integer.

    @details
    Accepts ints, integral floats ("3" read as 3.0 by pandas) and strings of
    optionally signed decimal digits. Anything else, including "2.5" and
    absent cells, yields None. So do digit strings too long to convert.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not _INT_RE.match(text):
        return None
    try:
        return int(text)
    except ValueError:
        # digit strings beyond the interpreter's int conversion limit
        return None


def split_tokens(value: Cell) -> list[str]:
    """Comma-split a cell, trimming tokens and dropping empty ones."""
    if value is None:
        return []
    return [t.strip() for t in as_text(value).split(",") if t.strip()]


def parse_numeric_list(raw: Cell | Sequence[Any]) -> list[int]:
    """
    @brief
    Parse a bracket-optional, comma-separated list of integers.

    @details
    Already-decoded sequences are parsed element-wise; a bare number is a
    one-element list.

    @returns
        Parsed integers in input order; [] for empty-after-trim input.

    @raises
        MalformedListError if any token is not an integer.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return [n for item in raw for n in parse_numeric_list(normalize_cell(item))]
    if not isinstance(raw, str):
        number = parse_int(raw)
        if number is None:
            raise MalformedListError(
                f"Non-integer value in numeric list: {as_text(raw)}",
                source="fields.parse_numeric_list",
            )
        return [number]

    text = raw.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1].strip()
    if not text:
        return []

    out: list[int] = []
    for token in text.split(","):
        number = parse_int(token)
        if number is None:
            raise MalformedListError(
                f"Non-numeric token {token.strip()!r} in list {raw!r}",
                source="fields.parse_numeric_list",
                suggested_action="Use comma-separated integers, e.g. [1,2,3] or 1,2,3",
            )
        out.append(number)
    return out


def parse_phase_spec(raw: Cell) -> list[int]:
    """
    @brief
    Parse a phase specification: inclusive range "start-end" or numeric list.

    @raises
        MalformedListError for a non-numeric range bound, start < 1,
        start > end, end > MAX_PHASE, more than one hyphen, or a malformed list.
    """
    if raw is None:
        return []
    text = as_text(raw).strip()

    if "-" in text and not text.startswith("["):
        parts = text.split("-")
        if len(parts) != 2:
            raise MalformedListError(
                f"Invalid phase range {text!r}: expected 'start-end'",
                source="fields.parse_phase_spec",
            )
        start, end = parse_int(parts[0]), parse_int(parts[1])
        if start is None or end is None:
            raise MalformedListError(
                f"Invalid phase range {text!r}: bounds must be integers",
                source="fields.parse_phase_spec",
            )
        if start < 1 or start > end:
            raise MalformedListError(
                f"Invalid phase range {text!r}: requires 1 <= start <= end",
                source="fields.parse_phase_spec",
            )
        if end > MAX_PHASE:
            raise MalformedListError(
                f"Invalid phase range {text!r}: end exceeds the last phase ({MAX_PHASE})",
                source="fields.parse_phase_spec",
            )
        return list(range(start, end + 1))

    return parse_numeric_list(text)


__all__ = ["parse_int", "split_tokens", "parse_numeric_list", "parse_phase_spec"]
