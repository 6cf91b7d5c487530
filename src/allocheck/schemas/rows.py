# src/allocheck/schemas/rows.py
"""
@brief
Loosely-typed row model shared by all validators.

@details
A row maps a column name to a Cell, which is one of a small closed set:
    - None   : absent (missing key, None, NaN/NA, blank string)
    - str    : trimmed, non-empty text
    - int    : integral number
    - float  : any other finite or infinite number

Rows arrive from external collaborators (CSV readers, DataFrames, JSON
payloads) with inconsistent scalar types. Normalizing once at the engine
boundary lets every field check branch on these four cases only.
"""

from __future__ import annotations

import numbers
from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

Cell = str | int | float | None
Row = dict[str, Cell]


def normalize_cell(value: Any) -> Cell:
    """
    @brief
    Convert an arbitrary scalar into the closed Cell variant.

    @details
    Sequences (e.g. a slot list already decoded from JSON) are rendered in
    bracketed list notation so that the field parsers treat them like the
    equivalent CSV text.
    """
    if value is None:
        return None

    # (1) Decoded lists -> "[1,2,3]"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(as_text(normalize_cell(v)) for v in value) + "]"

    # (2) pandas/numpy missing markers
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)

    text = str(value).strip()
    return text or None


def normalize_row(row: Mapping[str, Any]) -> Row:
    return {str(k).strip(): normalize_cell(v) for k, v in row.items()}


def normalize_rows(rows: Iterable[Mapping[str, Any]] | pd.DataFrame | None) -> list[Row]:
    """
    @brief
    Normalize a row collection into list[Row].

    @details
    Accepts a pandas DataFrame (converted via records orientation) or any
    iterable of mappings. None yields an empty list.
    """
    if rows is None:
        return []
    if isinstance(rows, pd.DataFrame):
        records = rows.to_dict(orient="records")
        return [normalize_row(r) for r in records]
    return [normalize_row(r) for r in rows]


def as_text(cell: Cell) -> str:
    """Render a cell for comparisons and messages; integral floats lose their '.0'."""
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def is_absent(cell: Cell) -> bool:
    return cell is None


__all__ = ["Cell", "Row", "normalize_cell", "normalize_row", "normalize_rows", "as_text", "is_absent"]
