# src/allocheck/validator/row_checks.py
"""
@brief
Per-kind field-level validation of one row set.

@details
Runs, in order: required columns, duplicate/missing IDs, and the field checks
for the given entity kind. Every check isolates its own failures so that one
bad cell never hides findings in sibling rows.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from allocheck.errors import MalformedListError
from allocheck.parsing.fields import parse_int, parse_numeric_list, parse_phase_spec
from allocheck.schemas.registry import (
    ID_FIELDS,
    PRIORITY_MAX,
    PRIORITY_MIN,
    REQUIRED_COLUMNS,
    EntityKind,
)
from allocheck.schemas.rows import Cell, Row, as_text
from allocheck.validator.diagnostics import DiagnosticCollector


def _shown(value: Cell) -> str:
    return as_text(value) if value is not None else "<missing>"


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-standard JSON constant: {name}")


def _is_valid_json(text: str) -> bool:
    """Strict JSON: NaN and Infinity are rejected, pathological nesting counts as broken."""
    try:
        json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False
    return True


def check_required_columns(kind: EntityKind, rows: Sequence[Row], out: DiagnosticCollector) -> None:
    """Report every expected column absent from the first row's keys (dataset-level)."""
    if not rows:
        return
    columns = set(rows[0].keys())
    missing = [c for c in REQUIRED_COLUMNS[kind] if c not in columns]
    if missing:
        out.add_error("RequiredColumns", f"Missing required columns: {', '.join(missing)}")


def check_ids(kind: EntityKind, rows: Sequence[Row], out: DiagnosticCollector) -> None:
    """
    @brief
    Detect missing and duplicate identifiers.

    @details
    Keeps the first row index for every seen ID; later occurrences are
    reported with both indices. IDs are compared by their text form, so
    3 and "3" collide.
    """
    id_field = ID_FIELDS[kind]
    first_seen: dict[str, int] = {}

    for index, row in enumerate(rows):
        raw = row.get(id_field)
        if raw is None:
            out.add_error("MissingId", f"Missing {id_field}", index, id_field)
            continue

        key = as_text(raw)
        if key in first_seen:
            out.add_error(
                "DuplicateId",
                f"Duplicate {id_field}: {key} (rows {first_seen[key]} and {index})",
                index,
                id_field,
            )
        else:
            first_seen[key] = index


def check_client_fields(rows: Sequence[Row], out: DiagnosticCollector) -> None:
    for index, row in enumerate(rows):
        # (1) PriorityLevel within [1, 5]
        raw_priority = row.get("PriorityLevel")
        priority = parse_int(raw_priority)
        if priority is None or not (PRIORITY_MIN <= priority <= PRIORITY_MAX):
            out.add_error(
                "PriorityLevel",
                f"PriorityLevel must be between {PRIORITY_MIN}-{PRIORITY_MAX}, "
                f"got: {_shown(raw_priority)}",
                index,
                "PriorityLevel",
            )

        # (2) AttributesJSON parses when present
        raw_attrs = row.get("AttributesJSON")
        if isinstance(raw_attrs, str) and not _is_valid_json(raw_attrs):
            out.add_error(
                "AttributesJSON", "Broken JSON in AttributesJSON", index, "AttributesJSON"
            )


def check_worker_fields(rows: Sequence[Row], out: DiagnosticCollector) -> None:
    for index, row in enumerate(rows):
        raw_slots = row.get("AvailableSlots")
        if raw_slots is None:
            out.add_error("AvailableSlots", "AvailableSlots is required", index, "AvailableSlots")
            continue

        max_load = parse_int(row.get("MaxLoadPerPhase"))

        # (1) Slot list must be numeric; overload compares it against max load
        try:
            slots = parse_numeric_list(raw_slots)
        except MalformedListError:
            out.add_error(
                "AvailableSlots",
                "Malformed list in AvailableSlots - must contain only numeric values",
                index,
                "AvailableSlots",
            )
        else:
            if max_load is not None and len(slots) < max_load:
                out.add_warning(
                    "WorkerOverload",
                    f"Worker overloaded: {len(slots)} available slots < "
                    f"{max_load} max load per phase",
                    index,
                )

        # (2) MaxLoadPerPhase >= 1
        if max_load is None or max_load < 1:
            out.add_error(
                "MaxLoadPerPhase",
                f"MaxLoadPerPhase must be >= 1, got: {_shown(row.get('MaxLoadPerPhase'))}",
                index,
                "MaxLoadPerPhase",
            )


def check_task_fields(rows: Sequence[Row], out: DiagnosticCollector) -> None:
    for index, row in enumerate(rows):
        for column in ("Duration", "MaxConcurrent"):
            raw = row.get(column)
            value = parse_int(raw)
            if value is None or value < 1:
                out.add_error(column, f"{column} must be >= 1, got: {_shown(raw)}", index, column)

        raw_phases = row.get("PreferredPhases")
        if raw_phases is not None:
            try:
                parse_phase_spec(raw_phases)
            except MalformedListError:
                out.add_error(
                    "PreferredPhases",
                    f"Malformed list in PreferredPhases: {as_text(raw_phases)}",
                    index,
                    "PreferredPhases",
                )


_FIELD_CHECKS = {
    EntityKind.CLIENTS: check_client_fields,
    EntityKind.WORKERS: check_worker_fields,
    EntityKind.TASKS: check_task_fields,
}


def run_row_checks(kind: EntityKind, rows: Sequence[Row], out: DiagnosticCollector) -> None:
    check_required_columns(kind, rows, out)
    check_ids(kind, rows, out)
    _FIELD_CHECKS[kind](rows, out)


__all__ = [
    "check_required_columns",
    "check_ids",
    "check_client_fields",
    "check_worker_fields",
    "check_task_fields",
    "run_row_checks",
]
