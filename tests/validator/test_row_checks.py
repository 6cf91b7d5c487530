# tests/validator/test_row_checks.py
from __future__ import annotations

import pytest

from allocheck.schemas.registry import REQUIRED_COLUMNS, EntityKind
from allocheck.validator import ValidationContext, validate_data


# -----------------------------
# HELPER FACTORIES
# -----------------------------
def mk_client(cid: str | None = "C1", **overrides) -> dict:
    row = {
        "ClientID": cid,
        "ClientName": "Acme",
        "PriorityLevel": "3",
        "RequestedTaskIDs": "",
        "GroupTag": "GroupA",
        "AttributesJSON": '{"location": "north"}',
    }
    row.update(overrides)
    return row


def mk_worker(wid: str | None = "W1", **overrides) -> dict:
    row = {
        "WorkerID": wid,
        "WorkerName": "Ann",
        "Skills": "python,sql",
        "AvailableSlots": "[1,2,3]",
        "MaxLoadPerPhase": "2",
        "WorkerGroup": "GA",
        "QualificationLevel": "3",
    }
    row.update(overrides)
    return row


def mk_task(tid: str | None = "T1", **overrides) -> dict:
    row = {
        "TaskID": tid,
        "TaskName": "Load",
        "Category": "ETL",
        "Duration": "1",
        "RequiredSkills": "python",
        "PreferredPhases": "1-2",
        "MaxConcurrent": "1",
    }
    row.update(overrides)
    return row


FACTORIES = {
    EntityKind.CLIENTS: mk_client,
    EntityKind.WORKERS: mk_worker,
    EntityKind.TASKS: mk_task,
}

EMPTY = ValidationContext()


def checks(diagnostics) -> list[str]:
    return [d.check for d in diagnostics]


# -----------------------------
# Required columns
# -----------------------------
@pytest.mark.parametrize("kind", list(EntityKind))
def test_missing_columns_reported_once(kind: EntityKind) -> None:
    """
    @brief
    Missing required columns yield exactly one dataset-level error.

    @details
    The first row lacks two expected columns; the error lists exactly those,
    regardless of how many rows follow.
    """
    # --- Arrange ---
    factory = FACTORIES[kind]
    dropped = REQUIRED_COLUMNS[kind][1:3]
    first = {k: v for k, v in factory("X1").items() if k not in dropped}
    rows = [first] + [factory(f"X{i}") for i in range(2, 6)]

    # --- Act ---
    diags = validate_data(EMPTY, kind, rows)

    # --- Assert ---
    structural = [d for d in diags if d.check == "RequiredColumns"]
    assert len(structural) == 1
    assert structural[0].severity == "error"
    assert structural[0].row_index == -1
    assert structural[0].message == f"Missing required columns: {', '.join(dropped)}"


def test_empty_row_set_has_no_diagnostics() -> None:
    for kind in EntityKind:
        assert validate_data(EMPTY, kind, []) == []


def test_missing_columns_do_not_stop_other_checks() -> None:
    rows = [{"ClientID": "C1"}, {"ClientID": "C1"}]

    diags = validate_data(EMPTY, "clients", rows)

    assert checks(diags)[0] == "RequiredColumns"
    assert "DuplicateId" in checks(diags)
    assert "PriorityLevel" in checks(diags)


# -----------------------------
# Identity
# -----------------------------
@pytest.mark.parametrize("kind", list(EntityKind))
def test_unique_ids_produce_no_identity_diagnostics(kind: EntityKind) -> None:
    rows = [FACTORIES[kind](str(i)) for i in range(1, 8)]

    diags = validate_data(EMPTY, kind, rows)

    assert not [d for d in diags if d.check in {"MissingId", "DuplicateId"}]


def test_duplicate_and_missing_ids() -> None:
    # --- Arrange ---
    rows = [mk_task("T1"), mk_task(None), mk_task("T1"), mk_task("T2")]

    # --- Act ---
    diags = validate_data(EMPTY, "tasks", rows)

    # --- Assert ---
    missing = [d for d in diags if d.check == "MissingId"]
    dupes = [d for d in diags if d.check == "DuplicateId"]
    assert [(d.row_index, d.field_name) for d in missing] == [(1, "TaskID")]
    assert len(dupes) == 1
    assert dupes[0].row_index == 2
    assert "rows 0 and 2" in dupes[0].message


def test_numeric_and_text_ids_collide() -> None:
    rows = [mk_worker(3), mk_worker("3")]

    diags = validate_data(EMPTY, "workers", rows)

    assert checks(diags).count("DuplicateId") == 1


# -----------------------------
# Client fields
# -----------------------------
def test_priority_out_of_range_single_error() -> None:
    diags = validate_data(EMPTY, "clients", [mk_client(PriorityLevel=6)])

    assert len(diags) == 1
    assert diags[0].severity == "error"
    assert diags[0].field_name == "PriorityLevel"
    assert "6" in diags[0].message
    assert "1-5" in diags[0].message


@pytest.mark.parametrize("value", ["0", "abc", None, "2.5"])
def test_priority_invalid_values(value) -> None:
    diags = validate_data(EMPTY, "clients", [mk_client(PriorityLevel=value)])

    assert checks(diags) == ["PriorityLevel"]


@pytest.mark.parametrize(
    "value, broken",
    [
        ('{"a": 1}', False),
        ("[1, 2]", False),
        ("", False),
        ("{a:", True),
        ("NaN", True),
        ('{"a": Infinity}', True),
        ("-Infinity", True),
    ],
)
def test_attributes_json(value, broken) -> None:
    diags = validate_data(EMPTY, "clients", [mk_client(AttributesJSON=value)])

    assert ("AttributesJSON" in checks(diags)) is broken


# -----------------------------
# Worker fields
# -----------------------------
def test_missing_slots_short_circuits_row() -> None:
    # MaxLoadPerPhase is also invalid but must not be reported for this row
    diags = validate_data(EMPTY, "workers", [mk_worker(AvailableSlots="", MaxLoadPerPhase="0")])

    assert checks(diags) == ["AvailableSlots"]
    assert diags[0].message == "AvailableSlots is required"


def test_malformed_slots_error_without_overload_warning() -> None:
    diags = validate_data(EMPTY, "workers", [mk_worker(AvailableSlots="[1,x]", MaxLoadPerPhase="5")])

    assert checks(diags) == ["AvailableSlots"]
    assert "Malformed" in diags[0].message


def test_overloaded_worker_warning() -> None:
    diags = validate_data(EMPTY, "workers", [mk_worker(AvailableSlots="[1]", MaxLoadPerPhase="3")])

    assert len(diags) == 1
    assert diags[0].severity == "warning"
    assert diags[0].check == "WorkerOverload"
    assert "1 available slots < 3" in diags[0].message


@pytest.mark.parametrize("value", ["0", "abc", None])
def test_max_load_invalid(value) -> None:
    diags = validate_data(EMPTY, "workers", [mk_worker(MaxLoadPerPhase=value)])

    assert checks(diags) == ["MaxLoadPerPhase"]


def test_row_can_carry_mixed_severities() -> None:
    rows = [mk_worker("W1"), mk_worker("W1", AvailableSlots="1", MaxLoadPerPhase="2")]

    diags = [d for d in validate_data(EMPTY, "workers", rows) if d.row_index == 1]

    assert {d.severity for d in diags} == {"error", "warning"}


# -----------------------------
# Task fields
# -----------------------------
def test_task_numeric_fields() -> None:
    diags = validate_data(EMPTY, "tasks", [mk_task(Duration="0", MaxConcurrent="x")])

    assert checks(diags) == ["Duration", "MaxConcurrent"]
    assert "got: 0" in diags[0].message


@pytest.mark.parametrize(
    "phases, malformed",
    [("1-3", False), ("[2,4]", False), ("3-1", True), ("[1-3]", True), ("1,a", True), (None, False)],
)
def test_preferred_phases_grammar(phases, malformed) -> None:
    diags = validate_data(EMPTY, "tasks", [mk_task(PreferredPhases=phases)])

    assert ("PreferredPhases" in checks(diags)) is malformed


def test_phases_not_checked_against_duration() -> None:
    diags = validate_data(EMPTY, "tasks", [mk_task(Duration="5", PreferredPhases="1")])

    assert diags == []


# -----------------------------
# Pathological cells stay diagnostics
# -----------------------------
def test_deeply_nested_attributes_json_is_broken_not_fatal() -> None:
    """
    @brief
    JSON nested beyond the decoder's recursion limit is reported, not raised.
    """
    # --- Arrange ---
    rows = [mk_client("C1", AttributesJSON="[" * 200000), mk_client("C2")]

    # --- Act ---
    diags = validate_data(EMPTY, "clients", rows)

    # --- Assert ---
    assert [(d.check, d.row_index) for d in diags] == [("AttributesJSON", 0)]
    assert diags[0].message == "Broken JSON in AttributesJSON"


def test_huge_phase_range_is_malformed() -> None:
    """
    @brief
    A range far beyond the last phase is rejected without expanding it.

    @details
    The same row set is validated against loaded workers so that the
    saturation pass also sees the cell; it must skip it like any other
    malformed phase value.
    """
    # --- Arrange ---
    ctx = ValidationContext.build(workers=[mk_worker("W1")])
    rows = [mk_task("T1", PreferredPhases="1-999999999")]

    # --- Act ---
    diags = validate_data(ctx, "tasks", rows)

    # --- Assert ---
    assert checks(diags) == ["PreferredPhases"]
    assert diags[0].row_index == 0
