# src/allocheck/schemas/registry.py
"""
@brief
Static definition of the three entity kinds and their expected columns.

@details
Column names follow the CSV headers produced by the upload step. Order is
irrelevant for validation; it only fixes the order in which missing columns
are listed in diagnostics.
"""

from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    CLIENTS = "clients"
    WORKERS = "workers"
    TASKS = "tasks"


REQUIRED_COLUMNS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.CLIENTS: (
        "ClientID",
        "ClientName",
        "PriorityLevel",
        "RequestedTaskIDs",
        "GroupTag",
        "AttributesJSON",
    ),
    EntityKind.WORKERS: (
        "WorkerID",
        "WorkerName",
        "Skills",
        "AvailableSlots",
        "MaxLoadPerPhase",
        "WorkerGroup",
        "QualificationLevel",
    ),
    EntityKind.TASKS: (
        "TaskID",
        "TaskName",
        "Category",
        "Duration",
        "RequiredSkills",
        "PreferredPhases",
        "MaxConcurrent",
    ),
}

ID_FIELDS: dict[EntityKind, str] = {
    EntityKind.CLIENTS: "ClientID",
    EntityKind.WORKERS: "WorkerID",
    EntityKind.TASKS: "TaskID",
}

PRIORITY_MIN = 1
PRIORITY_MAX = 5

# Upper bound for the end of a "start-end" phase range
MAX_PHASE = 1000


def as_kind(kind: EntityKind | str) -> EntityKind:
    """Coerce a plain string ('clients', 'workers', 'tasks') into EntityKind."""
    if isinstance(kind, EntityKind):
        return kind
    try:
        return EntityKind(str(kind).strip().lower())
    except ValueError as e:
        allowed = ", ".join(k.value for k in EntityKind)
        raise ValueError(f"Unknown entity kind: {kind!r} (expected one of: {allowed})") from e


__all__ = [
    "EntityKind",
    "REQUIRED_COLUMNS",
    "ID_FIELDS",
    "PRIORITY_MIN",
    "PRIORITY_MAX",
    "MAX_PHASE",
    "as_kind",
]
