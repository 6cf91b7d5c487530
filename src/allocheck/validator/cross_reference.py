# src/allocheck/validator/cross_reference.py
"""
@brief
Referential integrity and capacity feasibility across entity kinds.

@details
Each check needs a companion dataset; when that dataset is empty the check is
skipped without a diagnostic. The rows under validation are always passed
explicitly, companions come from the ValidationContext.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from allocheck.errors import MalformedListError
from allocheck.parsing.fields import parse_int, parse_numeric_list, parse_phase_spec, split_tokens
from allocheck.schemas.rows import Row, as_text
from allocheck.validator.diagnostics import DiagnosticCollector

logger = logging.getLogger(__name__)


def _skill_set(row: Row, column: str) -> set[str]:
    return {s.lower() for s in split_tokens(row.get(column))}


def check_task_references(
    clients: Sequence[Row], tasks: Sequence[Row], out: DiagnosticCollector
) -> None:
    """Flag RequestedTaskIDs tokens that match no known TaskID (one error per client row)."""
    if not tasks:
        logger.debug("Task reference check skipped: no task data loaded")
        return

    known = {as_text(t.get("TaskID")) for t in tasks if t.get("TaskID") is not None}
    for index, row in enumerate(clients):
        unknown = [t for t in split_tokens(row.get("RequestedTaskIDs")) if t not in known]
        if unknown:
            out.add_error(
                "TaskReference",
                f"Unknown task references: {', '.join(unknown)}",
                index,
                "RequestedTaskIDs",
            )


def check_skill_coverage(
    tasks: Sequence[Row], workers: Sequence[Row], out: DiagnosticCollector
) -> None:
    """Flag required skills that no worker has (case-insensitive)."""
    if not workers:
        logger.debug("Skill coverage check skipped: no worker data loaded")
        return

    # (1) Union of all worker skills, built once
    available: set[str] = set()
    for w in workers:
        available |= _skill_set(w, "Skills")

    # (2) Report unmatched skills per task
    for index, row in enumerate(tasks):
        unmatched = [s for s in split_tokens(row.get("RequiredSkills")) if s.lower() not in available]
        if unmatched:
            out.add_error(
                "SkillCoverage",
                f"No workers have required skills: {', '.join(unmatched)}",
                index,
                "RequiredSkills",
            )


def check_concurrency_feasibility(
    tasks: Sequence[Row], workers: Sequence[Row], out: DiagnosticCollector
) -> None:
    """
    @brief
    Warn when MaxConcurrent exceeds the number of fully qualified workers.

    @details
    A worker qualifies for a task when its skill set is a superset of the
    task's required skills. Tasks without MaxConcurrent or RequiredSkills,
    or with an unparseable MaxConcurrent, are not evaluated here.
    """
    if not workers:
        return

    worker_skills = [_skill_set(w, "Skills") for w in workers]
    for index, row in enumerate(tasks):
        if row.get("MaxConcurrent") is None or row.get("RequiredSkills") is None:
            continue
        max_concurrent = parse_int(row.get("MaxConcurrent"))
        if max_concurrent is None:
            continue

        required = _skill_set(row, "RequiredSkills")
        qualified = sum(1 for skills in worker_skills if required <= skills)
        if qualified < max_concurrent:
            out.add_warning(
                "ConcurrencyFeasibility",
                f"MaxConcurrent ({max_concurrent}) exceeds qualified workers ({qualified})",
                index,
                "MaxConcurrent",
            )


def phase_capacity(workers: Sequence[Row]) -> dict[int, int]:
    """Number of workers available in each phase; malformed slot lists are skipped."""
    capacity: dict[int, int] = defaultdict(int)
    for w in workers:
        try:
            slots = parse_numeric_list(w.get("AvailableSlots"))
        except MalformedListError:
            continue
        for phase in set(slots):
            if phase > 0:
                capacity[phase] += 1
    return dict(capacity)


def phase_demand(tasks: Sequence[Row]) -> dict[int, int]:
    """
    @brief
    Total task duration requested in each phase.

    @details
    A task adds its Duration once to every phase of its PreferredPhases.
    An unparseable or non-positive Duration counts as 1; tasks with malformed
    or absent PreferredPhases are skipped.
    """
    demand: dict[int, int] = defaultdict(int)
    for t in tasks:
        try:
            phases = parse_phase_spec(t.get("PreferredPhases"))
        except MalformedListError:
            continue
        duration = parse_int(t.get("Duration"))
        if duration is None or duration < 1:
            duration = 1
        for phase in set(phases):
            if phase > 0:
                demand[phase] += duration
    return dict(demand)


def check_phase_saturation(
    workers: Sequence[Row], tasks: Sequence[Row], out: DiagnosticCollector
) -> None:
    """Dataset-level error for every phase whose demand exceeds worker capacity."""
    if not workers or not tasks:
        logger.debug("Phase saturation check skipped: workers and tasks both required")
        return

    capacity = phase_capacity(workers)
    demand = phase_demand(tasks)
    for phase in sorted(demand):
        available = capacity.get(phase, 0)
        if demand[phase] > available:
            out.add_error(
                "PhaseSaturation",
                f"Phase {phase} saturation: {demand[phase]} task duration > "
                f"{available} worker slots",
            )


__all__ = [
    "check_task_references",
    "check_skill_coverage",
    "check_concurrency_feasibility",
    "check_phase_saturation",
    "phase_capacity",
    "phase_demand",
]
