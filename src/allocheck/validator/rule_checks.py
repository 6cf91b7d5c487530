# src/allocheck/validator/rule_checks.py
"""
@brief
Consistency checks over the enabled subset of user rules.

@details
    - co-run cycle detection over the undirected "must run together" relation
    - co-run vs phase-window conflicts (empty common phase set)
    - duplicate rule ids
    - rule references to unknown tasks

Co-run groups are expanded into pairwise edges. In that undirected graph,
any group of three or more tasks forms a triangle and is reported as a
cycle; a two-task rule or a chain of pairwise rules is not.

Edges are a set, so two co-run rules that share the same pair of tasks add a
single edge and do not form a cycle. This departs from the browser
validator, whose recursion flags any two overlapping co-run rules sharing two
or more tasks as circular. Treat overlapping rules as redundant, not
conflicting, when comparing results with it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from allocheck.errors import MalformedListError
from allocheck.parsing.fields import parse_phase_spec
from allocheck.schemas.models import CoRunRule, PhaseWindowRule, Rule
from allocheck.schemas.rows import Row, as_text
from allocheck.validator.diagnostics import DiagnosticCollector

logger = logging.getLogger(__name__)


def build_corun_graph(rules: Sequence[Rule]) -> dict[str, list[str]]:
    """
    @brief
    Adjacency lists for the co-run relation.

    @details
    Nodes and neighbours keep first-appearance order so that traversal, and
    therefore the reported task, is deterministic across runs.
    """
    graph: dict[str, list[str]] = {}
    for rule in rules:
        if not isinstance(rule.payload, CoRunRule):
            continue
        tasks = rule.payload.tasks
        for task in tasks:
            graph.setdefault(task, [])
        for i, a in enumerate(tasks):
            for b in tasks[i + 1 :]:
                if b not in graph[a]:
                    graph[a].append(b)
                if a not in graph[b]:
                    graph[b].append(a)
    return graph


def find_corun_cycle(graph: dict[str, list[str]]) -> str | None:
    """
    @brief
    Depth-first search for the first cycle in the co-run graph.

    @details
    Iterative DFS with an explicit recursion stack. The edge back to the
    immediate parent is not a cycle. Returns the task at which a node already
    on the recursion stack is revisited, or None.
    """
    visited: set[str] = set()

    for root in graph:
        if root in visited:
            continue

        on_stack: set[str] = {root}
        visited.add(root)
        # frames: (node, parent, neighbour iterator)
        stack: list[tuple[str, str | None, Iterator[str]]] = [(root, None, iter(graph[root]))]

        while stack:
            node, parent, neighbours = stack[-1]
            advanced = False
            for nxt in neighbours:
                if nxt == parent:
                    continue
                if nxt in on_stack:
                    return nxt
                if nxt not in visited:
                    visited.add(nxt)
                    on_stack.add(nxt)
                    stack.append((nxt, node, iter(graph[nxt])))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                on_stack.discard(node)

    return None


def check_corun_cycles(rules: Sequence[Rule], out: DiagnosticCollector) -> None:
    """Report at most one circular co-run dependency."""
    task = find_corun_cycle(build_corun_graph(rules))
    if task is not None:
        out.add_error(
            "CoRunCycle",
            f"Circular co-run groups detected involving task {task}: "
            "this creates impossible scheduling constraints",
        )


def _format_phases(phases: Sequence[int]) -> str:
    return "[" + ",".join(str(p) for p in phases) + "]"


def _effective_phases(
    task_id: str,
    windows: dict[str, list[int]],
    tasks_by_id: dict[str, Row],
) -> list[int] | None:
    # (1) Explicit phase window wins
    if task_id in windows:
        return windows[task_id]

    # (2) Fall back to the task's own PreferredPhases
    row = tasks_by_id.get(task_id)
    if row is None:
        return None
    try:
        phases = parse_phase_spec(row.get("PreferredPhases"))
    except MalformedListError:
        return None
    return sorted(set(phases)) or None


def check_phase_window_conflicts(
    rules: Sequence[Rule], tasks: Sequence[Row], out: DiagnosticCollector
) -> None:
    """
    @brief
    Detect co-run groups whose tasks share no allowed phase.

    @details
    A task's allowed phases come from the first enabled phase-window rule for
    it, else from its PreferredPhases. Tasks without a determinable, non-empty
    phase set are left out; at least two tasks with phase sets are needed.
    """
    windows: dict[str, list[int]] = {}
    for rule in rules:
        if isinstance(rule.payload, PhaseWindowRule):
            windows.setdefault(rule.payload.task_id, list(rule.payload.allowed_phases))

    tasks_by_id: dict[str, Row] = {}
    for row in tasks:
        if row.get("TaskID") is not None:
            tasks_by_id.setdefault(as_text(row.get("TaskID")), row)

    for rule in rules:
        if not isinstance(rule.payload, CoRunRule):
            continue

        determined: list[tuple[str, list[int]]] = []
        for task_id in rule.payload.tasks:
            phases = _effective_phases(task_id, windows, tasks_by_id)
            if phases is not None:
                determined.append((task_id, phases))

        if len(determined) < 2:
            continue

        common = set(determined[0][1])
        for _, phases in determined[1:]:
            common &= set(phases)

        if not common:
            details = ", ".join(f"{t} {_format_phases(p)}" for t, p in determined)
            out.add_error(
                "PhaseWindowConflict",
                f"Co-run rule '{rule.meta.name or rule.id}' has no common phase "
                f"for its tasks: {details}",
            )


def check_duplicate_rule_ids(rules: Sequence[Rule], out: DiagnosticCollector) -> None:
    seen: set[str] = set()
    for rule in rules:
        if rule.id in seen:
            out.add_error("DuplicateRuleId", f"Duplicate rule id: {rule.id}")
        seen.add(rule.id)


def check_rule_task_references(
    rules: Sequence[Rule], tasks: Sequence[Row], out: DiagnosticCollector
) -> None:
    """Warn about co-run / phase-window rules naming TaskIDs absent from task data."""
    if not tasks:
        return
    known = {as_text(t.get("TaskID")) for t in tasks if t.get("TaskID") is not None}

    for rule in rules:
        if isinstance(rule.payload, CoRunRule):
            referenced = list(rule.payload.tasks)
        elif isinstance(rule.payload, PhaseWindowRule):
            referenced = [rule.payload.task_id]
        else:
            continue
        unknown = [t for t in referenced if t not in known]
        if unknown:
            out.add_warning(
                "RuleTaskReference",
                f"Rule '{rule.meta.name or rule.id}' references unknown tasks: "
                f"{', '.join(unknown)}",
            )


def run_rule_checks(rules: Sequence[Rule], tasks: Sequence[Row], out: DiagnosticCollector) -> None:
    """Run all rule checks over the enabled rules, in report order."""
    enabled = [r for r in rules if r.enabled]
    logger.debug("Rule checks: %d of %d rules enabled", len(enabled), len(rules))

    check_corun_cycles(enabled, out)
    check_phase_window_conflicts(enabled, tasks, out)
    check_duplicate_rule_ids(rules, out)
    check_rule_task_references(enabled, tasks, out)


__all__ = [
    "build_corun_graph",
    "find_corun_cycle",
    "check_corun_cycles",
    "check_phase_window_conflicts",
    "check_duplicate_rule_ids",
    "check_rule_task_references",
    "run_rule_checks",
]
