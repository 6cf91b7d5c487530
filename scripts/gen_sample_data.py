# scripts/gen_sample_data.py
"""
Synthetic allocation dataset generator (single run -> clients/workers/tasks CSV + rules.json).

Design:
- Parameters are hard-coded as constants below (no CLI args).
- Tasks are generated first; clients request existing TaskIDs and co-run
  rules pair existing tasks, so a defect-free dataset has no reference errors.
- Worker MaxLoadPerPhase never exceeds the number of available slots.
- DEFECT_RATE is the per-row probability of injecting one known defect
  (out-of-range priority, malformed slot list, inverted phase range, ...),
  which is handy for exercising the validator end to end.
- Columns follow allocheck.schemas.registry.REQUIRED_COLUMNS.

Edit the constants in the "CONFIG" section to produce different datasets.
"""

from __future__ import annotations

import csv
import json
import random
import sys
from collections.abc import Iterable
from pathlib import Path

from allocheck.rules.lifecycle import generate_rule_id
from allocheck.schemas.registry import REQUIRED_COLUMNS, EntityKind

# =========================
# CONFIG - EDIT THESE
# =========================
CLIENTS: int = 20
WORKERS: int = 12
TASKS: int = 15
PHASES: int = 6  # phases are numbered 1..PHASES
CORUN_RULES: int = 2
DEFECT_RATE: float = 0.0  # 0.0 .. 1.0
OUTPUT_DIR: str = "data/input"

SKILLS: tuple[str, ...] = ("python", "sql", "java", "excel", "design", "ml")
CATEGORIES: tuple[str, ...] = ("ETL", "Analytics", "Reporting", "Research")
GROUPS: tuple[str, ...] = ("GroupA", "GroupB", "GroupC")

# Deterministic generation
RANDOM_SEED: int = 42
# =========================

Row = dict[str, str]


def _list_text(values: Iterable[int]) -> str:
    return "[" + ",".join(str(v) for v in values) + "]"


def _gen_tasks(rng: random.Random) -> list[Row]:
    rows: list[Row] = []
    for i in range(1, TASKS + 1):
        # Half of the tasks use the range notation, half the list notation
        if rng.random() < 0.5:
            start = rng.randint(1, PHASES)
            phases = f"{start}-{rng.randint(start, PHASES)}"
        else:
            phases = _list_text(sorted(rng.sample(range(1, PHASES + 1), rng.randint(1, 3))))
        rows.append(
            {
                "TaskID": f"T{i:03d}",
                "TaskName": f"Task {i}",
                "Category": rng.choice(CATEGORIES),
                "Duration": str(rng.randint(1, 3)),
                "RequiredSkills": ",".join(rng.sample(SKILLS, rng.randint(1, 2))),
                "PreferredPhases": phases,
                "MaxConcurrent": str(rng.randint(1, 3)),
            }
        )
    return rows


def _gen_workers(rng: random.Random) -> list[Row]:
    rows: list[Row] = []
    for i in range(1, WORKERS + 1):
        slots = sorted(rng.sample(range(1, PHASES + 1), rng.randint(2, PHASES)))
        rows.append(
            {
                "WorkerID": f"W{i:03d}",
                "WorkerName": f"Worker {i}",
                "Skills": ",".join(rng.sample(SKILLS, rng.randint(2, 4))),
                "AvailableSlots": _list_text(slots),
                "MaxLoadPerPhase": str(rng.randint(1, len(slots))),
                "WorkerGroup": rng.choice(GROUPS),
                "QualificationLevel": str(rng.randint(1, 5)),
            }
        )
    return rows


def _gen_clients(rng: random.Random, task_ids: list[str]) -> list[Row]:
    rows: list[Row] = []
    for i in range(1, CLIENTS + 1):
        requested = rng.sample(task_ids, min(len(task_ids), rng.randint(1, 4)))
        rows.append(
            {
                "ClientID": f"C{i:03d}",
                "ClientName": f"Client {i}",
                "PriorityLevel": str(rng.randint(1, 5)),
                "RequestedTaskIDs": ",".join(requested),
                "GroupTag": rng.choice(GROUPS),
                "AttributesJSON": json.dumps({"budget": rng.randint(1, 100) * 1000}),
            }
        )
    return rows


# Every defect below yields at least one validation error
_DEFECTS: dict[EntityKind, tuple[tuple[str, str], ...]] = {
    EntityKind.CLIENTS: (
        ("PriorityLevel", "7"),
        ("AttributesJSON", "{broken"),
        ("RequestedTaskIDs", "T999"),
    ),
    EntityKind.WORKERS: (
        ("AvailableSlots", "[1,x]"),
        ("MaxLoadPerPhase", "0"),
    ),
    EntityKind.TASKS: (
        ("Duration", "0"),
        ("PreferredPhases", "4-2"),
        ("MaxConcurrent", "none"),
    ),
}


def _inject_defects(rng: random.Random, kind: EntityKind, rows: list[Row]) -> int:
    injected = 0
    for row in rows:
        if rng.random() < DEFECT_RATE:
            column, value = rng.choice(_DEFECTS[kind])
            row[column] = value
            injected += 1
    return injected


def _gen_rules(rng: random.Random, task_ids: list[str]) -> list[dict]:
    rules: list[dict] = []
    for n in range(CORUN_RULES):
        rules.append(
            {
                "id": generate_rule_id(),
                "name": f"Co-run {n + 1}",
                "type": "coRun",
                "tasks": rng.sample(task_ids, 2),
                "priority": n + 1,
                "enabled": True,
            }
        )
    return rules


def _write_csv(path: Path, kind: EntityKind, rows: Iterable[Row]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(REQUIRED_COLUMNS[kind]))
        writer.writeheader()
        writer.writerows(rows)


def _validate_config_or_die() -> None:
    problems: list[str] = []
    if min(CLIENTS, WORKERS, TASKS) < 1:
        problems.append("CLIENTS, WORKERS and TASKS must be >= 1")
    if PHASES < 2:
        problems.append("PHASES must be >= 2")
    if CORUN_RULES > 0 and TASKS < 2:
        problems.append("co-run rules need at least two tasks")
    if not 0.0 <= DEFECT_RATE <= 1.0:
        problems.append("DEFECT_RATE must be within [0, 1]")
    if problems:
        msg = "Invalid generator configuration:\n- " + "\n- ".join(problems)
        print(msg, file=sys.stderr)
        sys.exit(2)


def main(out_dir: Path | None = None) -> int:
    _validate_config_or_die()
    rng = random.Random(RANDOM_SEED)
    output = Path(out_dir) if out_dir is not None else Path(OUTPUT_DIR)

    tasks = _gen_tasks(rng)
    task_ids = [t["TaskID"] for t in tasks]
    datasets = {
        EntityKind.CLIENTS: _gen_clients(rng, task_ids),
        EntityKind.WORKERS: _gen_workers(rng),
        EntityKind.TASKS: tasks,
    }
    rules = _gen_rules(rng, task_ids)

    defects = 0
    for kind, rows in datasets.items():
        defects += _inject_defects(rng, kind, rows)
        _write_csv(output / f"{kind.value}.csv", kind, rows)

    with (output / "rules.json").open("w", encoding="utf-8") as f:
        json.dump({"rules": rules}, f, indent=2)
        f.write("\n")

    print(
        f"[GEN] clients={CLIENTS}, workers={WORKERS}, tasks={TASKS}, "
        f"phases={PHASES}, rules={len(rules)}, defects={defects}"
    )
    print(f"[GEN] wrote: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
