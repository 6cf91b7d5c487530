# src/allocheck/dataloader/types.py
from __future__ import annotations

from dataclasses import dataclass, field

from allocheck.schemas.registry import EntityKind
from allocheck.schemas.rows import Row


@dataclass(slots=True)
class LoadResult:
    """
    Structured result of a dataset loading step.

    Fields:
        kind: Entity kind the rows belong to.
        rows: Parsed rows, cells trimmed and blanks turned into None.
              Row content is not validated here; that is the validator's job.
        total_rows: Number of data rows observed in the CSV (excludes header).
        columns: Header columns in file order.
    """

    kind: EntityKind
    rows: list[Row] = field(default_factory=list)
    total_rows: int = 0
    columns: tuple[str, ...] = ()
