# src/allocheck/validator/context.py
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

import pandas as pd

from allocheck.schemas.models import Rule
from allocheck.schemas.registry import EntityKind, as_kind
from allocheck.schemas.rows import Row, normalize_rows

RowsInput = Iterable[Mapping[str, Any]] | pd.DataFrame | None


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """
    @brief
    Immutable snapshot of everything a validation call may look at.

    @details
    Holds the normalized rows of each entity kind and the rule list. Rows are
    stored as tuples and copied on the way in, so callers mutating their own
    lists after building a context do not affect it. with_data / with_rules
    return new contexts.
    """

    clients: tuple[Row, ...] = field(default_factory=tuple)
    workers: tuple[Row, ...] = field(default_factory=tuple)
    tasks: tuple[Row, ...] = field(default_factory=tuple)
    rules: tuple[Rule, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        clients: RowsInput = None,
        workers: RowsInput = None,
        tasks: RowsInput = None,
        rules: Iterable[Rule] | None = None,
    ) -> ValidationContext:
        return cls(
            clients=tuple(normalize_rows(clients)),
            workers=tuple(normalize_rows(workers)),
            tasks=tuple(normalize_rows(tasks)),
            rules=tuple(rules or ()),
        )

    def rows(self, kind: EntityKind | str) -> Sequence[Row]:
        return getattr(self, as_kind(kind).value)

    def with_data(self, kind: EntityKind | str, rows: RowsInput) -> ValidationContext:
        return replace(self, **{as_kind(kind).value: tuple(normalize_rows(rows))})

    def with_rules(self, rules: Iterable[Rule] | None) -> ValidationContext:
        return replace(self, rules=tuple(rules or ()))


__all__ = ["ValidationContext", "RowsInput"]
