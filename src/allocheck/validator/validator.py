# src/allocheck/validator/validator.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from allocheck.schemas.models import Diagnostic, Rule
from allocheck.schemas.registry import EntityKind, as_kind
from allocheck.schemas.rows import Row, normalize_rows
from allocheck.validator.context import RowsInput, ValidationContext
from allocheck.validator.cross_reference import (
    check_concurrency_feasibility,
    check_phase_saturation,
    check_skill_coverage,
    check_task_references,
)
from allocheck.validator.diagnostics import DiagnosticCollector
from allocheck.validator.row_checks import run_row_checks
from allocheck.validator.rule_checks import run_rule_checks

logger = logging.getLogger(__name__)


# ----------------------------
# VALIDATOR CLASS (instance core)
# ----------------------------
class Validator:
    """
    @brief
    Dataset and rule-set validator bound to one immutable context.

    @details
    validate_data runs row-level checks on the given rows, then the
    cross-reference checks against the other kinds held by the context.
    validate_rules runs the rule-consistency checks against the context's
    task rows. Neither method raises for bad content: every finding becomes
    a Diagnostic, and each call returns a fresh, complete list.
    """

    def __init__(self, context: ValidationContext) -> None:
        self.context = context

    # ---------- Public API ----------
    def validate_data(
        self, kind: EntityKind | str, rows: RowsInput = None
    ) -> list[Diagnostic]:
        """
        @brief
        Validate one entity kind.

        @params
            kind : EntityKind | str
                "clients", "workers" or "tasks".
            rows : RowsInput
                Rows to validate. When None, the context's rows for the kind
                are used. These rows are authoritative for the row-level and
                same-kind checks.

        @returns
            Diagnostics in check order, then row order.
        """
        kind = as_kind(kind)
        data = self.context.rows(kind) if rows is None else normalize_rows(rows)
        out = DiagnosticCollector()

        # (1) Structural, identity and field-format checks
        run_row_checks(kind, data, out)

        # (2) Cross-kind checks against the context snapshot
        self._check_cross_references(kind, data, out)

        logger.info(
            "Validated %s: rows=%d errors=%d warnings=%d",
            kind.value,
            len(data),
            out.error_count,
            out.warning_count,
        )
        return out.diagnostics

    def validate_rules(self, rules: Iterable[Rule] | None = None) -> list[Diagnostic]:
        """Validate a rule list (default: the context's rules) against context task rows."""
        rule_list = list(self.context.rules if rules is None else rules)
        out = DiagnosticCollector()
        run_rule_checks(rule_list, self.context.tasks, out)

        logger.info(
            "Validated rules: rules=%d errors=%d warnings=%d",
            len(rule_list),
            out.error_count,
            out.warning_count,
        )
        return out.diagnostics

    # ---------- Internals ----------
    def _check_cross_references(
        self, kind: EntityKind, data: Sequence[Row], out: DiagnosticCollector
    ) -> None:
        ctx = self.context
        if kind is EntityKind.CLIENTS:
            check_task_references(data, ctx.tasks, out)
        elif kind is EntityKind.TASKS:
            check_skill_coverage(data, ctx.workers, out)
            check_concurrency_feasibility(data, ctx.workers, out)
            check_phase_saturation(ctx.workers, data, out)
        else:
            check_phase_saturation(data, ctx.tasks, out)


# ----------------------------
# THIN FACADES
# ----------------------------
def validate_data(
    context: ValidationContext, kind: EntityKind | str, rows: RowsInput = None
) -> list[Diagnostic]:
    return Validator(context).validate_data(kind, rows)


def validate_rules(
    context: ValidationContext, rules: Iterable[Rule] | None = None
) -> list[Diagnostic]:
    return Validator(context).validate_rules(rules)


class ValidationSession:
    """
    @brief
    Setter-style front end over immutable contexts.

    @details
    Mirrors the interactive workflow: the caller pushes the latest rows for a
    kind or the latest rule list, then re-validates. Each setter swaps in a
    new ValidationContext; validation never auto-runs on a setter call.
    Results reflect the state at call time, so callers must re-validate after
    any setter whose effect they need. Not thread-safe: a concurrent host
    must serialize setter and validate calls.
    """

    def __init__(self, context: ValidationContext | None = None) -> None:
        self.context = context or ValidationContext()

    def set_data(self, kind: EntityKind | str, rows: RowsInput) -> None:
        self.context = self.context.with_data(kind, rows)

    def set_rules(self, rules: Iterable[Rule] | None) -> None:
        self.context = self.context.with_rules(rules)

    def validate_data(self, kind: EntityKind | str, rows: RowsInput = None) -> list[Diagnostic]:
        return validate_data(self.context, kind, rows)

    def validate_rules(self, rules: Iterable[Rule] | None = None) -> list[Diagnostic]:
        return validate_rules(self.context, rules)


__all__ = ["Validator", "ValidationSession", "validate_data", "validate_rules"]
