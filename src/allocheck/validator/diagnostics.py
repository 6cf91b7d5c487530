# src/allocheck/validator/diagnostics.py
from __future__ import annotations

from allocheck.schemas.models import Diagnostic


class DiagnosticCollector:
    """
    @brief
    Accumulator shared by the checks of one validation call.

    @details
    Checks append findings in the order they run, which yields the
    "check order, then row order" sequence callers rely on.
    """

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def add_error(
        self,
        check: str,
        message: str,
        row_index: int = -1,
        field_name: str | None = None,
    ) -> None:
        """
        @brief
        Append an error-severity diagnostic.

        @params
            check : str
                Identifier of the producing check (e.g. "DuplicateId").
            message : str
                Human-readable description including the offending value.
            row_index : int
                0-based row position, or -1 for dataset-level findings.
            field_name : str | None
                Column the finding is attached to, if any.
        """
        self.diagnostics.append(
            Diagnostic(
                severity="error",
                message=message,
                row_index=row_index,
                field_name=field_name,
                check=check,
            )
        )

    def add_warning(
        self,
        check: str,
        message: str,
        row_index: int = -1,
        field_name: str | None = None,
    ) -> None:
        """Append a warning-severity diagnostic (same arguments as add_error)."""
        self.diagnostics.append(
            Diagnostic(
                severity="warning",
                message=message,
                row_index=row_index,
                field_name=field_name,
                check=check,
            )
        )

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == "warning")


__all__ = ["DiagnosticCollector"]
