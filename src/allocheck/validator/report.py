# src/allocheck/validator/report.py
"""
@brief
Diagnostic aggregation and validation report persistence.

@details
Merges per-kind and rule diagnostics into one serializable report, computes
the overall validity flag used to gate export, and writes the report
atomically to disk.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from allocheck.errors import ValidationError
from allocheck.schemas.models import Diagnostic

logger = logging.getLogger(__name__)

_SEVERITY_ORDER = {"error": 0, "warning": 1}


def merge_diagnostics(*groups: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Concatenate diagnostic lists, preserving check and row order."""
    merged: list[Diagnostic] = []
    for group in groups:
        merged.extend(group)
    return merged


def sort_by_severity(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Stable sort placing errors before warnings."""
    return sorted(diagnostics, key=lambda d: _SEVERITY_ORDER[d.severity])


def summarize(diagnostics: Iterable[Diagnostic]) -> dict[str, Any]:
    """
    @brief
    Count diagnostics by severity and by producing check.

    @returns
        {"errors": int, "warnings": int, "by_check": {check: count}}
    """
    diagnostics = list(diagnostics)
    by_check = Counter(d.check for d in diagnostics)
    return {
        "errors": sum(1 for d in diagnostics if d.severity == "error"),
        "warnings": sum(1 for d in diagnostics if d.severity == "warning"),
        "by_check": dict(sorted(by_check.items())),
    }


def build_report(
    data_diagnostics: Mapping[str, Sequence[Diagnostic]],
    rule_diagnostics: Sequence[Diagnostic] = (),
    *,
    fail_on_warnings: bool = False,
) -> dict[str, Any]:
    """
    @brief
    Assemble validation results into a structured dictionary.

    @details
    data_diagnostics is keyed by entity kind ("clients", "workers", "tasks").
    The report is valid when it holds no errors, and additionally no warnings
    when fail_on_warnings is set. No files are written at this stage.
    """
    # (1) Aggregate counts across all sources
    everything = merge_diagnostics(*data_diagnostics.values(), rule_diagnostics)
    summary = summarize(everything)

    # (2) Compute global validity flag
    is_valid = summary["errors"] == 0 and not (fail_on_warnings and summary["warnings"] > 0)

    # (3) Construct report dictionary
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "valid": bool(is_valid),
        "summary": summary,
        "data": {
            str(getattr(kind, "value", kind)): [d.model_dump() for d in diags]
            for kind, diags in data_diagnostics.items()
        },
        "rules": [d.model_dump() for d in rule_diagnostics],
    }


def can_export(report: Mapping[str, Any]) -> bool:
    """Gate for exporting cleaned data: rule errors always block, data errors block via `valid`."""
    rule_errors = [d for d in report.get("rules", []) if d.get("severity") == "error"]
    return bool(report.get("valid")) and not rule_errors


def save_report(
    report: dict[str, Any],
    out_dir: Path | None = None,
    filename: str = "validation_report.json",
) -> Path:
    """
    Writes the report atomically to disk.

    Args:
        report: Validation report dictionary.
        out_dir: Target directory (defaults to 'data/output').
        filename: Target filename (default 'validation_report.json').

    Returns:
        Path to the written JSON file.
    """
    target_dir = Path(out_dir) if out_dir is not None else Path("data/output")
    final_path = target_dir / filename

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(report, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        raise ValidationError(
            f"Failed to prepare validation report: {e}",
            source="report.save_report",
            suggested_action="Check the output directory and that the report is JSON-serializable.",
        ) from e

    # (1) Write to a temp file next to the target, then swap it in
    fd, tmp_path = tempfile.mkstemp(prefix=final_path.name + ".", dir=str(target_dir))
    try:
        with open(fd, "w", encoding="utf-8", newline="") as f:
            f.write(payload)
        os.replace(tmp_path, final_path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ValidationError(
            f"Failed to write validation report: {e}",
            source="report.save_report",
            suggested_action="Check disk permissions and free space.",
        ) from e

    logger.info("Validation report saved: %s", final_path)
    return final_path


__all__ = [
    "merge_diagnostics",
    "sort_by_severity",
    "summarize",
    "build_report",
    "can_export",
    "save_report",
]
