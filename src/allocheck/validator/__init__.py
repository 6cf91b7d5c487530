from allocheck.validator.context import ValidationContext
from allocheck.validator.report import build_report, save_report, sort_by_severity, summarize
from allocheck.validator.validator import (
    ValidationSession,
    Validator,
    validate_data,
    validate_rules,
)

__all__ = [
    "ValidationContext",
    "ValidationSession",
    "Validator",
    "validate_data",
    "validate_rules",
    "build_report",
    "save_report",
    "sort_by_severity",
    "summarize",
]
