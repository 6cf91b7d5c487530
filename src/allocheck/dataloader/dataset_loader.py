# src/allocheck/dataloader/dataset_loader.py
from __future__ import annotations

import csv
import logging
from pathlib import Path

from allocheck.dataloader.types import LoadResult
from allocheck.errors import DataError
from allocheck.schemas.registry import EntityKind, as_kind
from allocheck.schemas.rows import Row, normalize_row

logger = logging.getLogger(__name__)


class DatasetLoader:
    """
    CSV -> LoadResult for one entity kind.

    Rules:
      - Format: UTF-8 CSV (BOM tolerated), delimiter=','
      - Header row required; header names are trimmed
      - Cells are trimmed, blank cells become absent (None)
      - Surplus cells beyond the header are dropped
      - No row-level validation: missing columns, bad IDs and malformed
        values are reported by the validator as diagnostics

    Fatal errors (raise DataError immediately):
      - file missing / unreadable
      - no header row
    """

    def load(self, path: Path, kind: EntityKind | str) -> LoadResult:
        kind = as_kind(kind)
        columns, rows = self._read_csv(path)
        result = LoadResult(kind=kind, rows=rows, total_rows=len(rows), columns=columns)
        logger.info("DatasetLoader OK: %s rows=%d from %s", kind.value, result.total_rows, path)
        return result

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _read_csv(self, path: Path) -> tuple[tuple[str, ...], list[Row]]:
        if not isinstance(path, Path):
            raise DataError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="DatasetLoader._read_csv",
                suggested_action="Pass a pathlib.Path pointing to the CSV file",
            )
        if not path.exists():
            raise DataError(
                message=f"Input CSV not found: {path}",
                source="DatasetLoader._read_csv",
                suggested_action="Verify file path and ensure the CSV is present.",
            )

        try:
            with path.open("r", encoding="utf-8-sig", newline="") as f:
                reader = csv.DictReader(f, delimiter=",")
                if not reader.fieldnames:
                    raise DataError(
                        message=f"CSV has no header row: {path}",
                        source="DatasetLoader._read_csv",
                        suggested_action="Ensure the first line contains column names.",
                    )
                header = tuple((name or "").strip() for name in reader.fieldnames)
                rows = [
                    normalize_row({k: v for k, v in r.items() if k is not None}) for r in reader
                ]
                return header, rows
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise DataError(
                message=f"Unable to read CSV: {e}",
                source="DatasetLoader._read_csv",
                suggested_action="Check file permissions, encoding (UTF-8) and quoting.",
            ) from e


__all__ = ["DatasetLoader"]
