# scripts/gen_schemas.py
"""
Write JSON Schemas for the files allocheck reads and writes.

    rule        one entry of a rules file, camelCase keys, {meta, payload}
    config      config/config.yaml
    diagnostic  one entry of validation_report.json

Run from the repository root; files land in schemas/ unless a directory is given.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel

from allocheck.schemas.models import Config, Diagnostic, Rule

SCHEMAS: tuple[tuple[type[BaseModel], str], ...] = (
    (Rule, "rule"),
    (Config, "config"),
    (Diagnostic, "diagnostic"),
)


def export_schema(model_cls: type[BaseModel], name: str, out_dir: Path) -> Path:
    """Dump `model_cls` as `<name>.schema.json` using alias field names."""
    out_dir.mkdir(parents=True, exist_ok=True)
    target = (out_dir / f"{name}.schema.json").resolve()
    text = json.dumps(model_cls.model_json_schema(by_alias=True), indent=2, ensure_ascii=False)
    target.write_text(text + "\n", encoding="utf-8")

    rel = target.relative_to(Path.cwd()) if target.is_relative_to(Path.cwd()) else target
    print(f"Generated {rel}")
    return target


def main(out_dir: Path | None = None) -> list[Path]:
    out_dir = out_dir or Path("schemas").resolve()
    return [export_schema(model, name, out_dir) for model, name in SCHEMAS]


if __name__ == "__main__":
    main()
