# scripts/validate.py
from __future__ import annotations

import argparse
import logging
import sys
import time
import traceback
from pathlib import Path
from typing import Any

from allocheck.dataloader.config_loader import ConfigLoader
from allocheck.dataloader.dataset_loader import DatasetLoader
from allocheck.dataloader.rules_loader import RulesLoader
from allocheck.errors import AllocheckError
from allocheck.schemas.models import Config, Diagnostic
from allocheck.schemas.registry import EntityKind
from allocheck.validator import ValidationContext, Validator
from allocheck.validator.report import build_report, can_export, save_report, sort_by_severity


def _setup_logging() -> None:
    """Initializes console logging at INFO level with a compact format."""
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    @brief
    Parses command-line arguments for the validation run.

    @details
    Dataset and rules paths given on the command line override the ones in
    the configuration file. Any dataset left unset is treated as not loaded.
    """
    parser = argparse.ArgumentParser(
        prog="allocheck-validate",
        description="Validate client/worker/task CSVs and allocation rules; write a report",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="Path to config YAML (default: config/config.yaml)",
    )
    parser.add_argument("--clients", type=str, default=None, help="Path to clients CSV")
    parser.add_argument("--workers", type=str, default=None, help="Path to workers CSV")
    parser.add_argument("--tasks", type=str, default=None, help="Path to tasks CSV")
    parser.add_argument("--rules", type=str, default=None, help="Path to rules JSON/YAML")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for the report (default: output_dir from config)",
    )
    return parser.parse_args(argv)


def _resolve_inputs(cfg: Config, overrides: dict[str, str | None]) -> dict[str, Path | None]:
    configured = {
        "clients": cfg.clients_csv,
        "workers": cfg.workers_csv,
        "tasks": cfg.tasks_csv,
        "rules": cfg.rules_file,
    }
    resolved: dict[str, Path | None] = {}
    for key, value in configured.items():
        chosen = overrides.get(key) or value
        resolved[key] = Path(chosen) if chosen else None
    return resolved


def _log_diagnostics(scope: str, diagnostics: list[Diagnostic]) -> None:
    for d in sort_by_severity(diagnostics):
        where = "dataset" if d.row_index < 0 else f"row {d.row_index}"
        log = logging.error if d.severity == "error" else logging.warning
        log("%s [%s] %s: %s", scope, d.check, where, d.message)


def run_validation(
    config_path: Path,
    *,
    overrides: dict[str, str | None] | None = None,
    output_dir: Path | None = None,
) -> dict[str, Any]:
    """
    @brief
    Executes one complete validation run.

    @details
    (1) Load configuration, datasets and rules.
    (2) Build one immutable ValidationContext from everything loaded.
    (3) Validate every loaded kind, then the rules.
    (4) Build the report and optionally write it.

    @returns
        {"valid", "exportable", "summary", "report", "report_path"}

    @raises
        AllocheckError
            On configuration, dataset or rules file failures.
    """
    t0 = time.perf_counter()

    # (1) Load configuration and inputs
    logging.info("Loading config: %s", config_path)
    cfg = ConfigLoader().load(config_path)
    inputs = _resolve_inputs(cfg, overrides or {})

    loader = DatasetLoader()
    loaded: dict[EntityKind, list] = {}
    for kind in EntityKind:
        path = inputs[kind.value]
        if path is not None:
            loaded[kind] = loader.load(path, kind).rows

    rules = RulesLoader().load(inputs["rules"]) if inputs["rules"] is not None else []

    # (2) One snapshot for every check
    context = ValidationContext.build(
        clients=loaded.get(EntityKind.CLIENTS),
        workers=loaded.get(EntityKind.WORKERS),
        tasks=loaded.get(EntityKind.TASKS),
        rules=rules,
    )
    validator = Validator(context)

    # (3) Validate data kinds and rules
    data_diagnostics: dict[str, list[Diagnostic]] = {}
    for kind in loaded:
        data_diagnostics[kind.value] = validator.validate_data(kind)
        _log_diagnostics(kind.value, data_diagnostics[kind.value])
    rule_diagnostics = validator.validate_rules()
    _log_diagnostics("rules", rule_diagnostics)

    # (4) Report
    report = build_report(
        data_diagnostics,
        rule_diagnostics,
        fail_on_warnings=cfg.validation.fail_on_warnings,
    )
    report["weights"] = cfg.weights.model_dump(by_alias=True)

    report_path: Path | None = None
    if cfg.validation.write_report:
        out_dir = output_dir or Path(cfg.output_dir or "data/output")
        report_path = save_report(report, out_dir=out_dir, filename=cfg.validation.report_filename)

    logging.info(
        "Validation finished in %.2f s: valid=%s errors=%d warnings=%d",
        time.perf_counter() - t0,
        report["valid"],
        report["summary"]["errors"],
        report["summary"]["warnings"],
    )
    return {
        "valid": report["valid"],
        "exportable": can_export(report),
        "summary": report["summary"],
        "report": report,
        "report_path": report_path,
    }


def main(argv: list[str] | None = None) -> int:
    """
    @brief
    CLI entry point.

    @details
    Exit codes:
      0 – report valid
      1 – report invalid, or controlled failure (config/data/rules)
      2 – unexpected crash
    """
    _setup_logging()
    args = _parse_args(argv)

    overrides = {
        "clients": args.clients,
        "workers": args.workers,
        "tasks": args.tasks,
        "rules": args.rules,
    }
    output_dir = Path(args.output) if args.output else None

    try:
        result = run_validation(Path(args.config), overrides=overrides, output_dir=output_dir)
        if result["report_path"]:
            logging.info("Report written to %s", Path(result["report_path"]).as_posix())
        return 0 if result["valid"] else 1

    except AllocheckError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
