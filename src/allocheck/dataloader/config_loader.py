# src/allocheck/dataloader/config_loader.py
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from allocheck.errors import ConfigError
from allocheck.prioritization.weights import get_profile
from allocheck.schemas.models import Config

_SOURCE = "ConfigLoader"


class ConfigLoader:
    """
    @brief
    Builds the validation run configuration from a YAML file.

    @details
    The file names the client/worker/task CSVs and the rules file (each
    optional), where the report goes, how strict validation is, and the
    prioritization weights. A `weights_profile` preset replaces `weights`.
    Every problem surfaces as a ConfigError; nothing is half-loaded.
    """

    def load(self, path: Path) -> Config:
        """
        @brief
        Read, validate and resolve the configuration at `path`.

        @returns
            Config with the selected weights profile already applied.

        @raises
            ConfigError
                Unreadable or malformed file, unknown or mistyped keys,
                or an unknown weights profile id.
        """
        # (1) File -> mapping
        data = self._read_yaml(path)

        # (2) Mapping -> Config
        cfg = self._validate(data)

        # (3) Preset weights win over inline ones
        if cfg.weights_profile:
            cfg = cfg.model_copy(update={"weights": get_profile(cfg.weights_profile).weights})
        return cfg

    @staticmethod
    def _check_path(path: Path) -> None:
        if not isinstance(path, Path):
            raise ConfigError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source=f"{_SOURCE}._check_path",
                suggested_action="Wrap the config location in pathlib.Path.",
            )
        if not path.exists():
            raise ConfigError(
                message=f"Configuration file not found: {path}",
                source=f"{_SOURCE}._check_path",
                suggested_action="Pass --config pointing to an existing YAML file.",
            )
        if path.suffix.lower() not in {".yaml", ".yml"}:
            raise ConfigError(
                message=f"Invalid configuration file extension: {path.suffix}",
                source=f"{_SOURCE}._check_path",
                suggested_action="Save the configuration as .yaml or .yml.",
            )

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        """
        @brief
        Parse the YAML document and require a non-empty top-level mapping.

        @raises
            ConfigError
                Non-Path argument, I/O or syntax error, empty document, or a
                root that is not a mapping.
        """
        self._check_path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                message=f"YAML parsing failed: {e}",
                source=f"{_SOURCE}._read_yaml",
                suggested_action="Fix YAML syntax/indentation.",
            ) from e
        except OSError as e:
            raise ConfigError(
                message=f"Unable to read configuration file: {e}",
                source=f"{_SOURCE}._read_yaml",
                suggested_action="Check that the file is readable by the current user.",
            ) from e

        if data is None:
            raise ConfigError(
                message="Configuration file is empty.",
                source=f"{_SOURCE}._read_yaml",
                suggested_action="Start from config/config.yaml in the repository.",
            )
        if not isinstance(data, Mapping):
            raise ConfigError(
                message="Configuration root must be a mapping of settings.",
                source=f"{_SOURCE}._read_yaml",
                suggested_action="Use top-level keys such as clients_csv, validation, weights.",
            )
        return dict(data)

    @staticmethod
    def _validate(data: dict[str, Any]) -> Config:
        try:
            return Config(**data)
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid configuration structure: {e}",
                source=f"{_SOURCE}._validate",
                suggested_action=(
                    "Compare keys against the Config schema (scripts/gen_schemas.py); "
                    "unknown keys and negative weights are rejected."
                ),
            ) from e


__all__ = ["ConfigLoader"]
