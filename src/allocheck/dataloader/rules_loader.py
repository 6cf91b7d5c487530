# src/allocheck/dataloader/rules_loader.py
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from allocheck.errors import RuleError
from allocheck.rules.lifecycle import generate_rule_id
from allocheck.schemas.models import Rule

logger = logging.getLogger(__name__)

_META_KEYS = {
    "id": "id",
    "name": "name",
    "priority": "priority",
    "enabled": "enabled",
    "createdAt": "createdAt",
    "created_at": "createdAt",
}


class RulesLoader:
    """
    @brief
    Reads a rule list from a YAML or JSON file.

    @details
    The file root is either a list of rules or a mapping with a "rules" list
    (the shape of an exported rules bundle). Each rule may be nested
    ({"meta": {...}, "payload": {...}}) or flat, as produced by the rule
    builder ({"id", "name", "type", "priority", "enabled", "createdAt", ...}).
    Missing ids are generated; missing timestamps default to load time.
    """

    def load(self, path: Path) -> list[Rule]:
        raw_items = self._read(path)
        rules = [self._to_rule(i, item) for i, item in enumerate(raw_items)]
        logger.info("RulesLoader OK: %d rule(s) from %s", len(rules), path)
        return rules

    def _read(self, path: Path) -> list[Any]:
        if not isinstance(path, Path) or not path.exists():
            raise RuleError(
                message=f"Rules file not found: {path}",
                source="RulesLoader._read",
                suggested_action="Check the rules_file path in config.yaml.",
            )

        suffix = path.suffix.lower()
        if suffix not in {".yaml", ".yml", ".json"}:
            raise RuleError(
                message=f"Invalid rules file extension: {suffix}",
                source="RulesLoader._read",
                suggested_action="Use .json, .yaml or .yml for rules files.",
            )

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f) if suffix == ".json" else yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RuleError(
                message=f"Rules file parsing failed: {e}",
                source="RulesLoader._read",
                suggested_action="Fix the file syntax.",
            ) from e
        except OSError as e:
            raise RuleError(
                message=f"Unable to read rules file: {e}",
                source="RulesLoader._read",
            ) from e

        if data is None:
            return []
        if isinstance(data, Mapping):
            data = data.get("rules", [])
        if not isinstance(data, list):
            raise RuleError(
                message="Rules file root must be a list or a mapping with a 'rules' list.",
                source="RulesLoader._read",
            )
        return data

    def _to_rule(self, index: int, item: Any) -> Rule:
        if not isinstance(item, Mapping):
            raise RuleError(
                message=f"Rule #{index} is not a mapping",
                source="RulesLoader._to_rule",
            )

        if "meta" in item and "payload" in item:
            if not isinstance(item["meta"], Mapping) or not isinstance(item["payload"], Mapping):
                raise RuleError(
                    message=f"Rule #{index}: 'meta' and 'payload' must both be mappings",
                    source="RulesLoader._to_rule",
                    suggested_action="Use {meta: {...}, payload: {...}} or the flat rule shape.",
                )
            data: dict[str, Any] = {"meta": dict(item["meta"]), "payload": item["payload"]}
        else:
            data = self._split_flat(item)
        data["meta"].setdefault("id", generate_rule_id())

        try:
            return Rule.model_validate(data)
        except ValidationError as e:
            raise RuleError(
                message=f"Invalid rule #{index} ({item.get('type', 'unknown type')}): {e}",
                source="RulesLoader._to_rule",
                suggested_action="Check the rule's type and required fields.",
            ) from e

    @staticmethod
    def _split_flat(item: Mapping[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {}
        payload: dict[str, Any] = {}
        for key, value in item.items():
            if key in _META_KEYS:
                meta[_META_KEYS[key]] = value
            else:
                payload[key] = value
        return {"meta": meta, "payload": payload}


__all__ = ["RulesLoader"]
