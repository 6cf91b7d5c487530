# src/allocheck/rules/lifecycle.py
"""
@brief
Creation, toggling and removal of rules.

@details
The rule list belongs to the caller. These helpers never modify the list or
the rules they receive; they return new ones.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from collections.abc import Sequence

from allocheck.schemas.models import Rule, RuleMeta, RulePayload

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_rule_id() -> str:
    """Return an id of the form rule_<epoch-ms>_<9 base-36 chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"rule_{int(time.time() * 1000)}_{suffix}"


def make_rule(
    name: str,
    payload: RulePayload,
    *,
    priority: int | None = None,
    enabled: bool = True,
    existing: Sequence[Rule] = (),
) -> Rule:
    """
    @brief
    Build a new rule with a fresh id and creation timestamp.

    @details
    Without an explicit priority the rule is ranked after the existing ones
    (len(existing) + 1), as the rule builder form does.
    """
    meta = RuleMeta(
        id=generate_rule_id(),
        name=name,
        priority=len(existing) + 1 if priority is None else priority,
        enabled=enabled,
    )
    rule = Rule(meta=meta, payload=payload)
    logger.debug("Created %s rule %s (%s)", rule.type, rule.id, name)
    return rule


def toggle_rule(rules: Sequence[Rule], rule_id: str) -> list[Rule]:
    out: list[Rule] = []
    for rule in rules:
        if rule.id == rule_id:
            meta = rule.meta.model_copy(update={"enabled": not rule.meta.enabled})
            rule = rule.model_copy(update={"meta": meta})
        out.append(rule)
    return out


def remove_rule(rules: Sequence[Rule], rule_id: str) -> list[Rule]:
    return [r for r in rules if r.id != rule_id]


def enabled_rules(rules: Sequence[Rule]) -> list[Rule]:
    return [r for r in rules if r.enabled]


__all__ = ["generate_rule_id", "make_rule", "toggle_rule", "remove_rule", "enabled_rules"]
