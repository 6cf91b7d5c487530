# tests/rules/test_lifecycle.py
from __future__ import annotations

import re

from allocheck.rules.lifecycle import (
    enabled_rules,
    generate_rule_id,
    make_rule,
    remove_rule,
    toggle_rule,
)
from allocheck.schemas.models import CoRunRule, LoadLimitRule


def test_generated_ids_have_expected_shape_and_differ() -> None:
    ids = {generate_rule_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(re.fullmatch(r"rule_\d+_[a-z0-9]{9}", i) for i in ids)


def test_make_rule_defaults_priority_after_existing() -> None:
    # --- Arrange ---
    first = make_rule("Pair", CoRunRule(tasks=["T1", "T2"]))

    # --- Act ---
    second = make_rule(
        "Limit", LoadLimitRule(worker_group="GA", max_slots_per_phase=1), existing=[first]
    )

    # --- Assert ---
    assert first.meta.priority == 1
    assert second.meta.priority == 2
    assert second.type == "loadLimit"
    assert second.enabled is True
    assert second.meta.created_at.tzinfo is not None


def test_make_rule_explicit_priority_and_disabled() -> None:
    rule = make_rule("Pair", CoRunRule(tasks=["T1", "T2"]), priority=7, enabled=False)

    assert rule.meta.priority == 7
    assert rule.enabled is False


def test_toggle_returns_new_list_and_keeps_original() -> None:
    # --- Arrange ---
    a = make_rule("A", CoRunRule(tasks=["T1", "T2"]))
    b = make_rule("B", CoRunRule(tasks=["T3", "T4"]))
    rules = [a, b]

    # --- Act ---
    toggled = toggle_rule(rules, a.id)

    # --- Assert ---
    assert toggled is not rules
    assert [r.enabled for r in toggled] == [False, True]
    assert a.enabled is True
    assert toggled[0].meta.created_at == a.meta.created_at
    assert [r.id for r in enabled_rules(toggled)] == [b.id]
    assert toggle_rule(toggled, a.id)[0].enabled is True


def test_remove_rule_and_unknown_id() -> None:
    a = make_rule("A", CoRunRule(tasks=["T1", "T2"]))
    rules = [a]

    assert remove_rule(rules, a.id) == []
    assert remove_rule(rules, "missing") == rules
    assert toggle_rule(rules, "missing") == rules
    assert rules == [a]
