# tests/schemas/test_rule_models.py
from datetime import datetime

import pytest
from pydantic import ValidationError

from allocheck.schemas.models import (
    CoRunRule,
    Config,
    Diagnostic,
    PatternMatchRule,
    PhaseWindowRule,
    PrecedenceRule,
    Rule,
    RuleMeta,
    SlotRestrictionRule,
)


def test_corun_requires_two_distinct_tasks():
    assert CoRunRule(tasks=["T1", " T2 ", "T1"]).tasks == ["T1", "T2"]

    with pytest.raises(ValidationError):
        CoRunRule(tasks=["T1", "T1"])


def test_phase_window_positive_and_sorted():
    assert PhaseWindowRule(task_id="T1", allowed_phases=[3, 1, 3]).allowed_phases == [1, 3]

    with pytest.raises(ValidationError):
        PhaseWindowRule(task_id="T1", allowed_phases=[])
    with pytest.raises(ValidationError):
        PhaseWindowRule(task_id="T1", allowed_phases=[0, 1])


def test_slot_restriction_bounds():
    with pytest.raises(ValidationError):
        SlotRestrictionRule(group_type="client", group_name="VIP", min_common_slots=0)
    with pytest.raises(ValidationError):
        SlotRestrictionRule(group_type="team", group_name="VIP", min_common_slots=1)


def test_pattern_regex_must_compile():
    assert PatternMatchRule(regex=r"^T\d+$").regex == r"^T\d+$"
    with pytest.raises(ValidationError):
        PatternMatchRule(regex="(unclosed")


def test_precedence_target_required_iff_specific():
    assert PrecedenceRule(scope="specific", specific_target="C1").specific_target == "C1"
    with pytest.raises(ValidationError):
        PrecedenceRule(scope="specific")
    with pytest.raises(ValidationError):
        PrecedenceRule(scope="global", specific_target="C1")


def test_rule_discriminates_payload_from_camel_case():
    """
    @brief
    Rule payloads are selected by their "type" tag.

    @details
    Input uses the front-end camelCase shape; the resulting model exposes
    snake_case attributes and serializes back to camelCase.
    """
    # --- Act ---
    rule = Rule.model_validate(
        {
            "meta": {"id": "r1", "name": "window", "createdAt": "2025-01-01T00:00:00+00:00"},
            "payload": {"type": "phaseWindow", "taskId": "T1", "allowedPhases": [1, 2]},
        }
    )

    # --- Assert ---
    assert isinstance(rule.payload, PhaseWindowRule)
    assert rule.type == "phaseWindow"
    assert rule.enabled is True
    assert isinstance(rule.meta.created_at, datetime)
    dumped = rule.model_dump(by_alias=True)
    assert dumped["payload"]["allowedPhases"] == [1, 2]
    assert "createdAt" in dumped["meta"]


def test_unknown_rule_type_rejected():
    with pytest.raises(ValidationError):
        Rule(meta=RuleMeta(id="r1"), payload={"type": "teleport"})


def test_diagnostic_is_frozen():
    d = Diagnostic(severity="error", message="x")
    assert d.row_index == -1
    assert d.is_error
    with pytest.raises(ValidationError):
        d.message = "y"


def test_config_defaults():
    cfg = Config()
    assert cfg.output_dir == "data/output"
    assert cfg.validation.write_report is True
    assert cfg.weights.priority_level == pytest.approx(0.3)
    with pytest.raises(ValidationError):
        Config(unknown_key=1)
