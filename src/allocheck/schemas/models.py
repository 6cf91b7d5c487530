# src/allocheck/schemas/models.py
"""
@brief
Pydantic data models for the Allocheck validation engine.

@details
Defines the canonical model types:
    - Diagnostic: one validation finding (error or warning) with row/field locator
    - Rule: user-defined allocation rule, a RuleMeta plus a tagged payload
    - PrioritizationWeights / WeightProfile: relative criteria weights
    - Config: runtime configuration (from config.yaml)

Rule payloads serialize with camelCase aliases so that rule bundles keep the
same shape as the browser front-end; snake_case names are accepted too.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _StrictBaseModel(BaseModel):
    """
    @brief
    Base model enforcing strict defaults for data contracts.

    @details
    Forbids unknown fields and allows population by field name.
    """

    model_config = {
        "extra": "forbid",  # Reject unknown fields
        "populate_by_name": True,  # Allow population by field name
        "use_enum_values": True,  # Export raw enum values
    }


class _CamelModel(_StrictBaseModel):
    """Strict model serialized with camelCase aliases (front-end shape)."""

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "use_enum_values": True,
        "alias_generator": to_camel,
    }


# ------------------------------------------------------------
# Diagnostics
# ------------------------------------------------------------
Severity = Literal["error", "warning"]


class Diagnostic(_StrictBaseModel):
    """
    @brief
    A single validation finding.

    @details
    row_index is the 0-based position of the offending row in the validated
    row set, or -1 for dataset-level findings. check names the producing
    validation pass (e.g. "DuplicateId", "PhaseSaturation").
    """

    model_config = {"extra": "forbid", "frozen": True}

    severity: Severity
    message: str
    row_index: int = Field(-1, ge=-1)
    field_name: str | None = None
    check: str = "unspecified"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


# ------------------------------------------------------------
# Rules
# ------------------------------------------------------------
def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RuleMeta(_CamelModel):
    """Fields shared by every rule variant."""

    id: str = Field(..., min_length=1, description="Unique rule identifier")
    name: str = Field("", description="Human-readable rule name")
    priority: int = Field(1, description="Ordering hint; not required to be unique")
    enabled: bool = Field(True, description="Disabled rules are ignored by validation")
    created_at: datetime = Field(default_factory=_utc_now)


class CoRunRule(_CamelModel):
    """Tasks that must be scheduled together."""

    type: Literal["coRun"] = "coRun"
    tasks: list[str] = Field(..., description="TaskIDs, at least two distinct")

    @field_validator("tasks")
    @classmethod
    def _distinct_tasks(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for t in v:
            t = str(t).strip()
            if t and t not in seen:
                seen.append(t)
        if len(seen) < 2:
            raise ValueError("coRun rule needs at least two distinct tasks")
        return seen


class SlotRestrictionRule(_CamelModel):
    type: Literal["slotRestriction"] = "slotRestriction"
    group_type: Literal["client", "worker"]
    group_name: str = Field(..., min_length=1)
    min_common_slots: int = Field(..., ge=1)


class LoadLimitRule(_CamelModel):
    type: Literal["loadLimit"] = "loadLimit"
    worker_group: str = Field(..., min_length=1)
    max_slots_per_phase: int = Field(..., ge=1)


class PhaseWindowRule(_CamelModel):
    """Restricts one task to an explicit set of phases."""

    type: Literal["phaseWindow"] = "phaseWindow"
    task_id: str = Field(..., min_length=1)
    allowed_phases: list[int] = Field(..., min_length=1)

    @field_validator("allowed_phases")
    @classmethod
    def _positive_phases(cls, v: list[int]) -> list[int]:
        if any(p < 1 for p in v):
            raise ValueError("allowed phases must be positive integers")
        return sorted(set(v))


class PatternMatchRule(_CamelModel):
    type: Literal["patternMatch"] = "patternMatch"
    regex: str = Field(..., min_length=1)
    template: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("regex")
    @classmethod
    def _compilable(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression: {e}") from e
        return v


class PrecedenceRule(_CamelModel):
    type: Literal["precedence"] = "precedence"
    scope: Literal["global", "specific"] = "global"
    specific_target: str | None = None
    override_priority: int = 1

    @model_validator(mode="after")
    def _target_matches_scope(self) -> PrecedenceRule:
        if self.scope == "specific" and not (self.specific_target or "").strip():
            raise ValueError("specificTarget is required when scope is 'specific'")
        if self.scope == "global" and self.specific_target:
            raise ValueError("specificTarget is only allowed when scope is 'specific'")
        return self


RulePayload = Annotated[
    CoRunRule
    | SlotRestrictionRule
    | LoadLimitRule
    | PhaseWindowRule
    | PatternMatchRule
    | PrecedenceRule,
    Field(discriminator="type"),
]

RULE_TYPES = (
    "coRun",
    "slotRestriction",
    "loadLimit",
    "phaseWindow",
    "patternMatch",
    "precedence",
)


class Rule(_CamelModel):
    """
    @brief
    One user-defined rule: shared metadata plus a variant payload.

    @details
    Rules are immutable from the engine's point of view; lifecycle helpers in
    allocheck.rules.lifecycle return modified copies.
    """

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "alias_generator": to_camel,
        "frozen": True,
    }

    meta: RuleMeta
    payload: RulePayload

    @property
    def id(self) -> str:
        return self.meta.id

    @property
    def enabled(self) -> bool:
        return self.meta.enabled

    @property
    def type(self) -> str:
        return self.payload.type


# ------------------------------------------------------------
# Prioritization weights
# ------------------------------------------------------------
class PrioritizationWeights(_CamelModel):
    """
    @brief
    Relative importance of allocation criteria.

    @details
    The six named criteria are kept normalized (sum = 1) by the helpers in
    allocheck.prioritization.weights. custom_weights is carried unchanged.
    """

    priority_level: float = Field(0.3, ge=0.0)
    requested_tasks_fulfillment: float = Field(0.25, ge=0.0)
    fairness_constraints: float = Field(0.15, ge=0.0)
    worker_utilization: float = Field(0.15, ge=0.0)
    skill_matching: float = Field(0.1, ge=0.0)
    phase_balance: float = Field(0.05, ge=0.0)
    custom_weights: dict[str, float] = Field(default_factory=dict)


class WeightProfile(_CamelModel):
    id: str
    name: str
    description: str = ""
    weights: PrioritizationWeights


# ------------------------------------------------------------
# Runtime configuration
# ------------------------------------------------------------
class ValidationConfig(BaseModel):
    """
    @brief
    Controls behavior of validation subsystem.

    @details
    Determines whether to write a report and whether warnings
    should be treated as failures.
    """

    write_report: bool = True
    fail_on_warnings: bool = False
    report_filename: str = "validation_report.json"


class Config(_StrictBaseModel):
    """
    @brief
    Represents the full runtime configuration loaded from config.yaml.

    @details
    Input paths are optional: any dataset that is not configured is treated as
    not loaded, and cross-reference checks depending on it are skipped.
    """

    clients_csv: str | None = None
    workers_csv: str | None = None
    tasks_csv: str | None = None
    rules_file: str | None = None
    output_dir: str | None = "data/output"

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    weights: PrioritizationWeights = Field(default_factory=PrioritizationWeights)
    weights_profile: str | None = Field(
        None, description="Preset profile id; overrides `weights` when set"
    )


__all__ = [
    "Diagnostic",
    "Severity",
    "RuleMeta",
    "CoRunRule",
    "SlotRestrictionRule",
    "LoadLimitRule",
    "PhaseWindowRule",
    "PatternMatchRule",
    "PrecedenceRule",
    "RulePayload",
    "RULE_TYPES",
    "Rule",
    "PrioritizationWeights",
    "WeightProfile",
    "ValidationConfig",
    "Config",
]
