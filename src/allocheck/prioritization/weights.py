# src/allocheck/prioritization/weights.py
"""
@brief
Prioritization weight profiles and normalization helpers.

@details
The six named criteria are relative weights that always sum to 1 after any
edit. custom_weights are user-defined extras and are never normalized.
"""

from __future__ import annotations

from collections.abc import Sequence

from allocheck.errors import ConfigError
from allocheck.schemas.models import PrioritizationWeights, WeightProfile

CRITERIA: tuple[str, ...] = (
    "priority_level",
    "requested_tasks_fulfillment",
    "fairness_constraints",
    "worker_utilization",
    "skill_matching",
    "phase_balance",
)

DEFAULT_WEIGHTS = PrioritizationWeights()

PRESET_PROFILES: tuple[WeightProfile, ...] = (
    WeightProfile(
        id="maximize-fulfillment",
        name="Maximize Fulfillment",
        description="Prioritizes completing as many requested tasks as possible",
        weights=PrioritizationWeights(
            priority_level=0.2,
            requested_tasks_fulfillment=0.5,
            fairness_constraints=0.1,
            worker_utilization=0.1,
            skill_matching=0.05,
            phase_balance=0.05,
        ),
    ),
    WeightProfile(
        id="fair-distribution",
        name="Fair Distribution",
        description="Ensures balanced workload across all workers",
        weights=PrioritizationWeights(
            priority_level=0.1,
            requested_tasks_fulfillment=0.15,
            fairness_constraints=0.4,
            worker_utilization=0.25,
            skill_matching=0.05,
            phase_balance=0.05,
        ),
    ),
    WeightProfile(
        id="minimize-workload",
        name="Minimize Workload",
        description="Reduces overall worker load while meeting essential requirements",
        weights=PrioritizationWeights(
            priority_level=0.2,
            requested_tasks_fulfillment=0.1,
            fairness_constraints=0.2,
            worker_utilization=0.4,
            skill_matching=0.05,
            phase_balance=0.05,
        ),
    ),
)


def get_profile(profile_id: str) -> WeightProfile:
    for profile in PRESET_PROFILES:
        if profile.id == profile_id:
            return profile
    known = ", ".join(p.id for p in PRESET_PROFILES)
    raise ConfigError(
        f"Unknown weights profile: {profile_id}",
        source="weights.get_profile",
        suggested_action=f"Use one of: {known}",
    )


def normalize_weights(weights: PrioritizationWeights) -> PrioritizationWeights:
    """Scale the named criteria to sum to 1; all-zero weights are returned unchanged."""
    total = sum(getattr(weights, c) for c in CRITERIA)
    if total <= 0:
        return weights
    return weights.model_copy(update={c: getattr(weights, c) / total for c in CRITERIA})


def set_weight(weights: PrioritizationWeights, criterion: str, value: float) -> PrioritizationWeights:
    """Set one criterion (slider edit) and renormalize."""
    if criterion not in CRITERIA:
        raise ValueError(f"Unknown criterion: {criterion}")
    if value < 0:
        raise ValueError("Weights must be non-negative")
    return normalize_weights(weights.model_copy(update={criterion: float(value)}))


def weights_from_ranking(
    ranking: Sequence[str], base: PrioritizationWeights | None = None
) -> PrioritizationWeights:
    """
    @brief
    Derive weights from a best-first ranking of all six criteria.

    @details
    The criterion at position i receives (n - i) / (n(n+1)/2) with n = 6, so
    the result sums to 1. custom_weights are taken from `base` (default
    weights if omitted).

    @raises
        ValueError if the ranking is not a permutation of CRITERIA.
    """
    unknown = [c for c in ranking if c not in CRITERIA]
    if unknown:
        raise ValueError(f"Unknown criteria in ranking: {', '.join(unknown)}")
    if len(set(ranking)) != len(ranking):
        raise ValueError("Ranking must not repeat criteria")
    missing = [c for c in CRITERIA if c not in ranking]
    if missing:
        raise ValueError(f"Ranking is missing criteria: {', '.join(missing)}")

    n = len(ranking)
    denominator = n * (n + 1) / 2
    updates = {c: (n - i) / denominator for i, c in enumerate(ranking)}
    return (base or DEFAULT_WEIGHTS).model_copy(update=updates)


__all__ = [
    "CRITERIA",
    "DEFAULT_WEIGHTS",
    "PRESET_PROFILES",
    "get_profile",
    "normalize_weights",
    "set_weight",
    "weights_from_ranking",
]
