# tests/prioritization/test_weights.py
from __future__ import annotations

import pytest

from allocheck.errors import ConfigError
from allocheck.prioritization.weights import (
    CRITERIA,
    DEFAULT_WEIGHTS,
    PRESET_PROFILES,
    get_profile,
    normalize_weights,
    set_weight,
    weights_from_ranking,
)
from allocheck.schemas.models import PrioritizationWeights


def total(weights: PrioritizationWeights) -> float:
    return sum(getattr(weights, c) for c in CRITERIA)


def test_defaults_and_presets_sum_to_one() -> None:
    assert total(DEFAULT_WEIGHTS) == pytest.approx(1.0)
    for profile in PRESET_PROFILES:
        assert total(profile.weights) == pytest.approx(1.0), profile.id


def test_get_profile() -> None:
    assert get_profile("minimize-workload").weights.worker_utilization == 0.4

    with pytest.raises(ConfigError, match="Unknown weights profile"):
        get_profile("nope")


def test_set_weight_renormalizes() -> None:
    """
    @brief
    A slider edit keeps the named criteria summing to 1.

    @details
    Raising one criterion shrinks the others proportionally; custom weights
    are carried unchanged.
    """
    # --- Arrange ---
    base = DEFAULT_WEIGHTS.model_copy(update={"custom_weights": {"region": 0.7}})

    # --- Act ---
    updated = set_weight(base, "phase_balance", 1.0)

    # --- Assert ---
    assert total(updated) == pytest.approx(1.0)
    assert updated.phase_balance == pytest.approx(1.0 / 1.95)
    assert updated.priority_level == pytest.approx(0.3 / 1.95)
    assert updated.custom_weights == {"region": 0.7}
    assert DEFAULT_WEIGHTS.phase_balance == 0.05


@pytest.mark.parametrize("criterion, value", [("unknown", 0.1), ("skill_matching", -0.1)])
def test_set_weight_rejects_bad_input(criterion, value) -> None:
    with pytest.raises(ValueError):
        set_weight(DEFAULT_WEIGHTS, criterion, value)


def test_normalize_all_zero_is_unchanged() -> None:
    zero = PrioritizationWeights(**{c: 0.0 for c in CRITERIA})

    assert normalize_weights(zero) == zero


def test_weights_from_full_ranking() -> None:
    ranking = list(reversed(CRITERIA))

    weights = weights_from_ranking(ranking)

    # n = 6 -> denominator 21
    assert weights.phase_balance == pytest.approx(6 / 21)
    assert weights.priority_level == pytest.approx(1 / 21)
    assert total(weights) == pytest.approx(1.0)


def test_ranking_keeps_sum_and_custom_weights() -> None:
    base = DEFAULT_WEIGHTS.model_copy(update={"custom_weights": {"region": 2.0}})

    weights = weights_from_ranking(list(CRITERIA), base)

    assert total(weights) == pytest.approx(1.0)
    assert weights.priority_level == pytest.approx(6 / 21)
    assert weights.custom_weights == {"region": 2.0}


@pytest.mark.parametrize(
    "ranking",
    [
        ["bogus"],
        ["phase_balance", "phase_balance"],
        ["priority_level"],
        ["skill_matching", "fairness_constraints"],
    ],
)
def test_ranking_rejects_bad_input(ranking) -> None:
    with pytest.raises(ValueError):
        weights_from_ranking(ranking)
