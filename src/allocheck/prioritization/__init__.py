from allocheck.prioritization.weights import (
    CRITERIA,
    DEFAULT_WEIGHTS,
    PRESET_PROFILES,
    get_profile,
    normalize_weights,
    set_weight,
    weights_from_ranking,
)

__all__ = [
    "CRITERIA",
    "DEFAULT_WEIGHTS",
    "PRESET_PROFILES",
    "get_profile",
    "normalize_weights",
    "set_weight",
    "weights_from_ranking",
]
