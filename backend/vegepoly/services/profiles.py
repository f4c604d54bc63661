"""
Default parameter profiles per vegetation type.

vegetation_type only selects defaults; the sampler never sees it. density is the minimum distance
between two points (same units as the polygon coordinates).
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from vegepoly.services.sampler import (
    DEFAULT_MAX_ATTEMPTS_PER_POINT,
    DEFAULT_MAX_SEED_ATTEMPTS,
    SamplingConfig,
)

TREES = 1
BUSHES = 2
BUFFER_ZONES = 3


@dataclass(frozen=True)
class VegetationParams:
    vegetation_type: int
    density: float
    variation: float
    type_value: int


VEGETATION_TYPE_NAMES: dict[int, str] = {
    TREES: "Trees",
    BUSHES: "Bushes",
    BUFFER_ZONES: "Buffer zones",
}

DEFAULT_PROFILES: dict[int, VegetationParams] = {
    TREES: VegetationParams(vegetation_type=TREES, density=28.0, variation=1.0, type_value=10),
    BUSHES: VegetationParams(vegetation_type=BUSHES, density=5.0, variation=0.5, type_value=20),
    BUFFER_ZONES: VegetationParams(vegetation_type=BUFFER_ZONES, density=3.0, variation=0.3, type_value=30),
}

FALLBACK_PROFILE = VegetationParams(vegetation_type=0, density=5.0, variation=1.0, type_value=10)


def vegetation_type_name(vegetation_type: int) -> str:
    return VEGETATION_TYPE_NAMES.get(vegetation_type, "Items")


def default_params(vegetation_type: int) -> VegetationParams:
    """Built-in profile; unknown types get the generic fallback under their own type number."""
    profile = DEFAULT_PROFILES.get(vegetation_type)
    if profile is not None:
        return profile
    return replace(FALLBACK_PROFILE, vegetation_type=vegetation_type)


def params_to_config(
    params: VegetationParams,
    *,
    max_seed_attempts: int = DEFAULT_MAX_SEED_ATTEMPTS,
    max_attempts_per_point: int = DEFAULT_MAX_ATTEMPTS_PER_POINT,
    strict_variation: bool = False,
) -> SamplingConfig:
    """density -> min_distance. Raises ValueError on out-of-range values."""
    return SamplingConfig(
        min_distance=params.density,
        variation=params.variation,
        type_value=params.type_value,
        max_seed_attempts=max_seed_attempts,
        max_attempts_per_point=max_attempts_per_point,
        strict_variation=strict_variation,
    )
