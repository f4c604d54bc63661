"""
Grid-accelerated Poisson-disc sampler (Bridson-style) constrained to a polygon with holes.

Per polygon: SEEDING -> GROWING -> EXHAUSTED.
- Seeding: uniform draws in the bounding box until one lands inside the polygon
  (max_seed_attempts, default 100). None found -> SeedPlacementFailedError.
- Growing: pick a random active point; try up to max_attempts_per_point (default 30) candidates in
  the annulus [d, 2d) around it; accept the first inside the polygon with no neighbour closer than d.
  All attempts fail -> retire the active point for good (it stays in the result).
- Exhausted: active list empty; the accepted list is final.

Randomness comes from an injected random.Random so a fixed seed reproduces the same points.
Variation (jitter) is a separate step, see services/variation.py.
"""

from __future__ import annotations

import math
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from vegepoly.services.errors import SamplingError, SeedPlacementFailedError
from vegepoly.services.geometry import Point, Polygon, point_in_polygon, validate_polygon
from vegepoly.services.spatial_grid import SpatialGrid

DEFAULT_MAX_SEED_ATTEMPTS = 100
DEFAULT_MAX_ATTEMPTS_PER_POINT = 30


@dataclass(frozen=True)
class SamplingConfig:
    """Sampler parameters. Out-of-range values are rejected before any sampling starts."""

    min_distance: float
    variation: float = 0.0
    type_value: int = 0
    max_seed_attempts: int = DEFAULT_MAX_SEED_ATTEMPTS
    max_attempts_per_point: int = DEFAULT_MAX_ATTEMPTS_PER_POINT
    strict_variation: bool = False

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min_distance) and self.min_distance > 0):
            raise ValueError(f"min_distance must be a positive number, got {self.min_distance}")
        if not (math.isfinite(self.variation) and self.variation >= 0):
            raise ValueError(f"variation must be >= 0, got {self.variation}")
        if self.max_seed_attempts < 1:
            raise ValueError("max_seed_attempts must be >= 1")
        if self.max_attempts_per_point < 1:
            raise ValueError("max_attempts_per_point must be >= 1")


class SamplerState(Enum):
    SEEDING = "seeding"
    GROWING = "growing"
    EXHAUSTED = "exhausted"


class VegetationPoint(NamedTuple):
    """Exported point: final coordinates plus the opaque type tag."""

    x: float
    y: float
    type_value: int


@dataclass
class SampleResult:
    """Outcome for one polygon row."""

    row_index: int
    type_value: int
    points: list[Point] = field(default_factory=list)
    exported: list[VegetationPoint] = field(default_factory=list)
    error: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class PoissonDiscSampler:
    """One sampling pass over one polygon. Not reusable across polygons."""

    def __init__(
        self,
        polygon: Polygon,
        config: SamplingConfig,
        rng: random.Random | None = None,
    ) -> None:
        self.polygon = polygon
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.bbox = polygon.bounding_box
        self.grid = SpatialGrid(self.bbox, config.min_distance)
        self.points: list[Point] = []
        self.active: list[int] = []
        self.state = SamplerState.SEEDING

    def _accept(self, point: Point) -> None:
        self.grid.insert(point)
        self.active.append(len(self.points))
        self.points.append(point)

    def _is_valid(self, candidate: Point) -> bool:
        return (
            self.grid.in_extent(candidate)
            and point_in_polygon(candidate, self.polygon)
            and not self.grid.has_neighbor_within(candidate, self.config.min_distance)
        )

    def _seed(self) -> None:
        b = self.bbox
        for _ in range(self.config.max_seed_attempts):
            candidate = Point(
                b.min_x + self.rng.random() * b.width,
                b.min_y + self.rng.random() * b.height,
            )
            if self.grid.in_extent(candidate) and point_in_polygon(candidate, self.polygon):
                self._accept(candidate)
                return
        self.state = SamplerState.EXHAUSTED
        raise SeedPlacementFailedError(
            f"No valid initial point after {self.config.max_seed_attempts} attempts"
        )

    def _grow_from(self, origin: Point) -> bool:
        """Try candidates in the annulus around origin; True when one was accepted."""
        d = self.config.min_distance
        for _ in range(self.config.max_attempts_per_point):
            angle = 2.0 * math.pi * self.rng.random()
            radius = d + d * self.rng.random()
            candidate = Point(
                origin.x + radius * math.cos(angle),
                origin.y + radius * math.sin(angle),
            )
            if self._is_valid(candidate):
                self._accept(candidate)
                return True
        return False

    def generate(self) -> list[Point]:
        """Run to exhaustion and return accepted points in acceptance order."""
        if self.state is not SamplerState.SEEDING:
            raise RuntimeError("Sampler already ran; create a new one per polygon")
        self._seed()
        self.state = SamplerState.GROWING
        while self.active:
            slot = self.rng.randrange(len(self.active))
            origin = self.points[self.active[slot]]
            if not self._grow_from(origin):
                # swap-remove keeps retirement O(1)
                self.active[slot] = self.active[-1]
                self.active.pop()
        self.state = SamplerState.EXHAUSTED
        return list(self.points)


def sample_polygon(
    polygon: Polygon,
    config: SamplingConfig,
    rng: random.Random | None = None,
    row_index: int = 0,
) -> SampleResult:
    """
    Validate and sample one polygon. Per-polygon failures (malformed ring, no seed) come back as a
    SampleResult with error set and no points; they never raise.
    """
    started = time.perf_counter()
    result = SampleResult(row_index=row_index, type_value=config.type_value)
    try:
        validate_polygon(polygon)
        sampler = PoissonDiscSampler(polygon, config, rng)
        result.points = sampler.generate()
    except SamplingError as exc:
        result.points = []
        result.error = str(exc)
    result.elapsed_seconds = time.perf_counter() - started
    return result
