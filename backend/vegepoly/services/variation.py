"""
Cosmetic jitter applied to accepted points before export.

Default mode offsets each point by up to `variation` in a random direction and does NOT re-check
containment or minimum distance, so a large variation relative to min_distance can break both.
Strict mode re-validates every jittered point against the polygon and the points already kept:
jittered position first, then the original position, else the point is dropped.
"""

from __future__ import annotations

import math
import random

from vegepoly.services.geometry import Point, Polygon, point_in_polygon
from vegepoly.services.spatial_grid import SpatialGrid


def jitter_point(point: Point, variation: float, rng: random.Random) -> Point:
    """Random offset with magnitude in [0, variation)."""
    angle = rng.random() * 2.0 * math.pi
    distance = rng.random() * variation
    return Point(point.x + distance * math.cos(angle), point.y + distance * math.sin(angle))


def apply_variation(
    points: list[Point],
    variation: float,
    rng: random.Random | None = None,
    *,
    polygon: Polygon | None = None,
    min_distance: float | None = None,
    strict: bool = False,
) -> list[Point]:
    """Return jittered copies of points (input order kept; strict mode may drop some)."""
    if variation < 0:
        raise ValueError("variation must be >= 0")
    if variation == 0 or not points:
        return list(points)
    rng = rng if rng is not None else random.Random()
    if not strict:
        return [jitter_point(p, variation, rng) for p in points]

    if polygon is None or min_distance is None:
        raise ValueError("strict variation needs polygon and min_distance")
    grid = SpatialGrid(polygon.bounding_box, min_distance)
    kept: list[Point] = []

    def fits(candidate: Point) -> bool:
        return (
            grid.in_extent(candidate)
            and point_in_polygon(candidate, polygon)
            and not grid.has_neighbor_within(candidate, min_distance)
        )

    for p in points:
        moved = jitter_point(p, variation, rng)
        for candidate in (moved, p):
            if fits(candidate):
                grid.insert(candidate)
                kept.append(candidate)
                break
    return kept
