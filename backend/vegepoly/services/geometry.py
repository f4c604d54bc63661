"""
Geometry primitives for vegetation placement.

- Point: immutable (x, y) in the polygon's coordinate space (projected units, e.g. metres).
- Polygon: exterior ring + hole rings. Rings are implicitly closed (last vertex joins the first).
- Containment: even-odd ray casting per ring; inside = inside exterior AND NOT inside any hole.
  Points exactly on an edge get whatever ray casting returns; callers must not rely on it.
- Validation: >= 3 distinct vertices and non-zero area per ring. Self-intersection is not checked.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple

from vegepoly.services.errors import MalformedPolygonError

# Shoelace areas below this are treated as degenerate (collinear vertices)
MIN_RING_AREA = 1e-12


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box (min inclusive)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, point: Point) -> bool:
        """Half-open test: [min, max) on both axes."""
        return self.min_x <= point.x < self.max_x and self.min_y <= point.y < self.max_y


@dataclass
class Polygon:
    """Exterior ring plus zero or more holes."""

    exterior: list[Point]
    holes: list[list[Point]] = field(default_factory=list)

    @property
    def bounding_box(self) -> BoundingBox:
        return ring_bounds(self.exterior)

    @property
    def area(self) -> float:
        """Exterior area minus hole areas."""
        return ring_area(self.exterior) - sum(ring_area(h) for h in self.holes)


def ring_bounds(ring: list[Point]) -> BoundingBox:
    """Bounding box of a ring. Raises MalformedPolygonError on an empty ring."""
    if not ring:
        raise MalformedPolygonError("Empty ring")
    xs = [p.x for p in ring]
    ys = [p.y for p in ring]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def ring_area(ring: list[Point]) -> float:
    """Shoelace formula. Returns absolute area."""
    n = len(ring)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += ring[i].x * ring[j].y
        area -= ring[j].x * ring[i].y
    return abs(area) / 2.0


def point_in_ring(point: Point, ring: list[Point]) -> bool:
    """Ray casting: odd number of crossings = inside."""
    n = len(ring)
    if n < 3:
        return False
    px, py = point
    inside = False
    x1, y1 = ring[-1]
    for x2, y2 in ring:
        if (y1 > py) != (y2 > py):
            x_intersect = (x2 - x1) * (py - y1) / (y2 - y1) + x1
            if px < x_intersect:
                inside = not inside
        x1, y1 = x2, y2
    return inside


def point_in_polygon(point: Point, polygon: Polygon) -> bool:
    """Inside the exterior ring and outside every hole."""
    if not point_in_ring(point, polygon.exterior):
        return False
    return not any(point_in_ring(point, hole) for hole in polygon.holes)


def _validate_ring(ring: list[Point], label: str) -> None:
    distinct = set(ring)
    if len(distinct) < 3:
        raise MalformedPolygonError(
            f"{label} ring needs at least 3 distinct vertices, got {len(distinct)}"
        )
    if not all(math.isfinite(p.x) and math.isfinite(p.y) for p in ring):
        raise MalformedPolygonError(f"{label} ring has non-finite coordinates")
    if ring_area(ring) <= MIN_RING_AREA:
        raise MalformedPolygonError(f"{label} ring has zero area")


def validate_polygon(polygon: Polygon) -> None:
    """Raise MalformedPolygonError if any ring is degenerate."""
    _validate_ring(polygon.exterior, "Exterior")
    for idx, hole in enumerate(polygon.holes):
        _validate_ring(hole, f"Hole {idx + 1}")


def close_ring(coords: list[tuple[float, float]]) -> list[Point]:
    """Build a ring from coordinates, dropping a duplicated closing vertex."""
    ring = [Point(float(x), float(y)) for x, y in coords]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring
