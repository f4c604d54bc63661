"""
WKT polygon parsing.

Accepted: POLYGON((x y, x y, ...), (hole x y, ...), ...), case-insensitive, optional Z values
(ignored). MULTIPOLYGON is rejected explicitly. The first ring is the exterior; the rest are holes.
"""

from __future__ import annotations

import re

from vegepoly.services.errors import MalformedPolygonError
from vegepoly.services.geometry import Polygon, close_ring

_POLYGON_RE = re.compile(r"\b(MULTI)?POLYGON\s*(?:Z\s*)?\(\s*(\(.*?\))\s*\)", re.IGNORECASE | re.DOTALL)
_RING_RE = re.compile(r"\(([^()]*)\)")


def find_polygon_wkt(text: str) -> str | None:
    """Return the first (MULTI)POLYGON(...) substring in text, or None."""
    match = _POLYGON_RE.search(text)
    return match.group(0) if match else None


def _parse_coords(ring_text: str) -> list[tuple[float, float]]:
    coords: list[tuple[float, float]] = []
    for pair in ring_text.split(","):
        parts = pair.split()
        if len(parts) not in (2, 3):
            raise MalformedPolygonError(f"Invalid coordinate pair: {pair.strip()!r}")
        try:
            coords.append((float(parts[0]), float(parts[1])))
        except ValueError as exc:
            raise MalformedPolygonError(f"Invalid coordinate pair: {pair.strip()!r}") from exc
    return coords


def parse_polygon_wkt(text: str) -> Polygon:
    """Parse a WKT POLYGON. Raises MalformedPolygonError on anything else."""
    match = _POLYGON_RE.search(text)
    if not match:
        raise MalformedPolygonError("No POLYGON geometry found")
    if match.group(1):
        raise MalformedPolygonError("MULTIPOLYGON is not supported")
    rings_text = _RING_RE.findall(match.group(2))
    if not rings_text:
        raise MalformedPolygonError("POLYGON has no rings")
    rings = [close_ring(_parse_coords(r)) for r in rings_text]
    return Polygon(exterior=rings[0], holes=rings[1:])
