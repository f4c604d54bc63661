"""
Coordinate conversion: world (polygon units, +y up) ↔ preview pixels (origin top-left, +y down).

The transform fits a bounding box into a square canvas of size_px with a margin, using one uniform
scale for both axes so shapes are not distorted; the box is centered along its shorter side.

Mapping:
  px = margin + offset_x + (x - min_x) * scale
  py = size_px - margin - offset_y - (y - min_y) * scale   (world up → pixel up)

  x = min_x + (px - margin - offset_x) / scale
  y = min_y + (size_px - margin - offset_y - py) / scale
"""

from __future__ import annotations

from dataclasses import dataclass

from vegepoly.services.geometry import BoundingBox

DEFAULT_MARGIN_PX = 20


@dataclass(frozen=True)
class ViewTransform:
    min_x: float
    min_y: float
    scale: float
    offset_x: float
    offset_y: float
    size_px: int
    margin_px: int


def fit_transform(bbox: BoundingBox, size_px: int, margin_px: int = DEFAULT_MARGIN_PX) -> ViewTransform:
    """Uniform scale fitting bbox into the drawable area (size_px - 2 * margin_px)."""
    drawable = size_px - 2 * margin_px
    if drawable <= 0:
        raise ValueError(f"size_px {size_px} too small for margin {margin_px}")
    extent = max(bbox.width, bbox.height)
    scale = drawable / extent if extent > 0 else 1.0
    offset_x = (drawable - bbox.width * scale) / 2
    offset_y = (drawable - bbox.height * scale) / 2
    return ViewTransform(
        min_x=bbox.min_x,
        min_y=bbox.min_y,
        scale=scale,
        offset_x=offset_x,
        offset_y=offset_y,
        size_px=size_px,
        margin_px=margin_px,
    )


def world_to_pixel(x: float, y: float, t: ViewTransform) -> tuple[float, float]:
    """Convert a world point to pixel coordinates (origin top-left, +y down)."""
    px = t.margin_px + t.offset_x + (x - t.min_x) * t.scale
    py = t.size_px - t.margin_px - t.offset_y - (y - t.min_y) * t.scale
    return (px, py)


def pixel_to_world(px: float, py: float, t: ViewTransform) -> tuple[float, float]:
    """Convert pixel coordinates back to world units."""
    x = t.min_x + (px - t.margin_px - t.offset_x) / t.scale
    y = t.min_y + (t.size_px - t.margin_px - t.offset_y - py) / t.scale
    return (x, y)


def ring_to_pixels(
    vertices: list[tuple[float, float]],
    t: ViewTransform,
) -> list[tuple[float, float]]:
    """Convert a list of (x, y) from world units to pixels."""
    return [world_to_pixel(x, y, t) for x, y in vertices]
