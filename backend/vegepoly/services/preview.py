"""Preview of the first usable polygon in a CSV: outline, holes and jittered points."""

from __future__ import annotations

import io
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from PIL import Image, ImageDraw

from vegepoly.services.coordinates import fit_transform, ring_to_pixels, world_to_pixel
from vegepoly.services.csv_input import PolygonRow
from vegepoly.services.errors import EmptyPolygonSetError
from vegepoly.services.geometry import Point, Polygon
from vegepoly.services.sampler import SamplingConfig, sample_polygon
from vegepoly.services.variation import apply_variation

BACKGROUND = (255, 255, 255)
OUTLINE = (60, 120, 60)
FILL = (210, 240, 210)
HOLE_FILL = BACKGROUND
POINT_FILL = (200, 60, 40)


@dataclass
class PreviewData:
    row_index: int
    polygon: Polygon
    points: list[Point] = field(default_factory=list)
    error: str | None = None


def build_preview(
    rows: Sequence[PolygonRow],
    config: SamplingConfig,
    rng: random.Random | None = None,
) -> PreviewData:
    """Sample the first row that parsed to a polygon. Raises EmptyPolygonSetError if none did."""
    row = next((r for r in rows if r.polygon is not None), None)
    if row is None or row.polygon is None:
        raise EmptyPolygonSetError("No parsable polygon in input")
    rng = rng if rng is not None else random.Random()
    result = sample_polygon(row.polygon, config, rng, row_index=row.row_index)
    if not result.ok:
        return PreviewData(row_index=row.row_index, polygon=row.polygon, error=result.error)
    points = apply_variation(
        result.points,
        config.variation,
        rng,
        polygon=row.polygon,
        min_distance=config.min_distance,
        strict=config.strict_variation,
    )
    return PreviewData(row_index=row.row_index, polygon=row.polygon, points=points)


def render_preview_png(preview: PreviewData, size_px: int) -> bytes:
    """Draw polygon (holes punched out) and points on a white square canvas; PNG bytes."""
    t = fit_transform(preview.polygon.bounding_box, size_px)
    img = Image.new("RGB", (size_px, size_px), BACKGROUND)
    draw = ImageDraw.Draw(img)
    draw.polygon(ring_to_pixels(preview.polygon.exterior, t), outline=OUTLINE, fill=FILL)
    for hole in preview.polygon.holes:
        draw.polygon(ring_to_pixels(hole, t), outline=OUTLINE, fill=HOLE_FILL)
    r = max(1.5, min(4.0, size_px / 200))
    for p in preview.points:
        x, y = world_to_pixel(p.x, p.y, t)
        draw.ellipse((x - r, y - r, x + r, y + r), fill=POINT_FILL)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
