"""
Uniform acceleration grid for Poisson-disc sampling.

cell_size = min_distance / sqrt(2): the cell diagonal equals min_distance, so two accepted points
can never share a cell. Neighbour lookups scan a halo of ceil(radius / cell_size) cells around the
query cell (2 cells for radius = min_distance), which is the smallest halo that still sees every
point closer than radius.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

from vegepoly.services.geometry import BoundingBox, Point


class SpatialGrid:
    """Flat width*height slot list; each slot is None or one accepted point."""

    def __init__(self, bbox: BoundingBox, min_distance: float) -> None:
        if not min_distance > 0:
            raise ValueError("min_distance must be positive")
        self.bbox = bbox
        self.min_distance = min_distance
        self.cell_size = min_distance / math.sqrt(2)
        self.width = max(1, int(math.ceil(bbox.width / self.cell_size)))
        self.height = max(1, int(math.ceil(bbox.height / self.cell_size)))
        self._cells: list[Point | None] = [None] * (self.width * self.height)
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def in_extent(self, point: Point) -> bool:
        col = math.floor((point.x - self.bbox.min_x) / self.cell_size)
        row = math.floor((point.y - self.bbox.min_y) / self.cell_size)
        return 0 <= col < self.width and 0 <= row < self.height

    def cell_index(self, point: Point) -> tuple[int, int]:
        """(col, row) of the cell holding point. Raises ValueError outside the grid."""
        col = math.floor((point.x - self.bbox.min_x) / self.cell_size)
        row = math.floor((point.y - self.bbox.min_y) / self.cell_size)
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise ValueError(f"Point ({point.x}, {point.y}) is outside the grid extent")
        return (col, row)

    def get(self, col: int, row: int) -> Point | None:
        return self._cells[row * self.width + col]

    def insert(self, point: Point) -> None:
        """Store point in its cell. The cell must be empty."""
        col, row = self.cell_index(point)
        idx = row * self.width + col
        if self._cells[idx] is not None:
            raise RuntimeError(f"Grid cell ({col}, {row}) already occupied")
        self._cells[idx] = point
        self._count += 1

    def has_neighbor_within(self, point: Point, radius: float) -> bool:
        """True as soon as any stored point is closer than radius."""
        col, row = self.cell_index(point)
        halo = max(1, int(math.ceil(radius / self.cell_size)))
        r2 = radius * radius
        for j in range(max(0, row - halo), min(self.height, row + halo + 1)):
            base = j * self.width
            for i in range(max(0, col - halo), min(self.width, col + halo + 1)):
                other = self._cells[base + i]
                if other is None:
                    continue
                dx = point.x - other.x
                dy = point.y - other.y
                if dx * dx + dy * dy < r2:
                    return True
        return False

    def points(self) -> Iterator[Point]:
        return (p for p in self._cells if p is not None)
