"""Tests for the Poisson-disc acceleration grid."""

from __future__ import annotations

import math

import pytest

from vegepoly.services.geometry import BoundingBox, Point
from vegepoly.services.spatial_grid import SpatialGrid


def test_dimensions_from_min_distance() -> None:
    """cell_size = d / sqrt(2); width/height round up."""
    grid = SpatialGrid(BoundingBox(0, 0, 100, 50), 10.0)
    assert math.isclose(grid.cell_size, 10.0 / math.sqrt(2))
    assert grid.width == math.ceil(100 / grid.cell_size)
    assert grid.height == math.ceil(50 / grid.cell_size)


def test_degenerate_extent_has_one_cell() -> None:
    grid = SpatialGrid(BoundingBox(5, 5, 5, 5), 1.0)
    assert (grid.width, grid.height) == (1, 1)


def test_insert_and_get() -> None:
    grid = SpatialGrid(BoundingBox(0, 0, 10, 10), 2.0)
    p = Point(3.0, 3.0)
    grid.insert(p)
    col, row = grid.cell_index(p)
    assert grid.get(col, row) == p
    assert len(grid) == 1
    assert list(grid.points()) == [p]


def test_insert_into_occupied_cell_raises() -> None:
    grid = SpatialGrid(BoundingBox(0, 0, 10, 10), 2.0)
    grid.insert(Point(0.1, 0.1))
    with pytest.raises(RuntimeError):
        grid.insert(Point(0.2, 0.2))


def test_cell_index_outside_extent_raises() -> None:
    grid = SpatialGrid(BoundingBox(0, 0, 10, 10), 2.0)
    with pytest.raises(ValueError):
        grid.cell_index(Point(-1.0, 5.0))
    assert not grid.in_extent(Point(-1.0, 5.0))


def test_neighbor_within_radius() -> None:
    grid = SpatialGrid(BoundingBox(0, 0, 20, 20), 2.0)
    grid.insert(Point(5.0, 5.0))
    assert grid.has_neighbor_within(Point(6.0, 5.0), 2.0)
    assert not grid.has_neighbor_within(Point(7.5, 5.0), 2.0)


def test_neighbor_two_cells_away_is_found() -> None:
    """A point 1.35*cell_size away along x lies two cells over and is still closer than d."""
    d = 2.0
    grid = SpatialGrid(BoundingBox(0, 0, 20, 20), d)
    base = Point(grid.cell_size * 0.7, 10.0)
    grid.insert(base)
    probe = Point(grid.cell_size * 2.05, 10.0)
    assert grid.cell_index(probe)[0] - grid.cell_index(base)[0] == 2
    assert probe.x - base.x < d
    assert grid.has_neighbor_within(probe, d)


def test_rejects_non_positive_distance() -> None:
    with pytest.raises(ValueError):
        SpatialGrid(BoundingBox(0, 0, 1, 1), 0.0)
