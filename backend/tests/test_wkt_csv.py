"""Tests for WKT polygon parsing and CSV row extraction."""

from __future__ import annotations

from pathlib import Path

import pytest

from vegepoly.services.csv_input import count_polygon_rows, parse_polygon_rows, read_polygon_rows
from vegepoly.services.errors import MalformedPolygonError
from vegepoly.services.geometry import Point
from vegepoly.services.wkt import find_polygon_wkt, parse_polygon_wkt


def test_parse_simple_polygon_drops_closing_vertex() -> None:
    polygon = parse_polygon_wkt("POLYGON((0 0, 10 0, 10 10, 0 10, 0 0))")
    assert polygon.exterior == [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
    assert polygon.holes == []


def test_parse_polygon_with_hole() -> None:
    polygon = parse_polygon_wkt("POLYGON ((0 0, 10 0, 10 10, 0 10, 0 0), (2 2, 4 2, 4 4, 2 2))")
    assert len(polygon.exterior) == 4
    assert polygon.holes == [[Point(2, 2), Point(4, 2), Point(4, 4)]]


def test_parse_lowercase_and_z_values() -> None:
    polygon = parse_polygon_wkt("polygon z ((0 0 5, 3 0 5, 3 3 5, 0 0 5))")
    assert polygon.exterior == [Point(0, 0), Point(3, 0), Point(3, 3)]


def test_parse_decimal_and_negative_coordinates() -> None:
    polygon = parse_polygon_wkt("POLYGON((-1.5 2.25, 1e2 0, 3 -4.75, -1.5 2.25))")
    assert polygon.exterior[0] == Point(-1.5, 2.25)
    assert polygon.exterior[1] == Point(100.0, 0.0)


def test_multipolygon_rejected() -> None:
    with pytest.raises(MalformedPolygonError, match="MULTIPOLYGON"):
        parse_polygon_wkt("MULTIPOLYGON(((0 0, 1 0, 1 1, 0 0)))")


@pytest.mark.parametrize(
    "text",
    ["POINT(1 2)", "POLYGON EMPTY", "POLYGON((0 0, a b, 1 1, 0 0))", "POLYGON((0 0 0 0, 1 1, 2 0))"],
)
def test_malformed_wkt_raises(text: str) -> None:
    with pytest.raises(MalformedPolygonError):
        parse_polygon_wkt(text)


def test_find_polygon_in_csv_line() -> None:
    line = '7;"POLYGON((0 0, 1 0, 1 1, 0 0))";parcel A'
    assert find_polygon_wkt(line) == "POLYGON((0 0, 1 0, 1 1, 0 0))"
    assert find_polygon_wkt("7;no geometry") is None


def test_parse_rows_skips_header_and_blank_lines() -> None:
    text = (
        "id;geom\n"
        "1;POLYGON((0 0, 10 0, 10 10, 0 0))\n"
        "\n"
        "2;no geometry\n"
        "3;POLYGON((0 0, x 0, 1 1, 0 0))\n"
    )
    rows = parse_polygon_rows(text)
    assert [r.row_index for r in rows] == [0, 1, 2]
    assert [r.line_number for r in rows] == [2, 4, 5]
    assert rows[0].polygon is not None and rows[0].error is None
    assert rows[1].polygon is None and rows[1].error == "No polygon data in line 4"
    assert rows[2].polygon is None and "Invalid coordinate pair" in (rows[2].error or "")


def test_header_only_has_no_rows() -> None:
    assert parse_polygon_rows("id;geom\n") == []
    assert parse_polygon_rows("") == []


def test_read_file_with_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "input.csv"
    path.write_bytes(b"id;name;geom\n1;caf\xe9;POLYGON((0 0, 10 0, 10 10, 0 0))\n2;x;POLYGON((0 0, 5 0, 5 5, 0 0))\n")
    rows = read_polygon_rows(path)
    assert len(rows) == 2
    assert all(r.polygon is not None for r in rows)
    assert count_polygon_rows(path) == 2
