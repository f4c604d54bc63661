"""
CSV input: one polygon per data line, geometry as WKT anywhere in the line.

The first line is a header. Blank lines are skipped and are not rows. Bytes are decoded as UTF-8
with replacement so stray encodings do not abort a batch. Lines without geometry or with
unparsable geometry become rows carrying an error message.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vegepoly.services.errors import MalformedPolygonError
from vegepoly.services.geometry import Polygon
from vegepoly.services.wkt import find_polygon_wkt, parse_polygon_wkt


@dataclass
class PolygonRow:
    """One data row: parsed polygon or the reason it could not be parsed."""

    row_index: int
    line_number: int
    polygon: Polygon | None = None
    error: str | None = None


def _data_lines(text: str) -> list[tuple[int, str]]:
    lines = text.splitlines()
    return [(n, line) for n, line in enumerate(lines[1:], start=2) if line.strip()]


def parse_polygon_rows(text: str) -> list[PolygonRow]:
    rows: list[PolygonRow] = []
    for row_index, (line_number, line) in enumerate(_data_lines(text)):
        wkt = find_polygon_wkt(line)
        if wkt is None:
            rows.append(
                PolygonRow(row_index, line_number, error=f"No polygon data in line {line_number}")
            )
            continue
        try:
            polygon = parse_polygon_wkt(wkt)
        except MalformedPolygonError as exc:
            rows.append(PolygonRow(row_index, line_number, error=str(exc)))
            continue
        rows.append(PolygonRow(row_index, line_number, polygon=polygon))
    return rows


def read_text_lossy(path: str | Path) -> str:
    return Path(path).read_bytes().decode("utf-8", errors="replace")


def read_polygon_rows(path: str | Path) -> list[PolygonRow]:
    """Read and parse all data rows of a CSV file."""
    return parse_polygon_rows(read_text_lossy(path))


def count_polygon_rows(path: str | Path) -> int:
    """Number of non-blank data lines (header excluded)."""
    return len(_data_lines(read_text_lossy(path)))
