"""
Batch driver: polygon rows -> sampler -> variation -> export records + progress.

Every failure is scoped to its row: it adds exactly one "Error at row N: ..." message and the loop
moves on. A grid and active list exist only for the polygon being sampled. The tracker is the only
state shared across rows.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from vegepoly.services.csv_input import PolygonRow
from vegepoly.services.errors import EmptyPolygonSetError
from vegepoly.services.geometry import Polygon
from vegepoly.services.profiles import vegetation_type_name
from vegepoly.services.progress import ProgressSnapshot, ProgressTracker
from vegepoly.services.sampler import SampleResult, SamplingConfig, VegetationPoint, sample_polygon
from vegepoly.services.variation import apply_variation

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Final result of a batch run, in row order."""

    results: list[SampleResult] = field(default_factory=list)
    snapshot: ProgressSnapshot = field(default_factory=ProgressSnapshot)

    @property
    def records(self) -> list[VegetationPoint]:
        return [p for r in self.results for p in r.exported]

    @property
    def points_created(self) -> int:
        return sum(len(r.exported) for r in self.results)

    @property
    def rows_processed(self) -> int:
        return self.snapshot.current_row

    @property
    def errors(self) -> list[str]:
        return list(self.snapshot.errors)


def row_error_message(row_index: int, reason: str) -> str:
    return f"Error at row {row_index}: {reason}"


class BatchRunner:
    """Runs the sampler over rows sequentially, reporting through a ProgressTracker."""

    def __init__(
        self,
        config: SamplingConfig,
        rng: random.Random | None = None,
        tracker: ProgressTracker | None = None,
        vegetation_type: int | None = None,
    ) -> None:
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.tracker = tracker if tracker is not None else ProgressTracker()
        self.label = vegetation_type_name(vegetation_type) if vegetation_type is not None else "Items"

    def get_progress(self) -> ProgressSnapshot:
        return self.tracker.snapshot()

    def run(self, polygons: Sequence[Polygon]) -> BatchReport:
        rows = [PolygonRow(row_index=i, line_number=i + 2, polygon=p) for i, p in enumerate(polygons)]
        return self.run_rows(rows)

    def _process_row(self, row: PolygonRow) -> SampleResult:
        if row.polygon is None:
            return SampleResult(
                row_index=row.row_index,
                type_value=self.config.type_value,
                error=row.error or "Missing polygon",
            )
        result = sample_polygon(row.polygon, self.config, self.rng, row_index=row.row_index)
        if not result.ok:
            return result
        moved = apply_variation(
            result.points,
            self.config.variation,
            self.rng,
            polygon=row.polygon,
            min_distance=self.config.min_distance,
            strict=self.config.strict_variation,
        )
        result.exported = [VegetationPoint(p.x, p.y, self.config.type_value) for p in moved]
        return result

    def run_rows(self, rows: Sequence[PolygonRow], *, finish: bool = True) -> BatchReport:
        """finish=False leaves the tracker open for a caller that still has work after the rows."""
        total = len(rows)
        self.tracker.start(total)
        report = BatchReport()
        if total == 0:
            self.tracker.add_error(str(EmptyPolygonSetError("No polygon rows to process")))
            report.snapshot = self.tracker.finish() if finish else self.tracker.snapshot()
            logger.warning("Batch has no polygon rows.")
            return report

        for row in rows:
            result = self._process_row(row)
            report.results.append(result)
            if result.ok:
                logger.info(
                    "Row [%d/%d] %d points of %s generated in %.3fs",
                    row.row_index + 1,
                    total,
                    len(result.exported),
                    self.label,
                    result.elapsed_seconds,
                )
                self.tracker.record_row(len(result.exported))
            else:
                message = row_error_message(row.row_index, result.error or "unknown error")
                logger.warning(message)
                self.tracker.record_row(0, error=message)

        report.snapshot = self.tracker.finish() if finish else self.tracker.snapshot()
        logger.info(
            "Batch finished: %d rows, %d points, %d errors",
            report.rows_processed,
            report.points_created,
            len(report.errors),
        )
        return report
