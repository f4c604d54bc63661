"""
Single-slot job manager for CSV batch runs started from the API.

At most one job runs at a time; begin() claims the slot and run() always releases it. Progress is
read from the shared tracker, the summary of the last finished job is kept in memory.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from vegepoly.services.batch import BatchRunner
from vegepoly.services.csv_input import read_polygon_rows
from vegepoly.services.export import export_filename, write_export
from vegepoly.services.progress import ProgressTracker
from vegepoly.services.sampler import SamplingConfig

logger = logging.getLogger(__name__)


class JobAlreadyRunningError(RuntimeError):
    """Raised by begin() while another job holds the slot."""


@dataclass(frozen=True)
class JobTicket:
    csv_path: Path
    output_path: Path
    config: SamplingConfig
    vegetation_type: int
    seed: int | None = None


@dataclass(frozen=True)
class JobSummary:
    csv_path: str
    output_path: str | None
    rows_processed: int
    total_rows: int
    points_created: int
    errors: tuple[str, ...]
    elapsed_seconds: float | None
    finished_at: str


class VegetationJobManager:
    def __init__(self, tracker: ProgressTracker | None = None) -> None:
        self.tracker = tracker if tracker is not None else ProgressTracker()
        self._slot = threading.Lock()
        self._last: JobSummary | None = None

    @property
    def is_running(self) -> bool:
        return self._slot.locked()

    @property
    def last_summary(self) -> JobSummary | None:
        return self._last

    def begin(
        self,
        csv_path: Path,
        export_dir: Path,
        config: SamplingConfig,
        vegetation_type: int,
        seed: int | None = None,
    ) -> JobTicket:
        """Claim the slot and decide the output file. Caller must hand the ticket to run()."""
        if not self._slot.acquire(blocking=False):
            raise JobAlreadyRunningError("A vegetation job is already running")
        # progress belongs to this job from here on
        self.tracker.start(0)
        return JobTicket(
            csv_path=csv_path,
            output_path=export_dir / export_filename(),
            config=config,
            vegetation_type=vegetation_type,
            seed=seed,
        )

    def run(self, ticket: JobTicket) -> JobSummary:
        written: Path | None = None
        try:
            rows = read_polygon_rows(ticket.csv_path)
            runner = BatchRunner(
                ticket.config,
                rng=random.Random(ticket.seed),
                tracker=self.tracker,
                vegetation_type=ticket.vegetation_type,
            )
            report = runner.run_rows(rows, finish=False)
            ticket.output_path.parent.mkdir(parents=True, exist_ok=True)
            written = write_export(ticket.output_path, report.records)
            logger.info("Export written: %s (%d points)", written, report.points_created)
            self.tracker.finish()
        except Exception as exc:
            logger.exception("Vegetation job failed for %s", ticket.csv_path)
            self.tracker.add_error(f"Job failed: {exc}")
            if not self.tracker.snapshot().is_finished:
                self.tracker.finish()
        finally:
            snap = self.tracker.snapshot()
            self._last = JobSummary(
                csv_path=str(ticket.csv_path),
                output_path=str(written) if written else None,
                rows_processed=snap.current_row,
                total_rows=snap.total_rows,
                points_created=snap.created_items,
                errors=snap.errors,
                elapsed_seconds=snap.elapsed_seconds,
                finished_at=datetime.now().isoformat(timespec="seconds"),
            )
            self._slot.release()
        return self._last
