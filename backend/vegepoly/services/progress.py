"""
Progress reporting for batch runs.

The tracker is the only writer. Every update builds a new frozen ProgressSnapshot and swaps it in
under a lock, so a reader (polling or subscriber) never sees a half-updated snapshot.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ProgressListener = Callable[["ProgressSnapshot"], None]


@dataclass(frozen=True)
class ProgressSnapshot:
    current_row: int = 0
    total_rows: int = 0
    created_items: int = 0
    percentage: float = 0.0
    elapsed_seconds: float | None = None
    estimated_remaining_seconds: float | None = None
    is_finished: bool = False
    errors: tuple[str, ...] = ()


def estimate_remaining_seconds(elapsed: float, current_row: int, total_rows: int) -> float | None:
    """Average throughput so far projected over the remaining rows."""
    if current_row <= 0 or total_rows <= current_row or elapsed <= 0:
        return None
    rate = current_row / elapsed
    return (total_rows - current_row) / rate


class ProgressTracker:
    """Thread-safe holder of the current snapshot with optional push listeners."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot = ProgressSnapshot()
        self._listeners: list[ProgressListener] = []
        self._started_at: float | None = None
        self._finished_at: float | None = None

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ProgressListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return self._snapshot

    def _build(
        self,
        *,
        current_row: int,
        total_rows: int,
        created_items: int,
        errors: tuple[str, ...],
        finished: bool,
    ) -> ProgressSnapshot:
        now = self._clock()
        elapsed = None
        if self._started_at is not None:
            end = self._finished_at if self._finished_at is not None else now
            elapsed = end - self._started_at
        percentage = (100.0 * current_row / total_rows) if total_rows > 0 else (100.0 if finished else 0.0)
        remaining = None
        if not finished and elapsed is not None:
            remaining = estimate_remaining_seconds(elapsed, current_row, total_rows)
        return ProgressSnapshot(
            current_row=current_row,
            total_rows=total_rows,
            created_items=created_items,
            percentage=percentage,
            elapsed_seconds=elapsed,
            estimated_remaining_seconds=remaining,
            is_finished=finished,
            errors=errors,
        )

    def _publish(self, snap: ProgressSnapshot) -> None:
        with self._lock:
            self._snapshot = snap
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Progress listener failed.")

    def start(self, total_rows: int) -> None:
        self._started_at = self._clock()
        self._finished_at = None
        self._publish(
            self._build(current_row=0, total_rows=total_rows, created_items=0, errors=(), finished=False)
        )

    def record_row(self, points_created: int, error: str | None = None) -> None:
        """One row done: bump current_row, add points, append error if any."""
        prev = self.snapshot()
        errors = prev.errors + ((error,) if error else ())
        self._publish(
            self._build(
                current_row=prev.current_row + 1,
                total_rows=prev.total_rows,
                created_items=prev.created_items + points_created,
                errors=errors,
                finished=False,
            )
        )

    def add_error(self, message: str) -> None:
        """Error not tied to a processed row (empty batch, unreadable file)."""
        prev = self.snapshot()
        self._publish(
            self._build(
                current_row=prev.current_row,
                total_rows=prev.total_rows,
                created_items=prev.created_items,
                errors=prev.errors + (message,),
                finished=prev.is_finished,
            )
        )

    def finish(self) -> ProgressSnapshot:
        self._finished_at = self._clock()
        prev = self.snapshot()
        snap = self._build(
            current_row=prev.current_row,
            total_rows=prev.total_rows,
            created_items=prev.created_items,
            errors=prev.errors,
            finished=True,
        )
        self._publish(snap)
        return snap
