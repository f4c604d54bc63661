"""Tests for the single-slot job manager and the progress it publishes."""

from __future__ import annotations

from pathlib import Path

import pytest

from vegepoly.services.jobs import JobAlreadyRunningError, VegetationJobManager
from vegepoly.services.progress import ProgressSnapshot
from vegepoly.services.sampler import SamplingConfig

CSV_TEXT = "id;geom\n1;POLYGON((0 0, 50 0, 50 50, 0 50, 0 0))\n"


@pytest.fixture()
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "parcels.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


def test_begin_resets_progress_of_previous_job(csv_file: Path, tmp_path: Path) -> None:
    jobs = VegetationJobManager()
    config = SamplingConfig(min_distance=8.0)
    jobs.run(jobs.begin(csv_file, tmp_path / "first", config, vegetation_type=1, seed=1))
    assert jobs.tracker.snapshot().is_finished

    ticket = jobs.begin(csv_file, tmp_path / "second", config, vegetation_type=1, seed=2)
    try:
        snap = jobs.tracker.snapshot()
        assert not snap.is_finished
        assert snap.current_row == 0
        assert snap.created_items == 0
        assert snap.errors == ()
    finally:
        jobs.run(ticket)


def test_finished_only_after_export_written(csv_file: Path, tmp_path: Path) -> None:
    jobs = VegetationJobManager()
    ticket = jobs.begin(csv_file, tmp_path / "out", SamplingConfig(min_distance=8.0), vegetation_type=1, seed=3)
    seen: list[tuple[bool, bool]] = []

    def _listener(snap: ProgressSnapshot) -> None:
        seen.append((snap.is_finished, ticket.output_path.exists()))

    jobs.tracker.subscribe(_listener)
    summary = jobs.run(ticket)

    assert summary.output_path == str(ticket.output_path)
    finished = [exists for is_finished, exists in seen if is_finished]
    assert finished == [True]


def test_write_failure_reported_before_finish(csv_file: Path, tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    jobs = VegetationJobManager()
    ticket = jobs.begin(csv_file, blocker, SamplingConfig(min_distance=8.0), vegetation_type=1)
    seen: list[ProgressSnapshot] = []
    jobs.tracker.subscribe(seen.append)

    summary = jobs.run(ticket)

    assert summary.output_path is None
    assert summary.errors[-1].startswith("Job failed: ")
    final = [s for s in seen if s.is_finished]
    assert len(final) == 1
    assert final[0].errors[-1].startswith("Job failed: ")
    assert not jobs.is_running


def test_second_begin_while_running_is_rejected(csv_file: Path, tmp_path: Path) -> None:
    jobs = VegetationJobManager()
    ticket = jobs.begin(csv_file, tmp_path, SamplingConfig(min_distance=8.0), vegetation_type=1)
    try:
        with pytest.raises(JobAlreadyRunningError):
            jobs.begin(csv_file, tmp_path, SamplingConfig(min_distance=8.0), vegetation_type=1)
    finally:
        jobs.run(ticket)
    assert not jobs.is_running
