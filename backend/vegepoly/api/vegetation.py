"""Vegetation API: start a CSV batch job, poll progress, preview a polygon, built-in defaults."""

from __future__ import annotations

import random
import sqlite3
from dataclasses import replace
from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status

from vegepoly.api.deps import get_app_settings, get_job_manager
from vegepoly.config import AppSettings
from vegepoly.db.connection import get_db
from vegepoly.schemas.vegetation import (
    JobAcceptedSchema,
    JobCreateSchema,
    JobSummarySchema,
    PointSchema,
    PreviewRequestSchema,
    PreviewSchema,
    ProgressSchema,
    VegetationDefaultsSchema,
    VegetationParamsSchema,
)
from vegepoly.services import settings_store
from vegepoly.services.batch import row_error_message
from vegepoly.services.csv_input import count_polygon_rows, parse_polygon_rows, read_polygon_rows
from vegepoly.services.errors import EmptyPolygonSetError
from vegepoly.services.geometry import Point
from vegepoly.services.jobs import JobAlreadyRunningError, VegetationJobManager
from vegepoly.services.preview import build_preview, render_preview_png
from vegepoly.services.profiles import VegetationParams, default_params, params_to_config, vegetation_type_name
from vegepoly.services.sampler import SamplingConfig

router = APIRouter()


def _resolve_params(db: sqlite3.Connection, payload: VegetationParamsSchema) -> VegetationParams:
    """Stored/built-in profile for the type, with any explicit request values on top."""
    params = settings_store.get_vegetation_params(db, payload.vegetation_type)
    overrides = {
        k: v
        for k, v in (
            ("density", payload.density),
            ("variation", payload.variation),
            ("type_value", payload.type_value),
        )
        if v is not None
    }
    return replace(params, **overrides)


def _build_config(params: VegetationParams, payload: VegetationParamsSchema, settings: AppSettings) -> SamplingConfig:
    strict = payload.strict_variation if payload.strict_variation is not None else settings.strict_variation
    try:
        return params_to_config(
            params,
            max_seed_attempts=settings.max_seed_attempts,
            max_attempts_per_point=settings.max_attempts_per_point,
            strict_variation=strict,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


def _existing_csv(raw_path: str) -> Path:
    path = Path(raw_path).expanduser()
    if not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CSV file not found")
    return path


def _points(ring: list[Point]) -> list[PointSchema]:
    return [PointSchema(x=p.x, y=p.y) for p in ring]


@router.post("/jobs", status_code=status.HTTP_202_ACCEPTED, response_model=JobAcceptedSchema)
def create_job(
    payload: JobCreateSchema,
    background_tasks: BackgroundTasks,
    db: sqlite3.Connection = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
    jobs: VegetationJobManager = Depends(get_job_manager),
) -> JobAcceptedSchema:
    """
    Start generating points for every polygon in a CSV file. Runs in the background; poll
    /progress for status. One job at a time (409 while busy).
    """
    csv_path = _existing_csv(payload.csv_path)
    params = _resolve_params(db, payload.params)
    config = _build_config(params, payload.params, settings)
    export_dir = settings_store.get_export_path(db, settings.export_dir)
    seed = payload.params.seed if payload.params.seed is not None else settings.sampler_seed
    total_rows = count_polygon_rows(csv_path)

    try:
        ticket = jobs.begin(csv_path, export_dir, config, params.vegetation_type, seed=seed)
    except JobAlreadyRunningError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    background_tasks.add_task(jobs.run, ticket)

    return JobAcceptedSchema(
        csv_path=str(csv_path),
        output_path=str(ticket.output_path),
        total_rows=total_rows,
    )


@router.get("/progress", response_model=ProgressSchema)
def get_progress(jobs: VegetationJobManager = Depends(get_job_manager)) -> ProgressSchema:
    snap = jobs.tracker.snapshot()
    return ProgressSchema(
        current_row=snap.current_row,
        total_rows=snap.total_rows,
        created_items=snap.created_items,
        percentage=snap.percentage,
        elapsed_seconds=snap.elapsed_seconds,
        estimated_remaining_seconds=snap.estimated_remaining_seconds,
        is_finished=snap.is_finished,
        errors=list(snap.errors),
    )


@router.get("/jobs/last", response_model=JobSummarySchema)
def get_last_job(jobs: VegetationJobManager = Depends(get_job_manager)) -> JobSummarySchema:
    summary = jobs.last_summary
    if summary is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No job has run yet")
    return JobSummarySchema(
        csv_path=summary.csv_path,
        output_path=summary.output_path,
        rows_processed=summary.rows_processed,
        total_rows=summary.total_rows,
        points_created=summary.points_created,
        errors=list(summary.errors),
        elapsed_seconds=summary.elapsed_seconds,
        finished_at=summary.finished_at,
    )


@router.post("/preview", response_model=None)
def preview(
    payload: PreviewRequestSchema,
    db: sqlite3.Connection = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
    format: str = Query("json", pattern="^(json|png)$"),
) -> PreviewSchema | Response:
    """Sample the first usable polygon of the input; JSON geometry or a PNG rendering."""
    if payload.csv_text is not None:
        rows = parse_polygon_rows(payload.csv_text)
    else:
        rows = read_polygon_rows(_existing_csv(payload.csv_path or ""))
    params = _resolve_params(db, payload.params)
    config = _build_config(params, payload.params, settings)
    seed = payload.params.seed if payload.params.seed is not None else settings.sampler_seed

    try:
        data = build_preview(rows, config, random.Random(seed))
    except EmptyPolygonSetError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if data.error is not None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=row_error_message(data.row_index, data.error),
        )

    if format == "png":
        return Response(content=render_preview_png(data, settings.preview_size_px), media_type="image/png")
    return PreviewSchema(
        row_index=data.row_index,
        exterior=_points(data.polygon.exterior),
        holes=[_points(h) for h in data.polygon.holes],
        points=_points(data.points),
        points_count=len(data.points),
    )


@router.get("/defaults/{vegetation_type}", response_model=VegetationDefaultsSchema)
def get_defaults(vegetation_type: int) -> VegetationDefaultsSchema:
    """Built-in profile, ignoring stored settings."""
    params = default_params(vegetation_type)
    return VegetationDefaultsSchema(
        vegetation_type=params.vegetation_type,
        name=vegetation_type_name(vegetation_type),
        density=params.density,
        variation=params.variation,
        type_value=params.type_value,
    )
