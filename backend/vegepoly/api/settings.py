"""Settings API: export directory and per-type vegetation parameter overrides."""

from __future__ import annotations

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, status

from vegepoly.api.deps import get_app_settings
from vegepoly.config import AppSettings
from vegepoly.db.connection import get_db
from vegepoly.schemas.settings import (
    ExportPathSchema,
    ResetResultSchema,
    UserParamsStatusSchema,
    VegetationProfileSchema,
    VegetationProfileUpdateSchema,
    VegetationTypesSchema,
)
from vegepoly.services import settings_store
from vegepoly.services.profiles import VegetationParams
from vegepoly.services.settings_store import SettingsError

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_schema(params: VegetationParams) -> VegetationProfileSchema:
    return VegetationProfileSchema(
        vegetation_type=params.vegetation_type,
        density=params.density,
        variation=params.variation,
        type_value=params.type_value,
    )


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("/vegetation-types", response_model=VegetationTypesSchema)
def list_vegetation_types(db: sqlite3.Connection = Depends(get_db)) -> VegetationTypesSchema:
    """Types with a stored default or a user override, ascending."""
    return VegetationTypesSchema(items=settings_store.get_available_vegetation_types(db))


@router.get("/vegetation-params/{vegetation_type}", response_model=VegetationProfileSchema)
def get_effective_params(vegetation_type: int, db: sqlite3.Connection = Depends(get_db)) -> VegetationProfileSchema:
    """User override, else stored default, else built-in profile."""
    return _to_schema(settings_store.get_vegetation_params(db, vegetation_type))


@router.get("/vegetation-params/{vegetation_type}/default", response_model=VegetationProfileSchema)
def get_default_params(vegetation_type: int, db: sqlite3.Connection = Depends(get_db)) -> VegetationProfileSchema:
    params = settings_store.get_default_vegetation_params(db, vegetation_type)
    if params is None:
        raise _not_found("No stored default for this vegetation type")
    return _to_schema(params)


@router.get("/vegetation-params/{vegetation_type}/user", response_model=VegetationProfileSchema)
def get_user_params(vegetation_type: int, db: sqlite3.Connection = Depends(get_db)) -> VegetationProfileSchema:
    params = settings_store.get_user_vegetation_params(db, vegetation_type)
    if params is None:
        raise _not_found("No user parameters for this vegetation type")
    return _to_schema(params)


@router.get("/vegetation-params/{vegetation_type}/user/exists", response_model=UserParamsStatusSchema)
def user_params_exist(vegetation_type: int, db: sqlite3.Connection = Depends(get_db)) -> UserParamsStatusSchema:
    return UserParamsStatusSchema(
        vegetation_type=vegetation_type,
        exists=settings_store.has_user_params(db, vegetation_type),
    )


@router.put("/vegetation-params/{vegetation_type}/user", response_model=VegetationProfileSchema)
def put_user_params(
    vegetation_type: int,
    payload: VegetationProfileUpdateSchema,
    db: sqlite3.Connection = Depends(get_db),
) -> VegetationProfileSchema:
    params = VegetationParams(
        vegetation_type=vegetation_type,
        density=payload.density,
        variation=payload.variation,
        type_value=payload.type_value,
    )
    try:
        saved = settings_store.set_user_vegetation_params(db, params)
    except SettingsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except sqlite3.Error as exc:
        logger.exception("Failed to save user vegetation params for type %s", vegetation_type)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save parameters",
        ) from exc
    return _to_schema(saved)


@router.delete("/vegetation-params/{vegetation_type}/user", response_model=VegetationProfileSchema)
def delete_user_params(vegetation_type: int, db: sqlite3.Connection = Depends(get_db)) -> VegetationProfileSchema:
    """Remove the override and return it; 404 when there was none."""
    removed = settings_store.remove_user_vegetation_params(db, vegetation_type)
    if removed is None:
        raise _not_found("No user parameters for this vegetation type")
    return _to_schema(removed)


@router.post("/vegetation-params/reset", response_model=ResetResultSchema)
def reset_user_params(db: sqlite3.Connection = Depends(get_db)) -> ResetResultSchema:
    return ResetResultSchema(removed=settings_store.reset_user_vegetation_params(db))


@router.get("/export-path", response_model=ExportPathSchema)
def get_export_path(
    db: sqlite3.Connection = Depends(get_db),
    settings: AppSettings = Depends(get_app_settings),
) -> ExportPathSchema:
    return ExportPathSchema(path=str(settings_store.get_export_path(db, settings.export_dir)))


@router.put("/export-path", response_model=ExportPathSchema)
def put_export_path(payload: ExportPathSchema, db: sqlite3.Connection = Depends(get_db)) -> ExportPathSchema:
    """Directory must already exist."""
    try:
        saved = settings_store.set_export_path(db, payload.path)
    except SettingsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ExportPathSchema(path=str(saved))
