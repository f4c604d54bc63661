"""Pydantic schemas for the settings API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class VegetationProfileSchema(BaseModel):
    vegetation_type: int
    density: float
    variation: float
    type_value: int


class VegetationProfileUpdateSchema(BaseModel):
    """PUT body for a user override; vegetation_type comes from the path."""

    model_config = ConfigDict(extra="forbid")

    density: float = Field(..., gt=0)
    variation: float = Field(0.0, ge=0)
    type_value: int


class VegetationTypesSchema(BaseModel):
    items: list[int]


class UserParamsStatusSchema(BaseModel):
    vegetation_type: int
    exists: bool


class ResetResultSchema(BaseModel):
    removed: int


class ExportPathSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., min_length=1)
