"""Pydantic schemas for the vegetation API (jobs, progress, preview, defaults)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class VegetationParamsSchema(BaseModel):
    """Generation parameters. density is the minimum distance between points."""

    model_config = ConfigDict(extra="forbid")

    vegetation_type: int = Field(1, ge=1)
    density: float | None = Field(None, gt=0)
    variation: float | None = Field(None, ge=0)
    type_value: int | None = None
    strict_variation: bool | None = None
    seed: int | None = None


class JobCreateSchema(BaseModel):
    """POST body: start a batch over a CSV file on the server's filesystem."""

    model_config = ConfigDict(extra="forbid")

    csv_path: str = Field(..., min_length=1)
    params: VegetationParamsSchema = Field(default_factory=VegetationParamsSchema)


class JobAcceptedSchema(BaseModel):
    csv_path: str
    output_path: str
    total_rows: int


class ProgressSchema(BaseModel):
    """Current progress snapshot. percentage is 0-100."""

    current_row: int
    total_rows: int
    created_items: int
    percentage: float
    elapsed_seconds: float | None
    estimated_remaining_seconds: float | None
    is_finished: bool
    errors: list[str]


class JobSummarySchema(BaseModel):
    csv_path: str
    output_path: str | None
    rows_processed: int
    total_rows: int
    points_created: int
    errors: list[str]
    elapsed_seconds: float | None
    finished_at: str


class PreviewRequestSchema(BaseModel):
    """POST body: preview either inline CSV text or a CSV file path (exactly one)."""

    model_config = ConfigDict(extra="forbid")

    csv_text: str | None = None
    csv_path: str | None = None
    params: VegetationParamsSchema = Field(default_factory=VegetationParamsSchema)

    @model_validator(mode="after")
    def exactly_one_source(self) -> "PreviewRequestSchema":
        has_text = self.csv_text is not None
        has_path = self.csv_path is not None
        if has_text and has_path:
            raise ValueError("Provide only one: csv_text or csv_path")
        if not has_text and not has_path:
            raise ValueError("Provide either csv_text or csv_path")
        return self


class PointSchema(BaseModel):
    x: float
    y: float


class PreviewSchema(BaseModel):
    row_index: int
    exterior: list[PointSchema]
    holes: list[list[PointSchema]]
    points: list[PointSchema]
    points_count: int


class VegetationDefaultsSchema(BaseModel):
    vegetation_type: int
    name: str
    density: float
    variation: float
    type_value: int
