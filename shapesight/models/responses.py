"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    stages_registered: int = 0


class StageInfo(BaseModel):
    id: str
    layer: str
    requires: list[str] = Field(default_factory=list)
    description: str = ""


class BoundingBoxModel(BaseModel):
    x: int
    y: int
    width: int
    height: int


class RegionResponse(BaseModel):
    label: int
    area: int
    # Non-finite values (isotropic orientation, single-pixel circularity) are null
    centroid: tuple[float, float]
    perimeter: int
    circularity: float | None = None
    orientation: float | None = None
    bounding_box: BoundingBoxModel | None = None
    rectangularity: float | None = None
    start: tuple[int, int]
    chain_code: list[int] = Field(default_factory=list)
    shape_class: str | None = None


class AnalyzeResponse(BaseModel):
    grid: list[list[int]]
    width: int
    height: int
    regions: list[RegionResponse] = Field(default_factory=list)
    classes: dict[int, str] = Field(default_factory=dict)
    stages_completed: list[str] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)
    processing_time_ms: float = 0.0
