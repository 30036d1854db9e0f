"""API request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StageCallModel(BaseModel):
    id: str = Field(..., description="Stage id, e.g. 'threshold' or 'label'")
    params: dict[str, Any] = Field(default_factory=dict, description="Stage parameters")


class AnalyzeRequest(BaseModel):
    grid: list[list[int]] = Field(..., description="Rows of integer samples, top row first")
    plan: list[StageCallModel] | None = Field(
        default=None,
        description="Ordered stages to run; defaults to label → … → classify",
    )
    fail_fast: bool = Field(
        default=True,
        description="Stop at the first failing stage instead of recording it and continuing",
    )
