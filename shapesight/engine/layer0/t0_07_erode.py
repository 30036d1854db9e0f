"""erode — Grayscale erosion (min over the element's "1" cells)."""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.morphology import erode


@stage(
    id="erode",
    layer=Layer.PREPROCESS,
    description="Erode with a structuring element",
)
def erode_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = erode(ctx.grid, params.get("element", "cross3"))
