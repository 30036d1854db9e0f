"""open — Erode then dilate with the same element."""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.morphology import morphological_open


@stage(
    id="open",
    layer=Layer.PREPROCESS,
    description="Morphological open (erode then dilate)",
)
def open_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = morphological_open(ctx.grid, params.get("element", "cross3"))
