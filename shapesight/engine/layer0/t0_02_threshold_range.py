"""threshold_range — Band threshold, both bounds exclusive."""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.pointwise import threshold_range


@stage(
    id="threshold_range",
    layer=Layer.PREPROCESS,
    description="Threshold the grid to a band (lo < sample < hi)",
)
def threshold_range_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = threshold_range(
        ctx.grid,
        int(params.get("lo", 0)),
        int(params.get("hi", 255)),
        int(params.get("true_value", 1)),
        int(params.get("false_value", 0)),
    )
