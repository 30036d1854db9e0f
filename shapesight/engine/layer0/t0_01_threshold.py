"""threshold — Binary threshold with an exclusive lower bound.

sample > t → true_value, else false_value.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.pointwise import threshold

# Mid-grey split for 8-bit samples.
_DEFAULT_T = 127


@stage(
    id="threshold",
    layer=Layer.PREPROCESS,
    description="Threshold the grid (sample > t)",
)
def threshold_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = threshold(
        ctx.grid,
        int(params.get("t", _DEFAULT_T)),
        int(params.get("true_value", 1)),
        int(params.get("false_value", 0)),
    )
