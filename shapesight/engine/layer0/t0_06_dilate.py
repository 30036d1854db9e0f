"""dilate — Grayscale dilation.

Each sample becomes the max over the structuring element's "1" cells.
Default element: 3×3 cross.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.morphology import dilate


@stage(
    id="dilate",
    layer=Layer.PREPROCESS,
    description="Dilate with a structuring element",
)
def dilate_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = dilate(ctx.grid, params.get("element", "cross3"))
