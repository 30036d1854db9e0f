"""close — Dilate then erode with the same element.

Merges masks whose blobs are split by gaps narrower than the element,
typically before labeling.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.morphology import morphological_close


@stage(
    id="close",
    layer=Layer.PREPROCESS,
    description="Morphological close (dilate then erode)",
)
def close_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = morphological_close(ctx.grid, params.get("element", "diamond5"))
