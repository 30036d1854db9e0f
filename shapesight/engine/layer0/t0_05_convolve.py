"""convolve — Generic kernel window reduction.

Out-of-grid cells contribute ``out_of_bounds`` verbatim; the window result
is truncated and clamped to a sample.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.convolution import apply_kernel


@stage(
    id="convolve",
    layer=Layer.PREPROCESS,
    description="Apply a kernel (sum, derivative, min or max reduction)",
)
def convolve_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    ctx.grid = apply_kernel(
        ctx.grid,
        params.get("kernel", "square3"),
        params.get("reduce", "sum"),
        out_of_bounds=float(params.get("out_of_bounds", 0.0)),
    )
