"""combine — Elementwise two-grid operator.

The second operand is ``"source"`` (the grid handed to the pipeline), a
PixelGrid, or a list of rows. Mismatched dimensions raise DimensionMismatch.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.errors import StageParameterError
from shapesight.utils.grid import PixelGrid
from shapesight.utils.pointwise import combine


def _operand(ctx: AnalysisContext, other: Any) -> PixelGrid:
    if isinstance(other, PixelGrid):
        return other
    if other == "source":
        return ctx.source
    if not isinstance(other, list):
        raise StageParameterError(
            f"combine: 'other' must be \"source\" or a list of rows, not {type(other).__name__}"
        )
    return PixelGrid.from_rows(other)


@stage(
    id="combine",
    layer=Layer.PREPROCESS,
    description="Combine the grid with a second grid (add, subtract, min, max, and, or, xor)",
)
def combine_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    other = _operand(ctx, params.get("other", "source"))
    ctx.grid = combine(ctx.grid, other, params.get("op", "add"))
