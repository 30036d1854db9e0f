"""chain_code — 4-direction boundary chain per region.

Directions: 0 = E, 1 = N, 2 = W, 3 = S. The walk starts at the region's
first pixel in scan order and its length is the region's perimeter.
A single isolated pixel has an empty chain.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.chain_code import perimeter, trace_boundary


@stage(
    id="chain_code",
    layer=Layer.MEASUREMENT,
    requires=["label"],
    description="Trace each region's boundary as a chain code",
)
def chain_code_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    label_grid = ctx.require_labels()
    for region in ctx.regions.values():
        region.chain_code = trace_boundary(label_grid, region.label, region.start)
        region.features["perimeter"] = perimeter(region.chain_code)
