"""circularity — 4π·area / perimeter².

The perimeter is the 4-connected chain length, which overstates the true
boundary length of curved shapes; discs land well below 1.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.shape import circularity


@stage(
    id="circularity",
    layer=Layer.MEASUREMENT,
    requires=["chain_code", "moments"],
    description="Circularity from area and chain perimeter",
)
def circularity_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    for region in ctx.regions.values():
        f = region.features
        f["circularity"] = circularity(f["area"], f["perimeter"])
