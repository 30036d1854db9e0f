"""rectangularity — area / bounding-box area.

Omitted for regions without a bounding box.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.shape import rectangularity


@stage(
    id="rectangularity",
    layer=Layer.MEASUREMENT,
    requires=["bounding_box"],
    description="Fill ratio of each region's bounding box",
)
def rectangularity_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    for region in ctx.regions.values():
        f = region.features
        value = rectangularity(f["area"], f.get("bounding_box"))
        if value is None:
            f.pop("rectangularity", None)
        else:
            f["rectangularity"] = value
