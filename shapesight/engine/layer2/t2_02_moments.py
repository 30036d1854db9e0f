"""moments — Area, centroid, second-order central moments and orientation.

orientation = 0.5·atan(2·μ11 / (μ20 − μ02)); NaN for isotropic regions.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.moments import summarize


@stage(
    id="moments",
    layer=Layer.MEASUREMENT,
    requires=["label"],
    description="Compute area, centroid and principal-axis angle per region",
)
def moments_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    summaries = summarize(ctx.require_labels(), ctx.config.background)
    for label, region in ctx.regions.items():
        m = summaries[label]
        region.features.update(
            moment_summary=m,
            area=m.area,
            centroid=m.centroid,
            mu11=m.mu11,
            mu20=m.mu20,
            mu02=m.mu02,
            orientation=m.angle,
        )
