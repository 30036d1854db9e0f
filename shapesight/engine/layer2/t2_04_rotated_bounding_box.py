"""bounding_box — Box around the boundary in the principal-axis frame.

Regions whose box cannot be computed (non-finite angle, empty border) get
no "bounding_box" feature at all.
"""

from __future__ import annotations

import logging
from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.chain_code import chain_to_points
from shapesight.utils.shape import box_angle, rotated_bounding_box

logger = logging.getLogger(__name__)


@stage(
    id="bounding_box",
    layer=Layer.MEASUREMENT,
    requires=["chain_code", "moments"],
    description="Rotated bounding box per region",
)
def bounding_box_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    max_dim = int(params.get("max_dimension", ctx.config.max_dimension))
    for region in ctx.regions.values():
        summary = region.features["moment_summary"]
        border = chain_to_points(region.start, region.chain_code)
        box = rotated_bounding_box(border, summary.centroid, box_angle(summary), max_dim)
        if box is None:
            region.features.pop("bounding_box", None)
            logger.debug("Label %d: no bounding box", region.label)
            continue
        region.features["bounding_box"] = box
