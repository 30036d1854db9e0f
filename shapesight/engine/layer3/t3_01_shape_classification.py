"""classify — Range-table shape classification.

Each region is matched against (circularity, rectangularity) ranges; the
first matching row wins. A custom table can be passed as
``params["ranges"]``, otherwise ``config.class_ranges`` is used.
"""

from __future__ import annotations

import logging
from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.classify import classify, parse_ranges

logger = logging.getLogger(__name__)


@stage(
    id="classify",
    layer=Layer.CLASSIFICATION,
    requires=["circularity", "rectangularity"],
    description="Classify regions as circle, triangle or rectangle",
)
def classify_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    table = params.get("ranges")
    ranges = parse_ranges(table) if table is not None else ctx.config.class_ranges

    ctx.classes = {}
    for region in ctx.regions.values():
        f = region.features
        shape = classify(f["circularity"], f.get("rectangularity"), ranges)
        if shape is None:
            f.pop("shape_class", None)
            continue
        f["shape_class"] = shape
        ctx.classes[region.label] = shape

    logger.info("Classified %d of %d region(s)", len(ctx.classes), ctx.num_regions)
