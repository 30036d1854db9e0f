"""label — 4-connected component labeling.

A fresh LabelAllocator is built for every run, so label numbering never
carries over between images, and it never issues the background value.
Samples other than the foreground become background. Resets all
per-region state on the context.
"""

from __future__ import annotations

import logging
from typing import Any

from shapesight.engine.context import AnalysisContext, RegionData
from shapesight.engine.registry import Layer, stage
from shapesight.utils.chain_code import first_pixels
from shapesight.utils.labeling import LabelAllocator, label_components

logger = logging.getLogger(__name__)


@stage(
    id="label",
    layer=Layer.LABELING,
    description="Label 4-connected foreground regions",
)
def label_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    cfg = ctx.config
    foreground = int(params.get("foreground", cfg.foreground))
    limit = params.get("max_regions", cfg.max_regions)
    allocator = LabelAllocator(
        limit=int(limit) if limit is not None else None,
        reserved=cfg.background,
    )

    label_grid, count = label_components(
        ctx.grid, foreground=foreground, allocator=allocator, background=cfg.background
    )

    ctx.label_grid = label_grid
    ctx.grid = label_grid
    ctx.label_count = count
    ctx.classes = {}
    ctx.rendered = None
    issued = set(allocator.issued)
    ctx.regions = {
        label: RegionData(label=label, start=start)
        for label, start in first_pixels(label_grid, cfg.background).items()
        if label in issued
    }
    logger.info("Labeled %d region(s)", count)
