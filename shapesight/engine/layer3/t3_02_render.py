"""render — Colour the label grid for display.

Background stays black; the n-th label in scan order gets the n-th palette
colour.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.labeling import LabelPalette, render_labels


@stage(
    id="render",
    layer=Layer.CLASSIFICATION,
    requires=["label"],
    description="Render labels as an RGB image",
)
def render_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    cfg = ctx.config
    palette = LabelPalette(
        base=int(params.get("palette_base", cfg.palette_base)),
        step=int(params.get("palette_step", cfg.palette_step)),
    )
    ctx.rendered = render_labels(ctx.require_labels(), palette, cfg.background)
