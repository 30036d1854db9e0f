"""map — Per-sample transform.

``fn`` is the name of a vectorised map (invert, complement, identity) or,
from Python, any callable taking one int sample.
"""

from __future__ import annotations

from typing import Any

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, stage
from shapesight.utils.pointwise import NAMED_MAPS, map_samples


@stage(
    id="map",
    layer=Layer.PREPROCESS,
    description="Transform every sample with a named or supplied function",
)
def map_stage(ctx: AnalysisContext, params: dict[str, Any]) -> None:
    fn = params.get("fn", "invert")
    if callable(fn):
        ctx.grid = map_samples(ctx.grid, fn)
        return
    if fn not in NAMED_MAPS:
        raise ValueError(f"Unknown map '{fn}' (known: {', '.join(sorted(NAMED_MAPS))})")
    ctx.grid = map_samples(ctx.grid, NAMED_MAPS[fn], vectorized=True)
