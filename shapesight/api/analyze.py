"""POST /api/analyze — run a stage plan over a grid."""

from __future__ import annotations

import logging
import math
import time

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from shapesight.config import Settings
from shapesight.dependencies import get_settings
from shapesight.engine.config import PipelineConfig
from shapesight.engine.context import AnalysisContext
from shapesight.engine.pipeline import create_pipeline
from shapesight.errors import ShapeSightError
from shapesight.models.requests import AnalyzeRequest
from shapesight.models.responses import AnalyzeResponse, BoundingBoxModel, RegionResponse
from shapesight.utils.grid import PixelGrid, validate_dimensions
from shapesight.utils.shape import ShapeDescriptor

logger = logging.getLogger(__name__)

router = APIRouter()


def _finite(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return float(value)


def _region_response(desc: ShapeDescriptor, shape_class: str | None) -> RegionResponse:
    box = desc.bounding_box
    return RegionResponse(
        label=desc.label,
        area=desc.area,
        centroid=desc.centroid,
        perimeter=desc.perimeter,
        circularity=_finite(desc.circularity),
        orientation=_finite(desc.orientation),
        bounding_box=BoundingBoxModel(x=box.x, y=box.y, width=box.width, height=box.height)
        if box is not None
        else None,
        rectangularity=_finite(desc.rectangularity),
        start=desc.start,
        chain_code=list(desc.chain_code),
        shape_class=shape_class,
    )


def _run_plan(req: AnalyzeRequest, config: PipelineConfig) -> AnalysisContext:
    grid = validate_dimensions(PixelGrid.from_rows(req.grid), config.max_dimension)
    ctx = AnalysisContext(source=grid, config=config)
    plan = [call.model_dump() for call in req.plan] if req.plan is not None else None
    return create_pipeline(config).run(ctx, plan)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    req: AnalyzeRequest,
    settings: Settings = Depends(get_settings),
) -> AnalyzeResponse:
    start = time.perf_counter()
    config = settings.pipeline_config(fail_fast=req.fail_fast)

    try:
        # CPU-bound; runs in the threadpool
        ctx = await run_in_threadpool(_run_plan, req, config)
    except (ShapeSightError, ValueError) as e:
        logger.info("Analyze rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000
    names = {label: shape.name.lower() for label, shape in ctx.classes.items()}
    # Unfinished measurement stages leave regions without these features
    regions = [
        _region_response(desc, names.get(label))
        for label, desc in ctx.descriptors().items()
        if "area" in ctx.regions[label].features
    ]

    return AnalyzeResponse(
        grid=ctx.grid.to_rows(),
        width=ctx.grid.width,
        height=ctx.grid.height,
        regions=regions,
        classes=names,
        stages_completed=list(ctx.completed_stages),
        errors=ctx.errors,
        processing_time_ms=round(elapsed, 1),
    )
