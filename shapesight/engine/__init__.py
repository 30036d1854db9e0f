"""ShapeSight grid analysis engine."""

from shapesight.engine.registry import stage, Layer, StageCall, get_registry
from shapesight.engine.context import AnalysisContext, RegionData
from shapesight.engine.pipeline import Pipeline, create_pipeline, default_plan

__all__ = [
    "stage",
    "Layer",
    "StageCall",
    "get_registry",
    "AnalysisContext",
    "RegionData",
    "Pipeline",
    "create_pipeline",
    "default_plan",
]
