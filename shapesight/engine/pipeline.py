"""Pipeline orchestrator — runs an explicit, ordered plan of named stages."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time
from collections.abc import Callable, Sequence
from typing import Any

from shapesight.engine.config import PipelineConfig
from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Plan, StageCall, StageRegistry, get_registry
from shapesight.errors import PipelineCancelled, ShapeSightError, StageParameterError

logger = logging.getLogger(__name__)

_STAGE_PACKAGES = ("layer0", "layer1", "layer2", "layer3")

PlanLike = Sequence[StageCall | dict[str, Any] | str]


def default_plan() -> Plan:
    """Binary grid in → labels, descriptors and classes out."""
    return [
        StageCall("label"),
        StageCall("chain_code"),
        StageCall("moments"),
        StageCall("circularity"),
        StageCall("bounding_box"),
        StageCall("rectangularity"),
        StageCall("classify"),
    ]


def parse_plan(plan: PlanLike) -> Plan:
    return [c if isinstance(c, StageCall) else StageCall.from_dict(c) for c in plan]


class Pipeline:
    """Runs plans against an AnalysisContext, left to right."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or PipelineConfig()

    def run(
        self,
        ctx: AnalysisContext,
        plan: PlanLike | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> AnalysisContext:
        """Run ``plan`` (default: ``default_plan()``) on ``ctx``.

        The plan is validated up front. A failing stage is recorded in
        ``ctx.errors``; with ``fail_fast`` the exception is re-raised
        (bare TypeError and ValueError as StageParameterError),
        otherwise the remaining stages still run. ``cancel_check`` is polled
        between stages only.
        """
        calls = parse_plan(plan) if plan is not None else default_plan()
        specs = self.registry.validate_plan(calls)
        ctx.config = self.config
        start = time.perf_counter()

        logger.info("Pipeline: %d stages queued (%s)", len(calls), " → ".join(c.id for c in calls))

        for call, spec in zip(calls, specs):
            if cancel_check is not None and cancel_check():
                logger.info("Pipeline cancelled before %s", call.id)
                raise PipelineCancelled(f"Cancelled before stage '{call.id}'")

            t0 = time.perf_counter()
            try:
                spec.fn(ctx, call.params)
            except Exception as e:
                failure = _stage_failure(call.id, e)
                ctx.errors[call.id] = str(failure)
                logger.warning("  %s FAILED: %s", call.id, failure)
                if self.config.fail_fast:
                    if failure is e:
                        raise
                    raise failure from e
                continue
            ctx.completed_stages.append(call.id)
            elapsed = (time.perf_counter() - t0) * 1000
            logger.debug("  %s completed in %.1fms", call.id, elapsed)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d stages in %.0fms",
            len(ctx.completed_stages),
            len(calls),
            total,
        )
        return ctx


def _stage_failure(stage_id: str, exc: Exception) -> Exception:
    """Bad parameter values surface from int() and numpy as bare TypeError or
    ValueError; report those as a StageParameterError naming the stage."""
    if isinstance(exc, (TypeError, ValueError)) and not isinstance(exc, ShapeSightError):
        return StageParameterError(f"Stage '{stage_id}' rejected its parameters: {exc}")
    return exc


def register_stages() -> None:
    """Import all stage modules so @stage decorators fire."""
    for package_name in _STAGE_PACKAGES:
        package = importlib.import_module(f"shapesight.engine.{package_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"shapesight.engine.{package_name}.{module_name}")


def create_pipeline(config: PipelineConfig | None = None) -> Pipeline:
    """Factory function for a pipeline over the global registry."""
    register_stages()
    return Pipeline(config=config)
