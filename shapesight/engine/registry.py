"""Stage registry — every pipeline stage is a standalone function registered via decorator.

Usage:
    @stage(id="circularity", layer=Layer.MEASUREMENT, requires=["chain_code", "moments"])
    def circularity(ctx: AnalysisContext, params: dict) -> None:
        for region in ctx.regions.values():
            region.features["circularity"] = ...

Adding a new stage = creating one module with the decorator. Plans refer to
stages by id.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from shapesight.errors import PipelineError, UnknownStage

if TYPE_CHECKING:
    from shapesight.engine.context import AnalysisContext

logger = logging.getLogger(__name__)

StageFn = Callable[["AnalysisContext", dict[str, Any]], None]


class Layer(enum.IntEnum):
    PREPROCESS = 0
    LABELING = 1
    MEASUREMENT = 2
    CLASSIFICATION = 3


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: StageFn
    requires: list[str] = field(default_factory=list)
    description: str = ""


@dataclass(frozen=True)
class StageCall:
    """One named stage invocation in a plan."""

    id: str
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | str) -> StageCall:
        if isinstance(data, str):
            return cls(id=data)
        if "id" not in data:
            raise PipelineError(f"Stage call without an id: {data!r}")
        return cls(id=data["id"], params=dict(data.get("params") or {}))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "params": dict(self.params)}


Plan = list[StageCall]


class StageRegistry:
    """Registry of named stages."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        try:
            return self._stages[stage_id]
        except KeyError:
            raise UnknownStage(f"Unknown stage: {stage_id}") from None

    def __contains__(self, stage_id: str) -> bool:
        return stage_id in self._stages

    def get_layer(self, layer: Layer) -> list[StageSpec]:
        specs = [s for s in self._stages.values() if s.layer == layer]
        return sorted(specs, key=lambda s: s.id)

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: (s.layer, s.id))

    def validate_plan(self, plan: Sequence[StageCall]) -> list[StageSpec]:
        """Resolve every call and check that each stage's requirements ran earlier.

        Returns the specs in plan order. The plan is never reordered.
        """
        seen: set[str] = set()
        specs: list[StageSpec] = []
        for position, call in enumerate(plan):
            spec = self.get(call.id)
            missing = [dep for dep in spec.requires if dep not in seen]
            if missing:
                raise PipelineError(
                    f"Stage '{call.id}' at position {position} requires "
                    f"{', '.join(missing)} earlier in the plan"
                )
            seen.add(call.id)
            specs.append(spec)
        return specs

    @property
    def count(self) -> int:
        return len(self._stages)


# Module-level singleton
_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    requires: list[str] | None = None,
    description: str = "",
):
    """Decorator to register a stage function."""

    def decorator(fn: StageFn):
        spec = StageSpec(
            id=id,
            layer=layer,
            fn=fn,
            requires=requires or [],
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
