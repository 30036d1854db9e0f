"""Tests for the stage registry and plan validation."""

import pytest

from shapesight.engine.context import AnalysisContext
from shapesight.engine.registry import Layer, StageCall, StageRegistry, StageSpec
from shapesight.errors import PipelineError, UnknownStage


def _noop(ctx: AnalysisContext, params: dict) -> None:
    pass


def _registry() -> StageRegistry:
    reg = StageRegistry()
    reg.register(StageSpec(id="label", layer=Layer.LABELING, fn=_noop))
    reg.register(StageSpec(id="moments", layer=Layer.MEASUREMENT, fn=_noop, requires=["label"]))
    reg.register(StageSpec(id="threshold", layer=Layer.PREPROCESS, fn=_noop))
    return reg


def test_register_and_get():
    reg = StageRegistry()
    spec = StageSpec(id="threshold", layer=Layer.PREPROCESS, fn=_noop)
    reg.register(spec)
    assert reg.get("threshold") is spec
    assert "threshold" in reg
    assert reg.count == 1


def test_duplicate_id_rejected():
    reg = _registry()
    with pytest.raises(ValueError):
        reg.register(StageSpec(id="label", layer=Layer.LABELING, fn=_noop))


def test_unknown_stage():
    with pytest.raises(UnknownStage) as exc:
        _registry().get("sharpen")
    assert isinstance(exc.value, KeyError)
    assert str(exc.value) == "Unknown stage: sharpen"


def test_get_layer_and_all():
    reg = _registry()
    assert [s.id for s in reg.get_layer(Layer.MEASUREMENT)] == ["moments"]
    assert [s.id for s in reg.all()] == ["threshold", "label", "moments"]


def test_validate_plan_keeps_order():
    reg = _registry()
    plan = [StageCall("threshold"), StageCall("label"), StageCall("moments")]
    assert [s.id for s in reg.validate_plan(plan)] == ["threshold", "label", "moments"]


def test_validate_plan_requires_earlier_stage():
    reg = _registry()
    with pytest.raises(PipelineError, match="requires label"):
        reg.validate_plan([StageCall("moments"), StageCall("label")])


def test_validate_plan_unknown_stage():
    with pytest.raises(UnknownStage):
        _registry().validate_plan([StageCall("label"), StageCall("sharpen")])


def test_stage_call_from_dict():
    assert StageCall.from_dict("label") == StageCall("label")
    call = StageCall.from_dict({"id": "threshold", "params": {"t": 50}})
    assert call.params == {"t": 50}
    assert call.to_dict() == {"id": "threshold", "params": {"t": 50}}
    assert StageCall.from_dict({"id": "label", "params": None}).params == {}
    with pytest.raises(PipelineError):
        StageCall.from_dict({"params": {}})
