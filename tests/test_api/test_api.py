"""Tests for API endpoints."""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from shapesight.api import analyze as analyze_api
from shapesight.main import app
from tests.conftest import TWO_BLOCKS_ROWS


client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["stages_registered"] == 17


def test_stages_listing():
    response = client.get("/api/stages")
    assert response.status_code == 200
    stages = {s["id"]: s for s in response.json()}
    assert stages["classify"]["requires"] == ["circularity", "rectangularity"]
    assert stages["label"]["layer"] == "labeling"


def test_analyze_two_blocks():
    response = client.post("/api/analyze", json={"grid": TWO_BLOCKS_ROWS})
    assert response.status_code == 200
    data = response.json()
    assert data["width"] == 8
    assert data["height"] == 6
    assert [r["label"] for r in data["regions"]] == [1, 2]
    assert data["regions"][0]["area"] == 9
    assert data["regions"][0]["bounding_box"] == {"x": 1, "y": 2, "width": 3, "height": 3}
    assert data["regions"][0]["rectangularity"] == 1.0
    assert data["stages_completed"][-1] == "classify"
    assert data["errors"] == {}
    assert data["grid"][2][1] == 1
    assert data["grid"][1][5] == 2


def test_analyze_with_plan():
    rows = [[0, 200, 200, 0], [0, 200, 200, 0]]
    plan = [{"id": "threshold", "params": {"t": 127}}, {"id": "label"}, {"id": "moments"}]
    response = client.post("/api/analyze", json={"grid": rows, "plan": plan})
    assert response.status_code == 200
    data = response.json()
    assert data["stages_completed"] == ["threshold", "label", "moments"]
    assert data["regions"][0]["area"] == 4
    assert data["regions"][0]["centroid"] == [1.5, 0.5]
    assert data["classes"] == {}


def test_non_finite_values_are_null():
    rows = [[0, 0, 0], [0, 1, 0], [0, 0, 0]]
    response = client.post("/api/analyze", json={"grid": rows})
    assert response.status_code == 200
    region = response.json()["regions"][0]
    assert region["circularity"] is None
    assert region["orientation"] is None
    assert region["perimeter"] == 0
    assert region["shape_class"] is None


def test_dimension_mismatch_is_422():
    plan = [{"id": "combine", "params": {"other": [[1, 1, 1]]}}]
    response = client.post("/api/analyze", json={"grid": [[1, 0], [0, 1]], "plan": plan})
    assert response.status_code == 422
    assert "do not match" in response.json()["detail"]


def test_mismatch_recorded_without_fail_fast():
    plan = [{"id": "combine", "params": {"other": [[1, 1, 1]]}}, {"id": "label"}]
    response = client.post(
        "/api/analyze",
        json={"grid": [[1, 0], [0, 1]], "plan": plan, "fail_fast": False},
    )
    assert response.status_code == 200
    data = response.json()
    assert list(data["errors"]) == ["combine"]
    assert data["stages_completed"] == ["label"]


def test_unknown_stage_is_422():
    response = client.post("/api/analyze", json={"grid": [[1]], "plan": [{"id": "sharpen"}]})
    assert response.status_code == 422
    assert "sharpen" in response.json()["detail"]


def test_bad_plan_order_is_422():
    response = client.post("/api/analyze", json={"grid": [[1]], "plan": [{"id": "moments"}]})
    assert response.status_code == 422


def test_ragged_grid_is_422():
    response = client.post("/api/analyze", json={"grid": [[1, 0], [1]]})
    assert response.status_code == 422


def test_oversized_grid_is_422():
    response = client.post("/api/analyze", json={"grid": [[0] * 513]})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "call",
    [
        {"id": "threshold", "params": {"t": None}},
        {"id": "threshold_range", "params": {"lo": [1], "hi": 5}},
        {"id": "combine", "params": {"other": 5}},
        {"id": "label", "params": {"max_regions": "many"}},
        {"id": "convolve", "params": {"kernel": "box"}},
    ],
)
def test_bad_stage_params_are_422(call):
    response = client.post("/api/analyze", json={"grid": [[1, 0], [0, 1]], "plan": [call]})
    assert response.status_code == 422
    assert call["id"] in response.json()["detail"]


def test_grayscale_grid_regions_keep_their_area():
    response = client.post("/api/analyze", json={"grid": [[1, 0, 1, 0, 2]]})
    assert response.status_code == 200
    data = response.json()
    assert [r["area"] for r in data["regions"]] == [1, 1]
    assert data["grid"] == [[1, 0, 2, 0, 0]]


def test_pipeline_runs_off_the_event_loop(monkeypatch):
    seen = []
    real_create = analyze_api.create_pipeline

    def spy(config):
        try:
            asyncio.get_running_loop()
            seen.append("event loop")
        except RuntimeError:
            seen.append("worker")
        return real_create(config)

    monkeypatch.setattr(analyze_api, "create_pipeline", spy)
    response = client.post("/api/analyze", json={"grid": TWO_BLOCKS_ROWS})
    assert response.status_code == 200
    assert seen == ["worker"]
