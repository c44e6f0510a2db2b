"""
Tests for the spine match HTTP routes.

Validates:
1. Full form submission returns a SpineMatchResult
2. Missing inputs return null fields with 200, not an error
3. Point weight sweep ordering and validation
4. Calibration and health endpoints
"""

import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from backend.main import app


BOW = {
    "ibo_velocity": "335",
    "draw_length": "29",
    "draw_weight": "54.5",
    "brace_height": "7.25",
    "axle_to_axle": "34.5",
    "percent_letoff": "70",
}

ARROW = {
    "shaft_length": "28",
    "point_weight": "110",
    "shaft_gpi": "7.4",
    "fletch_quantity": "3",
    "weight_each": "5.9",
    "nock_weight": "7",
    "static_spine": "0.400",
}

STRING = {
    "peep": "10",
    "d_loop": "6",
    "nock_point": "2",
    "release_type": "Post Gate Release",
}


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestSpineMatchRoute:
    """POST /api/spine-match"""

    def test_full_setup(self, client):
        response = client.post("/api/spine-match", json={"bow": BOW, "arrow": ARROW, "string_weights": STRING})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "good"
        assert data["arrow_total_weight"] == pytest.approx(341.9)
        assert 250 < data["calculated_fps"] < 290
        assert data["confidence"] == "medium"
        assert set(data["confidence_intervals"]) == {"spine_required", "spine_dynamic", "match_index"}
        assert isinstance(data["recommendations"], list)

    def test_missing_draw_weight(self, client):
        bow = {**BOW, "draw_weight": ""}
        response = client.post("/api/spine-match", json={"bow": bow, "arrow": ARROW})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] is None
        assert data["spine_required"] is None
        assert data["recommendations"] == []
        assert data["warnings"] == []

    def test_numbers_and_temperature(self, client):
        bow = {**BOW, "draw_weight": 54.5}
        response = client.post(
            "/api/spine-match",
            json={"bow": bow, "arrow": ARROW, "string_weights": STRING, "temperature_f": 95},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["temperature_f"] == 95
        assert any("Hot conditions" in r for r in data["recommendations"])

    def test_missing_body_section(self, client):
        response = client.post("/api/spine-match", json={"bow": BOW})
        assert response.status_code == 422


class TestPointSweepRoute:
    """POST /api/spine-match/point-sweep"""

    def test_sweep(self, client):
        response = client.post("/api/spine-match/point-sweep", json={
            "bow": BOW, "arrow": ARROW, "string_weights": STRING,
            "point_weights": [100, 125, "150"],
        })
        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["point_weight"] for r in results] == [100, 125, "150"]
        indices = [r["result"]["match_index"] for r in results]
        assert indices == sorted(indices)

    def test_empty_sweep(self, client):
        response = client.post("/api/spine-match/point-sweep", json={
            "bow": BOW, "arrow": ARROW, "point_weights": [],
        })
        assert response.status_code == 400


class TestMetaRoutes:
    """Calibration and health."""

    def test_calibration(self, client):
        response = client.get("/api/calibration")
        assert response.status_code == 200
        values = response.json()["values"]
        assert values["k_spine_calibration"] == pytest.approx(0.315)
        assert values["cam_efficiency"]["medium"] == pytest.approx(0.85)

    def test_calibration_from_env(self, monkeypatch):
        monkeypatch.setenv("SPINE_MATCH_TOLERANCE", "0.05")
        with TestClient(app) as c:
            values = c.get("/api/calibration").json()["values"]
        assert values["match_tolerance"] == pytest.approx(0.05)

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.json()["status"] == "healthy"
