"""Tests for FastAPI endpoints."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

import config
from geo import offset_point
from main import app

client = TestClient(app)

CENTER = {"lat": 35.0, "lon": 135.7}


def _spot_payload(i, category, dx, dy):
    lat, lon = offset_point(CENTER["lat"], CENTER["lon"], dx, dy)
    return {"id": i, "name": f"Spot {i}", "lat": lat, "lon": lon, "category": category,
            "tags": {"photo": None}, "user_ratings_total": 300}


def _pool(n=12):
    cats = ["history", "art", "nature", "gourmet", "shopping", "tourism"]
    return [_spot_payload(i, cats[i % len(cats)], 40 * (i % 4), 50 * (i // 4)) for i in range(n)]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_config():
    resp = client.get("/config")
    assert resp.status_code == 200
    data = resp.json()
    assert data["max_spots_per_course"] == 8
    assert data["walk_speed_m_per_min"] == 80
    assert data["themes_per_batch"] == 5


def test_themes():
    resp = client.get("/themes")
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] >= 15
    ids = {t["id"] for t in data["themes"]}
    assert {"nature", "gourmet", "hidden"} <= ids


def test_create_courses():
    body = {"center": CENTER, "spots": _pool(), "duration": 180, "seed": 7}
    resp = client.post("/courses", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == len(data["courses"]) >= 1
    for course in data["courses"]:
        assert 1 <= len(course["spots"]) <= 8
        assert course["total_time"] <= 180 * config.OVERRUN_ALLOWANCE + 0.05
        # spot fields are carried through for display
        assert all("name" in s and "tags" in s for s in course["spots"])


def test_create_courses_seed_is_reproducible():
    body = {"center": CENTER, "spots": _pool(), "duration": 120, "seed": 3}
    first = client.post("/courses", json=body).json()
    second = client.post("/courses", json=body).json()
    assert first == second


def test_too_few_usable_spots():
    spots = _pool(4) + [{"id": "ghost", "name": "Ghost", "category": "nature"}]
    resp = client.post("/courses", json={"center": CENTER, "spots": spots, "duration": 180})
    assert resp.status_code == 400


def test_no_feasible_course():
    resp = client.post("/courses", json={"center": CENTER, "spots": _pool(), "duration": 0})
    assert resp.status_code == 409
    assert resp.json()["detail"].startswith("No feasible course")


def test_negative_duration_rejected():
    resp = client.post("/courses", json={"center": CENTER, "spots": _pool(), "duration": -5})
    assert resp.status_code == 422


def test_demo_courses():
    resp = client.get("/courses/demo?lat=35.0037&lon=135.7788&duration=180&seed=1")
    assert resp.status_code == 200
    assert resp.json()["count"] >= 1
