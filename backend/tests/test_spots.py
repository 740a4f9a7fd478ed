"""Tests for spot normalization from raw OSM / Google payloads."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from geo import haversine
from models import Center, Spot
from spots import (
    classify_google_types,
    classify_osm_tags,
    dedupe_spots,
    filter_rated_spots,
    mock_spots,
    parse_osm_elements,
    spot_from_google_place,
    spot_from_osm_element,
)


@pytest.mark.parametrize("tags,expected", [
    ({"amenity": "cafe"}, "gourmet"),
    ({"shop": "bakery"}, "gourmet"),
    ({"amenity": "restaurant", "historic": "building"}, "gourmet"),
    ({"historic": "castle"}, "history"),
    ({"religion": "shinto"}, "history"),
    ({"leisure": "garden"}, "nature"),
    ({"natural": "water"}, "nature"),
    ({"tourism": "museum"}, "art"),
    ({"amenity": "arts_centre"}, "art"),
    ({"tourism": "viewpoint"}, "tourism"),
    ({"shop": "gift"}, "other"),
    ({}, "other"),
])
def test_classify_osm_tags(tags, expected):
    assert classify_osm_tags(tags) == expected


@pytest.mark.parametrize("types,expected", [
    (["park", "point_of_interest"], "nature"),
    (["museum"], "art"),
    (["place_of_worship", "tourist_attraction"], "history"),
    (["cafe", "food"], "gourmet"),
    (["tourist_attraction"], "tourism"),
    (["store"], "other"),
    (None, "other"),
])
def test_classify_google_types(types, expected):
    assert classify_google_types(types) == expected


def test_osm_node():
    el = {"type": "node", "id": 42, "lat": 35.0, "lon": 135.7,
          "tags": {"name": "Gion Shrine", "name:ja": "祇園社", "religion": "shinto"}}
    spot = spot_from_osm_element(el)
    assert spot.id == "node/42"
    assert spot.name == "祇園社"
    assert spot.category == "history"
    assert spot.tags["religion"] == "shinto"


def test_osm_way_uses_center():
    el = {"type": "way", "id": 7, "center": {"lat": 35.01, "lon": 135.71},
          "tags": {"name": "Maruyama Park", "leisure": "park"}}
    spot = spot_from_osm_element(el)
    assert (spot.lat, spot.lon) == (35.01, 135.71)
    assert spot.category == "nature"


def test_osm_skips_unnamed_and_unlocated():
    assert spot_from_osm_element({"id": 1, "lat": 35.0, "lon": 135.7, "tags": {"amenity": "cafe"}}) is None
    assert spot_from_osm_element({"id": 2, "tags": {"name": "Nowhere"}}) is None


def test_parse_osm_elements_filters_and_dedupes():
    elements = [
        {"id": 1, "lat": 35.0, "lon": 135.7, "tags": {"name": "A", "amenity": "cafe"}},
        {"id": 2, "tags": {"name": "B"}},
        {"id": 1, "lat": 35.0, "lon": 135.7, "tags": {"name": "A2", "amenity": "cafe"}},
    ]
    spots = parse_osm_elements(elements)
    assert [s.name for s in spots] == ["A2"]


def test_parse_osm_keeps_node_and_way_with_same_id():
    elements = [
        {"type": "node", "id": 5, "lat": 35.0, "lon": 135.7, "tags": {"name": "Gate", "historic": "gate"}},
        {"type": "way", "id": 5, "center": {"lat": 35.01, "lon": 135.71},
         "tags": {"name": "Garden", "leisure": "garden"}},
    ]
    spots = parse_osm_elements(elements)
    assert [s.id for s in spots] == ["node/5", "way/5"]
    assert [s.name for s in spots] == ["Gate", "Garden"]


def test_filter_rated_spots():
    spots = [
        Spot(id="hi", rating=4.2),
        Spot(id="edge", rating=3.5),
        Spot(id="low", rating=3.4),
        Spot(id="none"),
    ]
    assert [s.id for s in filter_rated_spots(spots)] == ["hi", "edge"]
    assert [s.id for s in filter_rated_spots(spots, min_rating=4.0)] == ["hi"]


def test_google_place():
    place = {
        "place_id": "abc",
        "name": "Kiyomizu",
        "geometry": {"location": {"lat": 34.99, "lng": 135.78}},
        "types": ["place_of_worship", "point_of_interest"],
        "rating": 4.6,
        "user_ratings_total": 30000,
        "vicinity": "Higashiyama",
        "photos": [{"photo_reference": "ref123"}],
        "opening_hours": {"open_now": True},
    }
    spot = spot_from_google_place(place)
    assert spot.id == "abc"
    assert spot.lon == 135.78
    assert spot.category == "history"
    assert spot.rating == 4.6
    assert spot.tags["photo"] == "ref123"
    assert spot.tags["description"] == "Higashiyama"
    assert spot.tags["opening_hours"] is not None


def test_google_place_defaults():
    spot = spot_from_google_place({"place_id": "x", "name": "Bare"})
    assert spot.user_ratings_total == 0
    assert spot.tags["photo"] is None
    assert not spot.routable


def test_unknown_category_coerced_to_other():
    assert Spot(id=1, category="nightlife").category == "other"


def test_dedupe_keeps_last():
    spots = [Spot(id=1, name="a"), Spot(id=2, name="b"), Spot(id=1, name="c")]
    assert [s.name for s in dedupe_spots(spots)] == ["c", "b"]


def test_mock_spots_around_center():
    center = Center(lat=35.0037, lon=135.7788)
    spots = mock_spots(center)
    assert len(spots) == 20
    assert len({s.id for s in spots}) == 20
    assert all(haversine(center.lat, center.lon, s.lat, s.lon) < 1000 for s in spots)
