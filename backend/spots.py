"""Spot normalization for raw OpenStreetMap (Overpass) and Google Places payloads.

Fetching is done by the caller; these helpers only turn the JSON they get
back into `Spot` models with a course category.
"""

import logging
from typing import Any

import config
from geo import offset_point
from models import Center, Spot

logger = logging.getLogger(__name__)


def classify_osm_tags(tags: dict[str, Any]) -> str:
    amenity = tags.get("amenity")
    shop = tags.get("shop")
    tourism = tags.get("tourism")

    if amenity in config.OSM_GOURMET_AMENITIES or shop in config.OSM_GOURMET_SHOPS:
        return "gourmet"
    if tags.get("historic") or tags.get("religion"):
        return "history"
    if tags.get("leisure") in config.OSM_NATURE_LEISURE or tags.get("natural"):
        return "nature"
    if tourism in config.OSM_ART_TOURISM or amenity == "arts_centre":
        return "art"
    if tourism:
        return "tourism"
    return "other"


def classify_google_types(types: list[str] | None) -> str:
    if not types:
        return "other"
    for wanted, category in config.GOOGLE_TYPE_CATEGORIES:
        if any(t in types for t in wanted):
            return category
    return "other"


def spot_from_osm_element(element: dict) -> Spot | None:
    """Build a Spot from an Overpass element (node, or way with `out center`).

    The id is "<type>/<osm id>" since node and way ids are numbered separately.
    Returns None for unnamed elements and elements without coordinates.
    """
    tags = element.get("tags") or {}
    name = tags.get("name:ja") or tags.get("name")
    center = element.get("center") or {}
    lat = element.get("lat", center.get("lat"))
    lon = element.get("lon", center.get("lon"))
    if not name or lat is None or lon is None:
        return None
    return Spot(
        id=f"{element.get('type', 'node')}/{element['id']}",
        name=name,
        lat=lat,
        lon=lon,
        category=classify_osm_tags(tags),
        tags=tags,
    )


def spot_from_google_place(place: dict) -> Spot:
    """Build a Spot from a Places Nearby Search result."""
    location = place.get("geometry", {}).get("location", {})
    types = place.get("types", [])
    photos = place.get("photos") or []
    opening = place.get("opening_hours") or {}
    return Spot(
        id=place.get("place_id", ""),
        name=place.get("name", ""),
        lat=location.get("lat"),
        lon=location.get("lng"),
        category=classify_google_types(types),
        rating=place.get("rating"),
        user_ratings_total=place.get("user_ratings_total") or 0,
        tags={
            "description": place.get("vicinity"),
            "photo": photos[0].get("photo_reference") if photos else None,
            "opening_hours": "営業中" if opening.get("open_now") else None,
            "types": types,
        },
    )


def parse_osm_elements(elements: list[dict]) -> list[Spot]:
    spots = []
    for el in elements:
        spot = spot_from_osm_element(el)
        if spot is not None:
            spots.append(spot)
    skipped = len(elements) - len(spots)
    if skipped:
        logger.debug("Skipped %d OSM elements without name or coordinates", skipped)
    return dedupe_spots(spots)


def dedupe_spots(spots: list[Spot]) -> list[Spot]:
    """Deduplicate by id; the last occurrence wins, first-seen order is kept."""
    unique: dict = {}
    for s in spots:
        unique[s.id] = s
    return list(unique.values())


def filter_rated_spots(spots: list[Spot], min_rating: float = config.GOOGLE_MIN_RATING) -> list[Spot]:
    """Keep spots rated at least `min_rating`; unrated spots are dropped."""
    return [s for s in spots if s.rating is not None and s.rating >= min_rating]


# --- Mock data ---

def mock_spots(center: Center) -> list[Spot]:
    """Realistic demo pool laid out around `center` (dx, dy in meters)."""
    mock_data = [
        ("history", "Yasaka Shrine", 150, 220, 4.5, 12000),
        ("history", "Kennin-ji Temple", -120, 300, 4.6, 8500),
        ("history", "Yasui Konpiragu", 260, -140, 4.3, 3100),
        ("history", "Rokuharamitsu-ji", -300, -250, 4.4, 1400),
        ("art", "Kyoto Museum of Crafts", 420, 180, 4.2, 900),
        ("art", "Gion Corner Gallery", 90, -320, 4.1, 40),
        ("art", "Kahitsukan Museum", -380, 120, 4.3, 650),
        ("nature", "Maruyama Park", 500, 350, 4.4, 15000),
        ("nature", "Shirakawa Canal Walk", -60, 450, 4.6, 5200),
        ("nature", "Kamo Riverbank", -520, 40, 4.5, 7300),
        ("gourmet", "Gion Tea House", 60, 120, 4.2, 2100),
        ("gourmet", "Nishiki Soba", -240, 150, 4.0, 880),
        ("gourmet", "Kissa Retro", 310, -60, 4.1, 35),
        ("gourmet", "Yuba Kitchen", -150, -400, 4.3, 1200),
        ("shopping", "Shijo Arcade", -200, -80, 3.9, 6400),
        ("shopping", "Hanamikoji Crafts", 180, -200, 4.0, 420),
        ("shopping", "Old Town Ceramics", -420, -180, 4.2, 25),
        ("tourism", "Yasaka Pagoda View", 380, -300, 4.7, 22000),
        ("tourism", "Ninenzaka Steps", 450, -120, 4.5, 9800),
        ("other", "Gion Post Office", 20, -40, 3.5, 60),
    ]

    spots = []
    for category, name, dx, dy, rating, reviews in mock_data:
        lat, lon = offset_point(center.lat, center.lon, dx, dy)
        spots.append(Spot(
            id=f"mock_{name.lower().replace(' ', '_')}",
            name=name,
            lat=lat,
            lon=lon,
            category=category,
            rating=rating,
            user_ratings_total=reviews,
            tags={"mock": True},
        ))
    return spots
