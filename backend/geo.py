"""Great-circle geometry used as the walking-distance proxy."""

import math

R = 6_378_137.0  # Earth radius in meters (WGS84)


def offset_point(lat: float, lon: float, dx: float, dy: float) -> tuple[float, float]:
    """Compute new lat/lon by shifting dx meters east and dy meters north."""
    new_lat = lat + (dy / R) * (180.0 / math.pi)
    new_lon = lon + (dx / (R * math.cos(math.radians(lat)))) * (180.0 / math.pi)
    return new_lat, new_lon


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two lat/lon points (haversine formula)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    return 2 * R * math.asin(math.sqrt(a))


def has_coordinate(lat: float | None, lon: float | None) -> bool:
    """True when both values are present and finite."""
    if lat is None or lon is None:
        return False
    return math.isfinite(lat) and math.isfinite(lon)
