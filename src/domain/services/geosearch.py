"""Nearby-seller search over a linear scan of candidate sellers."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from domain.entities.profile import GeoPoint, UserProfile

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class NearbySeller:
    """A seller annotated with its distance from the search origin."""

    seller: UserProfile
    distance_km: float


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance (km) between two points."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h a hair past 1 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def _as_coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def coerce_location(value: Any) -> GeoPoint | None:
    """Turn a stored location into a valid GeoPoint, or None if unusable.

    Accepts a GeoPoint, a mapping with ``latitude``/``longitude`` keys or a
    two-item ``(latitude, longitude)`` sequence.
    """
    if value is None:
        return None
    if isinstance(value, GeoPoint):
        lat, lng = _as_coordinate(value.latitude), _as_coordinate(value.longitude)
    elif isinstance(value, Mapping):
        lat, lng = _as_coordinate(value.get("latitude")), _as_coordinate(value.get("longitude"))
    elif isinstance(value, (tuple, list)) and len(value) == 2:
        lat, lng = _as_coordinate(value[0]), _as_coordinate(value[1])
    else:
        return None

    if lat is None or lng is None:
        return None
    point = GeoPoint(latitude=lat, longitude=lng)
    return point if point.is_valid() else None


def find_nearby_sellers(
    origin: GeoPoint,
    radius_km: float,
    sellers: Iterable[UserProfile],
) -> list[NearbySeller]:
    """Return eligible sellers within ``radius_km`` of ``origin``, nearest first.

    A seller is eligible when approved, active and holding stock. The radius
    test uses the exact distance; the reported distance is rounded to two
    decimals and the result is stably sorted by it, so sellers at the same
    reported distance keep their input order. Sellers without a usable
    location are skipped.

    Raises:
        ValueError: If ``radius_km`` is not positive or ``origin`` is invalid.
    """
    if not radius_km > 0:
        raise ValueError("radius_km must be positive")
    if not origin.is_valid():
        raise ValueError("origin must be a valid coordinate")

    matches: list[NearbySeller] = []
    for seller in sellers:
        if not (seller.approved and seller.active and (seller.cylinders_available or 0) > 0):
            continue
        location = coerce_location(seller.location)
        if location is None:
            continue
        distance = haversine_km(origin, location)
        if distance <= radius_km:
            matches.append(NearbySeller(seller=seller, distance_km=round(distance, 2)))

    matches.sort(key=lambda match: match.distance_km)
    return matches
