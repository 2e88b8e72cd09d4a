"""
Geofence eligibility.

Decides whether a customer is close enough to the restaurant to place an
in-venue order. Pure functions: the only outside input is the configured
restaurant zone, read when no explicit zone is passed.

Usage:
    from rewardman.geo import Coordinate, is_eligible

    is_eligible(Coordinate(34.0522, -118.2437))      # configured zone
    is_eligible((34.06, -118.25), zone=my_zone)
"""

import math
from dataclasses import dataclass

from rewardman.exceptions import InvalidCoordinate, RewardmanError

EARTH_RADIUS_METERS = 6_371_000


@dataclass(frozen=True)
class Coordinate:
    """WGS-84 latitude/longitude pair in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        lat = _as_degrees(self.latitude, "latitude")
        lon = _as_degrees(self.longitude, "longitude")
        if abs(lat) > 90:
            raise InvalidCoordinate(latitude=self.latitude, reason="latitude out of range")
        if abs(lon) > 180:
            raise InvalidCoordinate(longitude=self.longitude, reason="longitude out of range")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)


@dataclass(frozen=True)
class GeofenceZone:
    """Circular zone around ``center``."""

    center: Coordinate
    radius_meters: int

    def __post_init__(self):
        radius = self.radius_meters
        if isinstance(radius, bool) or not isinstance(radius, int) or radius <= 0:
            raise RewardmanError("INVALID_ZONE", radius_meters=radius)


def _as_degrees(value, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinate(**{name: value, "reason": "not a number"})
    try:
        degrees = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinate(**{name: value, "reason": "not a number"})
    if not math.isfinite(degrees):
        raise InvalidCoordinate(**{name: value, "reason": "not finite"})
    return degrees


def coordinate(value) -> Coordinate:
    """Coerce a Coordinate or a (latitude, longitude) pair."""
    if isinstance(value, Coordinate):
        return value
    try:
        lat, lon = value
    except (TypeError, ValueError):
        raise InvalidCoordinate(value=repr(value), reason="expected (latitude, longitude)")
    return Coordinate(lat, lon)


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance (Haversine) in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push h just outside [0, 1]
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def restaurant_zone() -> GeofenceZone:
    """Zone built from REWARDMAN settings."""
    from rewardman.conf import rewardman_settings

    return GeofenceZone(
        center=Coordinate(
            rewardman_settings.ZONE_LATITUDE,
            rewardman_settings.ZONE_LONGITUDE,
        ),
        radius_meters=rewardman_settings.GEOFENCE_RADIUS_METERS,
    )


def is_eligible(user_coordinate, zone: GeofenceZone | None = None) -> bool:
    """
    True when the user is within the zone radius (inclusive).

    Args:
        user_coordinate: Coordinate or (latitude, longitude)
        zone: Zone to check against; defaults to the restaurant zone

    Raises:
        InvalidCoordinate: If the coordinate is malformed or out of range
    """
    point = coordinate(user_coordinate)
    zone = zone or restaurant_zone()
    return distance_meters(point, zone.center) <= zone.radius_meters
