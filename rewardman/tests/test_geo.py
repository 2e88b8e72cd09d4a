"""Tests for geofence eligibility."""

import math

import pytest

from rewardman.exceptions import InvalidCoordinate, RewardmanError
from rewardman.geo import (
    EARTH_RADIUS_METERS,
    Coordinate,
    GeofenceZone,
    coordinate,
    distance_meters,
    is_eligible,
    restaurant_zone,
)

CENTER = Coordinate(34.0522, -118.2437)


def north_of(point: Coordinate, meters: float) -> Coordinate:
    """Point ``meters`` due north (along a meridian the Haversine distance is exact)."""
    return Coordinate(point.latitude + math.degrees(meters / EARTH_RADIUS_METERS), point.longitude)


class TestCoordinate:
    def test_values_coerced_to_float(self):
        point = Coordinate("34.0522", -118)
        assert point.latitude == 34.0522
        assert point.longitude == -118.0

    @pytest.mark.parametrize(
        "lat,lon",
        [(90.0001, 0), (-91, 0), (0, 180.5), (0, -181)],
    )
    def test_out_of_range_rejected(self, lat, lon):
        with pytest.raises(InvalidCoordinate, match="INVALID_COORDINATE"):
            Coordinate(lat, lon)

    @pytest.mark.parametrize("lat", ["north", None, float("nan"), float("inf"), True])
    def test_non_numeric_rejected(self, lat):
        with pytest.raises(InvalidCoordinate):
            Coordinate(lat, 0)

    def test_poles_and_antimeridian_accepted(self):
        Coordinate(90, 180)
        Coordinate(-90, -180)

    def test_coerce_pair(self):
        assert coordinate((34.0522, -118.2437)) == CENTER
        assert coordinate(CENTER) is CENTER

    def test_coerce_malformed(self):
        with pytest.raises(InvalidCoordinate):
            coordinate("34.0522,-118.2437")


class TestGeofenceZone:
    @pytest.mark.parametrize("radius", [0, -5, 10.5, True])
    def test_radius_must_be_positive_int(self, radius):
        with pytest.raises(RewardmanError, match="INVALID_ZONE"):
            GeofenceZone(CENTER, radius)

    def test_restaurant_zone_from_settings(self, settings):
        settings.REWARDMAN = {
            "ZONE_LATITUDE": 6.5244,
            "ZONE_LONGITUDE": 3.3792,
            "GEOFENCE_RADIUS_METERS": 250,
        }
        zone = restaurant_zone()
        assert zone.center == Coordinate(6.5244, 3.3792)
        assert zone.radius_meters == 250


class TestDistance:
    def test_identical_points_zero(self):
        assert distance_meters(CENTER, CENTER) == 0.0

    def test_one_degree_on_equator(self):
        d = distance_meters(Coordinate(0, 0), Coordinate(0, 1))
        assert d == pytest.approx(EARTH_RADIUS_METERS * math.pi / 180)

    def test_antipodal_points_not_nan(self):
        d = distance_meters(Coordinate(0, 0), Coordinate(0, 180))
        assert not math.isnan(d)
        assert d == pytest.approx(math.pi * EARTH_RADIUS_METERS)

    def test_symmetric(self):
        a = Coordinate(34.0522, -118.2437)
        b = Coordinate(34.1478, -118.1445)
        assert distance_meters(a, b) == pytest.approx(distance_meters(b, a), abs=1e-6)


class TestIsEligible:
    def test_at_restaurant_is_eligible(self):
        assert is_eligible(CENTER)
        assert is_eligible((34.0522, -118.2437))

    def test_ten_km_away_is_not_eligible(self):
        far = north_of(CENTER, 10_000)
        assert distance_meters(CENTER, far) == pytest.approx(10_000, abs=0.01)
        assert not is_eligible(far)

    def test_center_eligible_for_smallest_radius(self):
        assert is_eligible(CENTER, GeofenceZone(CENTER, 1))

    def test_boundary(self):
        zone = GeofenceZone(CENTER, 500)
        assert is_eligible(north_of(CENTER, 499.5), zone)
        assert not is_eligible(north_of(CENTER, 500.5), zone)

    def test_explicit_zone_overrides_settings(self):
        lagos = Coordinate(6.5244, 3.3792)
        assert is_eligible(lagos, GeofenceZone(lagos, 100))
        assert not is_eligible(lagos)

    def test_invalid_coordinate_raises(self):
        with pytest.raises(InvalidCoordinate):
            is_eligible((120, 0))
