"""
Unit tests for the walking time estimator
"""

import math

import pytest
from transfer_confidence.models import GeoPoint, Stop, TransferEstimate, WalkingSpeed
from transfer_confidence.services.geo import (
    EARTH_RADIUS_METERS,
    PLATFORM_BUFFER_SECONDS,
    WALKING_SPEEDS,
    calculate_distance,
    calculate_walking_time,
    estimate_transfer,
    round_half_up,
)

PARK_STREET = Stop(id="place-pktrm", name="Park Street", latitude=42.35639, longitude=-71.0624)
DOWNTOWN_CROSSING = Stop(id="place-dwnxg", name="Downtown Crossing", latitude=42.355518, longitude=-71.060225)
SOUTH_STATION = Stop(id="place-sstat", name="South Station", latitude=42.352271, longitude=-71.055242)


def point_north_of(origin: GeoPoint, meters: float) -> GeoPoint:
    """A point due north of origin at the given great-circle distance."""
    return GeoPoint(
        latitude=origin.latitude + math.degrees(meters / EARTH_RADIUS_METERS),
        longitude=origin.longitude,
    )


class TestCalculateDistance:
    """Test haversine distance"""

    def test_coincident_points_are_zero(self):
        """Same point should be 0m apart"""
        assert calculate_distance(PARK_STREET, PARK_STREET) == 0

    def test_symmetric(self):
        """Distance should not depend on direction"""
        assert calculate_distance(PARK_STREET, SOUTH_STATION) == calculate_distance(SOUTH_STATION, PARK_STREET)

    def test_one_degree_of_longitude_at_equator(self):
        """One degree at the equator is ~111.19km"""
        distance = calculate_distance(GeoPoint(latitude=0, longitude=0), GeoPoint(latitude=0, longitude=1))
        assert distance == pytest.approx(111_195, abs=1)

    def test_known_meridian_distance(self):
        """A point 500m due north should measure 500m"""
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        assert calculate_distance(origin, point_north_of(origin, 500)) == pytest.approx(500, abs=1e-6)

    def test_monotonic_in_separation(self):
        """Farther points should measure farther"""
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        distances = [calculate_distance(origin, point_north_of(origin, m)) for m in (10, 100, 1000, 10_000)]
        assert distances == sorted(distances)

    @pytest.mark.parametrize("a, b", [
        ((69.51232454868148, 86.5812282599507), (-69.51232454868148, -93.4187717400493)),
        ((-85.74577602624232, -40.83944228587086), (85.74577602624232, 139.16055771412914)),
        ((0.0, 0.0), (0.0, 180.0)),
        ((90.0, 0.0), (-90.0, 0.0)),
    ])
    def test_antipodal_points(self, a, b):
        """Opposite sides of the Earth are half a circumference apart"""
        distance = calculate_distance(
            GeoPoint(latitude=a[0], longitude=a[1]), GeoPoint(latitude=b[0], longitude=b[1])
        )
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_METERS, rel=1e-6)

    def test_real_stations(self):
        """Park Street to Downtown Crossing is a short walk (~200m)"""
        assert 150 < calculate_distance(PARK_STREET, DOWNTOWN_CROSSING) < 250


class TestCalculateWalkingTime:
    """Test walking time estimates"""

    def test_500m_at_normal_speed(self):
        """500m at 1.2 m/s: ceil(416.67) + 30 = 447s"""
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        assert calculate_walking_time(origin, point_north_of(origin, 500), WalkingSpeed.NORMAL) == 447

    def test_defaults_to_normal_speed(self):
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        assert calculate_walking_time(origin, point_north_of(origin, 500)) == 447

    def test_same_stop_is_platform_buffer(self):
        """Zero distance still costs the platform buffer"""
        for speed in WalkingSpeed:
            assert calculate_walking_time(PARK_STREET, PARK_STREET, speed) == PLATFORM_BUFFER_SECONDS

    def test_never_below_platform_buffer(self):
        for speed in WalkingSpeed:
            assert calculate_walking_time(PARK_STREET, SOUTH_STATION, speed) >= 30

    def test_slower_speed_takes_longer(self):
        """slow > normal > fast for the same walk"""
        slow = calculate_walking_time(PARK_STREET, SOUTH_STATION, WalkingSpeed.SLOW)
        normal = calculate_walking_time(PARK_STREET, SOUTH_STATION, WalkingSpeed.NORMAL)
        fast = calculate_walking_time(PARK_STREET, SOUTH_STATION, WalkingSpeed.FAST)
        assert slow > normal > fast

    def test_non_decreasing_in_distance(self):
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        times = [
            calculate_walking_time(origin, point_north_of(origin, m), WalkingSpeed.FAST)
            for m in (0, 1, 50, 51, 400, 2000)
        ]
        assert times == sorted(times)

    def test_rounds_up(self):
        """A 1m walk should still cost a full second"""
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        assert calculate_walking_time(origin, point_north_of(origin, 1), WalkingSpeed.FAST) == 31

    def test_returns_int(self):
        assert isinstance(calculate_walking_time(PARK_STREET, SOUTH_STATION), int)

    def test_speed_table(self):
        assert WALKING_SPEEDS == {
            WalkingSpeed.SLOW: 0.8,
            WalkingSpeed.NORMAL: 1.2,
            WalkingSpeed.FAST: 1.6,
        }


class TestEstimateTransfer:
    """Test combined distance and time estimate"""

    def test_matches_individual_calculations(self):
        estimate = estimate_transfer(PARK_STREET, SOUTH_STATION, WalkingSpeed.SLOW)
        assert estimate.walking_time_seconds == calculate_walking_time(PARK_STREET, SOUTH_STATION, WalkingSpeed.SLOW)
        assert estimate.walking_distance_meters == round_half_up(calculate_distance(PARK_STREET, SOUTH_STATION))

    def test_distance_is_whole_meters(self):
        origin = GeoPoint(latitude=42.0, longitude=-71.0)
        estimate = estimate_transfer(origin, point_north_of(origin, 500))
        assert estimate.walking_distance_meters == 500
        assert estimate.walking_time_seconds == 447

    def test_half_meter_rounds_up(self):
        """x.5m rounds up, unlike the builtin round()"""
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2
        assert round(2.5) == 2

    def test_estimate_rejects_time_below_platform_buffer(self):
        with pytest.raises(ValueError):
            TransferEstimate(walking_distance_meters=0, walking_time_seconds=29)
