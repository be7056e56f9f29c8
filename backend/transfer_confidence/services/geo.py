"""
Walking Time Estimator

Converts two stop coordinates into a walking estimate:
- Great-circle (haversine) distance in meters
- Walking time at one of three fixed speed presets
- Fixed platform overhead for stairs, fare gates and platform navigation
"""

import logging
import math
from typing import Dict

from ..models import GeoPoint, TransferEstimate, WalkingSpeed

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000

# Added to every walk; straight-line distance does not capture stairs or platforms
PLATFORM_BUFFER_SECONDS = 30

# Walking speed presets (meters per second)
WALKING_SPEEDS: Dict[WalkingSpeed, float] = {
    WalkingSpeed.SLOW: 0.8,    # ~1.8 mph
    WalkingSpeed.NORMAL: 1.2,  # ~2.7 mph
    WalkingSpeed.FAST: 1.6,    # ~3.6 mph
}

SPEED_DESCRIPTIONS: Dict[WalkingSpeed, str] = {
    WalkingSpeed.SLOW: "Slow (~1.8 mph)",
    WalkingSpeed.NORMAL: "Normal (~2.7 mph)",
    WalkingSpeed.FAST: "Fast (~3.6 mph)",
}


def calculate_distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Returns:
        Distance in meters
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    # Rounding can push h just past 1 for near-antipodal points
    h = min(1.0, h)
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _walking_seconds(distance_meters: float, speed: WalkingSpeed) -> int:
    return math.ceil(distance_meters / WALKING_SPEEDS[speed]) + PLATFORM_BUFFER_SECONDS


def calculate_walking_time(
    a: GeoPoint,
    b: GeoPoint,
    speed: WalkingSpeed = WalkingSpeed.NORMAL
) -> int:
    """
    Walking time between two points, rounded up to whole seconds,
    plus the fixed platform buffer.

    Args:
        a: Origin point (or stop)
        b: Destination point (or stop)
        speed: Walking speed preset

    Returns:
        Walking time in seconds, never less than PLATFORM_BUFFER_SECONDS
    """
    return _walking_seconds(calculate_distance(a, b), speed)


def round_half_up(value: float) -> int:
    """Round half up (builtin round() rounds half to even)."""
    return int(math.floor(value + 0.5))


def estimate_transfer(
    a: GeoPoint,
    b: GeoPoint,
    speed: WalkingSpeed = WalkingSpeed.NORMAL
) -> TransferEstimate:
    """Distance and walking time for a single walk between two points."""
    distance = calculate_distance(a, b)
    walking_time = _walking_seconds(distance, speed)

    logger.debug(
        "Walk estimate: %.1fm at %s -> %ss", distance, speed.value, walking_time
    )
    return TransferEstimate(
        walking_distance_meters=round_half_up(distance),
        walking_time_seconds=walking_time,
    )
