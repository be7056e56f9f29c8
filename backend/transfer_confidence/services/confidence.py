"""
Transfer Confidence Classifier

Rates how likely a rider is to make a connection based on buffer time
(time available minus walking time required):
- likely:   buffer >= 180s
- risky:    60s <= buffer < 180s
- unlikely: buffer < 60s
"""

import logging
from typing import Dict, NamedTuple

from ..models import ConfidenceLevel, Stop, TransferResult, WalkingSpeed
from .geo import estimate_transfer

logger = logging.getLogger(__name__)

# Lower bound (inclusive) of each tier, in seconds
LIKELY_THRESHOLD_SECONDS = 180
RISKY_THRESHOLD_SECONDS = 60

# A rider may still attempt (run for) a connection this many seconds short
FEASIBILITY_TOLERANCE_SECONDS = 30

EXPLANATIONS: Dict[ConfidenceLevel, str] = {
    ConfidenceLevel.LIKELY: "You have plenty of time to make this connection at your walking pace.",
    ConfidenceLevel.RISKY: "This connection is tight. Walk briskly and head straight to the platform.",
    ConfidenceLevel.UNLIKELY: "You will probably miss this connection. Consider waiting for the next vehicle.",
}


class DelaySimulation(NamedTuple):
    confidence: ConfidenceLevel
    new_buffer_seconds: int


def classify(buffer_seconds: int) -> ConfidenceLevel:
    """
    Classify a transfer buffer into a confidence tier.

    Args:
        buffer_seconds: Available time minus walking time (may be negative)

    Returns:
        ConfidenceLevel (LIKELY, RISKY, or UNLIKELY)
    """
    if buffer_seconds >= LIKELY_THRESHOLD_SECONDS:
        return ConfidenceLevel.LIKELY
    elif buffer_seconds >= RISKY_THRESHOLD_SECONDS:
        return ConfidenceLevel.RISKY
    else:
        return ConfidenceLevel.UNLIKELY


def evaluate_transfer(
    from_stop: Stop,
    to_stop: Stop,
    speed: WalkingSpeed,
    available_time_seconds: int
) -> TransferResult:
    """
    Evaluate a walking transfer between two stops.

    Args:
        from_stop: Stop the rider is leaving
        to_stop: Stop where the connecting vehicle departs
        speed: Walking speed preset
        available_time_seconds: Seconds until the connecting vehicle

    Returns:
        TransferResult with timing breakdown and confidence
    """
    estimate = estimate_transfer(from_stop, to_stop, speed)
    buffer_seconds = available_time_seconds - estimate.walking_time_seconds
    confidence = classify(buffer_seconds)

    logger.debug(
        "Transfer %s -> %s: walk=%ss available=%ss buffer=%ss (%s)",
        from_stop.id,
        to_stop.id,
        estimate.walking_time_seconds,
        available_time_seconds,
        buffer_seconds,
        confidence.value,
    )

    return TransferResult(
        from_stop=from_stop,
        to_stop=to_stop,
        walking_time_seconds=estimate.walking_time_seconds,
        walking_distance_meters=estimate.walking_distance_meters,
        buffer_seconds=buffer_seconds,
        confidence=confidence,
    )


def simulate_delay(original_buffer_seconds: int, delay_seconds: int) -> DelaySimulation:
    """Re-classify a buffer as if the rider were delay_seconds late."""
    new_buffer = original_buffer_seconds - delay_seconds
    return DelaySimulation(classify(new_buffer), new_buffer)


def is_feasible(walking_time_seconds: int, available_time_seconds: int) -> bool:
    """
    Whether the transfer is still worth attempting, even if rated unlikely.
    Advisory only; it never hides a risky or unlikely transfer.
    """
    return available_time_seconds - walking_time_seconds >= -FEASIBILITY_TOLERANCE_SECONDS


def explain(confidence: ConfidenceLevel) -> str:
    return EXPLANATIONS[confidence]
