"""
Display helpers for transfer results.
"""

from typing import Dict, Tuple

from ..models import ConfidenceBadge, ConfidenceLevel
from .geo import round_half_up

METERS_PER_MILE = 1609.34

BADGES: Dict[ConfidenceLevel, ConfidenceBadge] = {
    ConfidenceLevel.LIKELY: ConfidenceBadge(
        level=ConfidenceLevel.LIKELY, label="Likely", color="green", hex="#22C55E", icon="✓"
    ),
    ConfidenceLevel.RISKY: ConfidenceBadge(
        level=ConfidenceLevel.RISKY, label="Risky", color="amber", hex="#F59E0B", icon="!"
    ),
    ConfidenceLevel.UNLIKELY: ConfidenceBadge(
        level=ConfidenceLevel.UNLIKELY, label="Unlikely", color="red", hex="#EF4444", icon="✗"
    ),
}

# Display order only, safest first
CONFIDENCE_RANKS: Dict[ConfidenceLevel, int] = {
    ConfidenceLevel.LIKELY: 2,
    ConfidenceLevel.RISKY: 1,
    ConfidenceLevel.UNLIKELY: 0,
}


def format_walking_time(seconds: int) -> str:
    """Format a duration as "30 sec" or "2 min"."""
    if seconds < 60:
        return f"{seconds} sec"
    return f"{round_half_up(seconds / 60)} min"


def format_distance(meters: float) -> str:
    """Format a distance as "150m", or in miles ("0.7 mi") from 1000m up."""
    if meters < 1000:
        return f"{round_half_up(meters)}m"
    return f"{meters / METERS_PER_MILE:.1f} mi"


def format_buffer(buffer_seconds: int) -> Tuple[str, str]:
    """Label and value for a buffer, e.g. ("Time short by:", "45 sec")."""
    label = "Buffer time:" if buffer_seconds >= 0 else "Time short by:"
    return label, format_walking_time(abs(buffer_seconds))


def confidence_badge(confidence: ConfidenceLevel) -> ConfidenceBadge:
    return BADGES[confidence]


def confidence_rank(confidence: ConfidenceLevel) -> int:
    return CONFIDENCE_RANKS[confidence]


def format_minutes_until(minutes: int) -> str:
    """Format minutes until arrival: "Now", "5 min", "1 hr 20 min"."""
    if minutes <= 0:
        return "Now"
    elif minutes == 1:
        return "1 min"
    elif minutes < 60:
        return f"{minutes} min"

    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"


def format_countdown(seconds: int) -> str:
    """Format a countdown timer, e.g. "2:30"."""
    if seconds <= 0:
        return "0:00"
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


def format_delay(delay_minutes: int) -> str:
    if delay_minutes == 0:
        return "On time"
    return f"{delay_minutes:+d} min"
