"""Pace and speed formatting for activities."""

import math
from decimal import ROUND_HALF_UP, Decimal

RUN_PLACEHOLDER = "--:--/km"
SPEED_PLACEHOLDER = "--.- km/h"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _format_run_pace(seconds_per_km: float) -> str:
    minutes = math.floor(seconds_per_km / 60)
    seconds = _round_half_up(seconds_per_km - minutes * 60)
    return f"{minutes}:{seconds:02d}/km"


def _format_speed(speed: float) -> str:
    # Ties on the exact binary value round up, e.g. 0.25 -> 0.3
    rounded = Decimal(speed).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rounded} km/h"


def calculate_pace(distance: float, duration: float, activity_type: str) -> str:
    """
    Format pace for an activity with a duration in minutes.
    
    Runs are shown as minutes per km, everything else as km/h.
    """
    if distance == 0:
        return RUN_PLACEHOLDER if activity_type == "run" else SPEED_PLACEHOLDER

    if activity_type == "run":
        return _format_run_pace(duration / distance * 60)

    if duration == 0:
        return SPEED_PLACEHOLDER
    return _format_speed((distance / duration) * 60)


def calculate_pace_from_seconds(distance: float, duration_seconds: float, activity_type: str) -> str:
    """Format pace for an activity with a duration in seconds."""
    if distance == 0:
        return RUN_PLACEHOLDER if activity_type == "run" else SPEED_PLACEHOLDER

    if activity_type == "run":
        return _format_run_pace(duration_seconds / distance)

    if duration_seconds == 0:
        return SPEED_PLACEHOLDER
    return _format_speed(distance / (duration_seconds / 3600))
