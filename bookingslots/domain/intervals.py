"""
Slot granularity policy.

Longer services get coarser slot steps so the time picker does not explode
into dozens of nearly identical start times.
"""

from .exceptions import InvalidDurationError


def interval_for(duration_minutes: int) -> int:
    """
    Return the slot step in minutes for a service duration.

    - up to 30 minutes: every 15 minutes
    - 31 to 60 minutes: every 30 minutes
    - 61 to 120 minutes: every 60 minutes
    - longer: half the duration, but never less than 60 minutes

    Raises:
        InvalidDurationError: If the duration is not positive
    """
    if duration_minutes <= 0:
        raise InvalidDurationError(f"Service duration must be positive, got {duration_minutes}")

    if duration_minutes <= 30:
        return 15
    if duration_minutes <= 60:
        return 30
    if duration_minutes <= 120:
        return 60
    return max(60, duration_minutes // 2)
