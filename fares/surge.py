"""
Purpose: Demand pricing multiplier.
What it does:
Maps the local hour of a timestamp to a surge multiplier:

- peak (08-10h, 18-21h)      -> uniform [1.2, 1.5)
- late night (>= 23h, <= 5h) -> uniform [1.1, 1.3)
- everything else            -> uniform [1.0, 1.1)

Surge is a strategy object so callers (and tests) can swap in a fixed value.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Optional, Protocol, Tuple

PEAK_HOURS: Tuple[Tuple[int, int], ...] = ((8, 10), (18, 21))
PEAK_RANGE = (1.2, 1.5)
LATE_NIGHT_RANGE = (1.1, 1.3)
NORMAL_RANGE = (1.0, 1.1)


class SurgeModel(Protocol):
    def current_multiplier(self, now: datetime) -> float:
        ...


def surge_range_for_hour(hour: int) -> Tuple[float, float]:
    """
    Returns the [low, high) band the multiplier is drawn from.
    """
    if any(start <= hour <= end for start, end in PEAK_HOURS):
        return PEAK_RANGE

    if hour >= 23 or hour <= 5:
        return LATE_NIGHT_RANGE

    return NORMAL_RANGE


class TimeOfDaySurgeModel:
    """
    Production surge model: randomised within the band for the hour.
    """
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def current_multiplier(self, now: datetime) -> float:
        low, high = surge_range_for_hour(now.hour)
        return low + self.rng.random() * (high - low)


class FixedSurgeModel:
    """
    Always returns the same multiplier, whatever the time.
    """
    def __init__(self, value: float = 1.0):
        if value <= 0:
            raise ValueError("surge multiplier must be > 0")
        self.value = value

    def current_multiplier(self, now: datetime) -> float:
        return self.value
