"""Target frequency of a habit and the decay multiplier derived from it.

The score is an exponential moving average over days. Its per-day retention
factor depends on how often the habit is expected to happen, so that a weekly
habit keeps the credit of a single repetition for more calendar days than a
daily one::

    rate = numerator / denominator
    m    = 0.5 ** (sqrt(rate) / half_life_days)

With ``half_life_days = 13`` a daily habit done every day crosses 99% after
~90 days, a weekly habit after ~9 months and a monthly one after ~18 months.
Retuning the half-life moves all of these windows.
"""

from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, model_validator

from habitscore.errors import InvalidFrequency

HALF_LIFE_DAYS = 13.0

_RATIO_PATTERN = re.compile(r"^\s*(-?\d+)\s*/\s*(-?\d+)\s*$")


class Frequency(BaseModel):
    """``numerator`` repetitions expected every ``denominator`` days."""

    model_config = {"frozen": True}

    numerator: int
    denominator: int

    @model_validator(mode="after")
    def _check_positive(self) -> "Frequency":
        if self.numerator <= 0 or self.denominator <= 0:
            raise InvalidFrequency(
                f"Frequency must be positive, got {self.numerator}/{self.denominator}",
                {"numerator": self.numerator, "denominator": self.denominator},
            )
        return self

    @property
    def rate(self) -> float:
        """Expected repetitions per day."""
        return self.numerator / self.denominator

    @property
    def is_daily(self) -> bool:
        return self.numerator == self.denominator

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    @classmethod
    def parse(cls, value: Any) -> "Frequency":
        """Build a Frequency from '3/7', 'daily', 'weekly', a mapping or a Frequency."""
        if isinstance(value, Frequency):
            return value
        if isinstance(value, dict):
            return cls(**value)
        if isinstance(value, str):
            named = _NAMED.get(value.strip().lower())
            if named is not None:
                return named
            match = _RATIO_PATTERN.match(value)
            if match:
                return cls(numerator=int(match.group(1)), denominator=int(match.group(2)))
        raise InvalidFrequency(f"Cannot parse frequency: {value!r}", {"value": str(value)})


DAILY = Frequency(numerator=1, denominator=1)
WEEKLY = Frequency(numerator=1, denominator=7)
TWO_TIMES_PER_WEEK = Frequency(numerator=2, denominator=7)
THREE_TIMES_PER_WEEK = Frequency(numerator=3, denominator=7)

_NAMED: dict[str, Frequency] = {
    "daily": DAILY,
    "weekly": WEEKLY,
}


def decay_multiplier(frequency: Frequency, half_life_days: float = HALF_LIFE_DAYS) -> float:
    """Per-day retention factor, strictly inside (0, 1) for any valid frequency."""
    if half_life_days <= 0:
        raise ValueError(f"half_life_days must be positive, got {half_life_days}")
    return 0.5 ** (math.sqrt(frequency.rate) / half_life_days)


def blend(multiplier: float, previous: float, value: float) -> float:
    """One step of the moving average."""
    return previous * multiplier + value * (1 - multiplier)
