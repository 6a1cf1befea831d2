"""Forward pass computing one score per day from a habit's entries.

Days are walked oldest to newest. A rolling window over the last
``denominator`` days collects occurrences; the share of the target reached
inside the window is the day's occurrence value, which is folded into the
moving average with the decay multiplier of the frequency. SKIP days neither
feed the window nor move the score.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Iterable
from datetime import date, timedelta

from habitscore.entries import effective_entries
from habitscore.errors import NonFiniteResult
from habitscore.frequency import HALF_LIFE_DAYS, Frequency, blend, decay_multiplier
from habitscore.models import Entry, EntryKind, NumericalHabitType, Score, to_day

logger = logging.getLogger("habitscore.recurrence")


def window_size(frequency: Frequency, numerical: bool = False) -> tuple[int, int]:
    """(numerator, denominator) actually used for the rolling window.

    Non-daily yes/no habits use a window twice as long, which evens out
    repetitions that land on different weekdays from one period to the next.
    """
    numerator, denominator = frequency.numerator, frequency.denominator
    if not numerical and frequency.rate < 1.0:
        numerator *= 2
        denominator *= 2
    return numerator, denominator


def contribution(entry: Entry | None, numerical: bool = False) -> float:
    """What a day adds to the rolling window."""
    if entry is None or not entry.kind.is_positive:
        return 0.0
    if numerical:
        return entry.quantity
    return 1.0


def occurrence_value(
    window_sum: float,
    numerator: int,
    *,
    numerical: bool = False,
    target_value: float = 0.0,
    numerical_type: NumericalHabitType = NumericalHabitType.AT_LEAST,
) -> float:
    """Share of the target reached in the window, in [0, 1]."""
    if not numerical:
        return min(1.0, window_sum / numerator)
    if numerical_type == NumericalHabitType.AT_MOST:
        if target_value > 0:
            return min(1.0, max(0.0, 1.0 - (window_sum - target_value) / target_value))
        return 1.0 if window_sum == 0 else 0.0
    if target_value > 0:
        return min(1.0, window_sum / target_value)
    return 0.0  # zero target


def evaluate(
    entries: Iterable[Entry],
    frequency: Frequency,
    today: date,
    *,
    numerical: bool = False,
    target_value: float = 0.0,
    numerical_type: NumericalHabitType = NumericalHabitType.AT_LEAST,
    half_life_days: float = HALF_LIFE_DAYS,
) -> list[Score]:
    """Scores from the earliest known entry through ``today``, oldest first.

    Entries may come in any order and may repeat a day; the last one for a day
    wins. Entries dated after ``today`` are ignored. A habit without any known
    entry (everything UNKNOWN, or nothing at all) scores 0.0 on ``today``.
    """
    today = to_day(today)
    by_day = {e.timestamp: e for e in effective_entries(entries) if e.timestamp <= today}
    known = [day for day, e in by_day.items() if e.kind != EntryKind.UNKNOWN]
    if not known:
        return [Score(timestamp=today, value=0.0)]

    first = min(known)
    multiplier = decay_multiplier(frequency, half_life_days)
    numerator, denominator = window_size(frequency, numerical)
    at_most = numerical and numerical_type == NumericalHabitType.AT_MOST

    previous = 1.0 if at_most else 0.0
    window: deque[float] = deque(maxlen=denominator)
    scores: list[Score] = []
    for offset in range((today - first).days + 1):
        day = first + timedelta(days=offset)
        entry = by_day.get(day)
        window.append(contribution(entry, numerical))
        if entry is None or entry.kind != EntryKind.SKIP:
            value = occurrence_value(
                math.fsum(window),
                numerator,
                numerical=numerical,
                target_value=target_value,
                numerical_type=numerical_type,
            )
            previous = blend(multiplier, previous, value)
            if not math.isfinite(previous):
                raise NonFiniteResult(
                    f"Score for {day} is not finite",
                    {"timestamp": day.isoformat(), "value": repr(previous)},
                )
        scores.append(Score(timestamp=day, value=previous))

    logger.debug(
        "evaluated %d days (%s .. %s) at %s, m=%.6f, final=%.6f",
        len(scores), first, today, frequency, multiplier, previous,
    )
    return scores
