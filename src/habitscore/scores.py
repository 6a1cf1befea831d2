"""Score cache of a single habit.

The series is always rebuilt from scratch: a score depends on every day before
it, so editing an old entry changes everything after it. ``recompute`` builds
the new series completely and then publishes it with one reference swap, so a
reader never sees a half-written series.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta

from habitscore.frequency import HALF_LIFE_DAYS, Frequency
from habitscore.models import Entry, NumericalHabitType, Score
from habitscore.models import to_day as _as_day
from habitscore.recurrence import evaluate

logger = logging.getLogger("habitscore.scores")


@dataclass(frozen=True)
class _Series:
    first_day: date | None = None
    today: date | None = None
    values: tuple[float, ...] = field(default_factory=tuple)


_EMPTY = _Series()


class ScoreList:
    """Date -> score cache filled by ``recompute``."""

    def __init__(self) -> None:
        self._series: _Series = _EMPTY
        self._write_lock = threading.Lock()

    # --- Mutation ---

    def recompute(
        self,
        entries: Iterable[Entry],
        frequency: Frequency,
        today: date,
        *,
        numerical: bool = False,
        target_value: float = 0.0,
        numerical_type: NumericalHabitType = NumericalHabitType.AT_LEAST,
        half_life_days: float = HALF_LIFE_DAYS,
    ) -> None:
        """Discard the current series and compute a new one up to ``today``."""
        with self._write_lock:
            scores = evaluate(
                entries,
                frequency,
                today,
                numerical=numerical,
                target_value=target_value,
                numerical_type=numerical_type,
                half_life_days=half_life_days,
            )
            self._series = _Series(
                first_day=scores[0].timestamp,
                today=scores[-1].timestamp,
                values=tuple(s.value for s in scores),
            )
        logger.debug("scores: %d days through %s, current=%.6f", len(scores), scores[-1].timestamp, scores[-1].value)

    def invalidate(self) -> None:
        with self._write_lock:
            self._series = _EMPTY

    # --- Queries ---

    @property
    def first_day(self) -> date | None:
        return self._series.first_day

    @property
    def today(self) -> date | None:
        """Terminal day of the last recompute."""
        return self._series.today

    def value_at(self, day: date) -> float:
        """Score on ``day``: 0.0 before the series, the terminal value after it."""
        return _value_at(self._series, _as_day(day))

    def get(self, day: date) -> Score:
        day = _as_day(day)
        return Score(timestamp=day, value=_value_at(self._series, day))

    def get_by_interval(self, from_day: date, to_day: date) -> list[Score]:
        """One score per day in [from_day, to_day], newest first."""
        from_day, to_day = _as_day(from_day), _as_day(to_day)
        if from_day > to_day:
            raise ValueError(f"from_day {from_day} is after to_day {to_day}")
        series = self._series
        days = (to_day - from_day).days
        return [
            Score(timestamp=d, value=_value_at(series, d))
            for d in (to_day - timedelta(days=i) for i in range(days + 1))
        ]

    def iter_back(self, start: date) -> Iterator[Score]:
        """Consecutive scores from ``start`` back to the first computed day.

        Each call walks the series that was current when it was made.
        """
        series = self._series
        start = _as_day(start)
        if series.first_day is None or start < series.first_day:
            return iter(())
        return _walk_back(series, start)

    def __iter__(self) -> Iterator[Score]:
        series = self._series
        if series.first_day is None:
            return iter(())
        return (
            Score(timestamp=series.first_day + timedelta(days=i), value=v)
            for i, v in enumerate(series.values)
        )

    def __len__(self) -> int:
        return len(self._series.values)

    def __bool__(self) -> bool:
        return bool(self._series.values)

    def __repr__(self) -> str:
        s = self._series
        return f"ScoreList(first_day={s.first_day}, today={s.today}, days={len(s.values)})"


def _value_at(series: _Series, day: date) -> float:
    if series.first_day is None or day < series.first_day:
        return 0.0
    if day >= series.today:
        return series.values[-1]
    return series.values[(day - series.first_day).days]


def _walk_back(series: _Series, start: date) -> Iterator[Score]:
    day = start
    while day >= series.first_day:
        yield Score(timestamp=day, value=_value_at(series, day))
        day -= timedelta(days=1)
