"""Habit aggregate: configuration, entry log and score cache of one habit."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import date

from habitscore.entries import EntryList
from habitscore.frequency import DAILY, HALF_LIFE_DAYS, Frequency
from habitscore.logging_setup import habit_context
from habitscore.models import Entry, NumericalHabitType
from habitscore.scores import ScoreList

logger = logging.getLogger("habitscore.habit")


class Habit:
    """Owner and only writer of one habit's scores.

    Changing entries or configuration marks the scores stale; they keep
    answering with the previous series until ``recompute(today)`` is called.
    """

    def __init__(
        self,
        name: str = "",
        frequency: Frequency | str = DAILY,
        *,
        numerical: bool = False,
        target_value: float = 0.0,
        numerical_type: NumericalHabitType = NumericalHabitType.AT_LEAST,
        unit: str = "",
        half_life_days: float = HALF_LIFE_DAYS,
        entries: Iterable[Entry] | None = None,
    ) -> None:
        self.name = name
        self.unit = unit
        self._half_life_days = _check_half_life(half_life_days)
        self._frequency = Frequency.parse(frequency)
        self._target_value = _check_target(target_value)
        self._numerical_type = NumericalHabitType(numerical_type)
        self.entries = EntryList(entries, numerical=numerical)
        self.scores = ScoreList()
        self._stale = True

    # --- Configuration ---

    @property
    def numerical(self) -> bool:
        return self.entries.numerical

    @property
    def frequency(self) -> Frequency:
        return self._frequency

    @frequency.setter
    def frequency(self, value: Frequency | str) -> None:
        self._frequency = Frequency.parse(value)
        self._stale = True

    @property
    def target_value(self) -> float:
        return self._target_value

    @target_value.setter
    def target_value(self, value: float) -> None:
        self._target_value = _check_target(value)
        self._stale = True

    @property
    def numerical_type(self) -> NumericalHabitType:
        return self._numerical_type

    @numerical_type.setter
    def numerical_type(self, value: NumericalHabitType) -> None:
        self._numerical_type = NumericalHabitType(value)
        self._stale = True

    @property
    def half_life_days(self) -> float:
        return self._half_life_days

    @half_life_days.setter
    def half_life_days(self, value: float) -> None:
        self._half_life_days = _check_half_life(value)
        self._stale = True

    # --- Entries ---

    def add_entry(self, entry: Entry) -> None:
        self.entries.add(entry)
        self._stale = True

    def add_entries(self, entries: Iterable[Entry]) -> None:
        self.entries.add_all(entries)
        self._stale = True

    def remove_entries(self, day: date) -> int:
        removed = self.entries.remove(day)
        if removed:
            self._stale = True
        return removed

    # --- Scores ---

    @property
    def is_stale(self) -> bool:
        return self._stale

    def recompute(self, today: date) -> ScoreList:
        """Rebuild the score series from all entries, ending on ``today``."""
        with habit_context(self.name):
            self.scores.recompute(
                self.entries,
                self._frequency,
                today,
                numerical=self.numerical,
                target_value=self._target_value,
                numerical_type=self._numerical_type,
                half_life_days=self._half_life_days,
            )
            logger.debug(
                "recomputed %d entries at %s, score today %.6f",
                len(self.entries), self._frequency, self.scores.value_at(today),
            )
        self._stale = False
        return self.scores

    def score_at(self, day: date) -> float:
        return self.scores.value_at(day)

    def __repr__(self) -> str:
        return f"Habit(name={self.name!r}, frequency={self._frequency}, numerical={self.numerical})"


def _check_target(value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"target_value must be a finite non-negative number, got {value}")
    return value


def _check_half_life(value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"half_life_days must be a finite positive number, got {value}")
    return value
