"""habitscore - exponentially decaying strength scores for habits."""

from habitscore.entries import EntryList, effective_entries
from habitscore.errors import HabitScoreError, InconsistentEntry, InvalidFrequency, NonFiniteResult
from habitscore.frequency import (
    DAILY,
    HALF_LIFE_DAYS,
    THREE_TIMES_PER_WEEK,
    TWO_TIMES_PER_WEEK,
    WEEKLY,
    Frequency,
    decay_multiplier,
)
from habitscore.habit import Habit
from habitscore.models import Entry, EntryKind, NumericalHabitType, Score
from habitscore.recurrence import evaluate
from habitscore.scores import ScoreList

__version__ = "0.1.0"

__all__ = [
    "DAILY",
    "HALF_LIFE_DAYS",
    "THREE_TIMES_PER_WEEK",
    "TWO_TIMES_PER_WEEK",
    "WEEKLY",
    "Entry",
    "EntryKind",
    "EntryList",
    "Frequency",
    "Habit",
    "HabitScoreError",
    "InconsistentEntry",
    "InvalidFrequency",
    "NonFiniteResult",
    "NumericalHabitType",
    "Score",
    "ScoreList",
    "decay_multiplier",
    "effective_entries",
    "evaluate",
]
