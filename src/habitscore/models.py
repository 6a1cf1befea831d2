"""Core data models for habitscore: entries and scores."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, field_validator


# --- Enums ---


class EntryKind(str, Enum):
    """What happened on a given day."""

    YES_MANUAL = "yes_manual"
    YES_AUTO = "yes_auto"
    NO = "no"
    SKIP = "skip"
    UNKNOWN = "unknown"

    @property
    def is_positive(self) -> bool:
        return self in (EntryKind.YES_MANUAL, EntryKind.YES_AUTO)


class NumericalHabitType(str, Enum):
    """Direction of the target for quantity-tracked habits."""

    AT_LEAST = "at_least"
    AT_MOST = "at_most"


def to_day(v):
    # datetime is a date subclass; keep the calendar day only
    if isinstance(v, datetime):
        return v.date()
    return v


# --- Entries ---


class Entry(BaseModel):
    """A single fact about one day of a habit."""

    model_config = {"frozen": True}

    timestamp: date
    kind: EntryKind = EntryKind.YES_MANUAL
    value: float | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _truncate_timestamp(cls, v):
        return to_day(v)

    @property
    def quantity(self) -> float:
        """Logged quantity, never negative; 0.0 when nothing was logged."""
        if self.value is None:
            return 0.0
        return max(0.0, self.value)


# --- Scores ---


class Score(BaseModel):
    """Score of a habit on one day."""

    model_config = {"frozen": True}

    timestamp: date
    value: float

    @field_validator("timestamp", mode="before")
    @classmethod
    def _truncate_timestamp(cls, v):
        return to_day(v)
