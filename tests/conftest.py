"""Shared pytest fixtures for habitscore test suite."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitscore.habit import Habit
from habitscore.models import Entry, EntryKind

# Fixed terminal day so every test is independent of the wall clock
TODAY = date(2026, 10, 19)


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def check(habit: Habit, *offsets: int) -> None:
    """Add a YES_MANUAL entry at each offset (days before TODAY)."""
    habit.add_entries(Entry(timestamp=days_ago(i), kind=EntryKind.YES_MANUAL) for i in offsets)


def skip(habit: Habit, *offsets: int) -> None:
    habit.add_entries(Entry(timestamp=days_ago(i), kind=EntryKind.SKIP) for i in offsets)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def habit():
    """Empty daily yes/no habit."""
    return Habit(name="Meditate")


@pytest.fixture
def numerical_habit():
    """Empty daily numerical habit with target 10."""
    return Habit(name="Read", numerical=True, target_value=10.0, unit="pages")


@pytest.fixture
def habit_file(tmp_path):
    """Write a YAML habit document and return its path."""
    def _write(text: str, name: str = "habit.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write
