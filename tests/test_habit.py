"""Tests for the Habit aggregate and the ScoreList cache it owns."""

from __future__ import annotations

import logging
import threading
from datetime import timedelta

import pytest

from conftest import TODAY, check, days_ago, skip
from habitscore.errors import InconsistentEntry, InvalidFrequency
from habitscore.frequency import DAILY, WEEKLY
from habitscore.habit import Habit
from habitscore.models import Entry, EntryKind, NumericalHabitType, Score
from habitscore.scores import ScoreList


# ---------------------------------------------------------------------------
# Configuration and staleness
# ---------------------------------------------------------------------------

def test_new_habit_is_stale_and_scores_zero(habit):
    assert habit.is_stale
    assert habit.frequency == DAILY
    assert not habit.numerical
    assert habit.score_at(TODAY) == 0.0


def test_recompute_clears_stale(habit):
    habit.recompute(TODAY)
    assert not habit.is_stale
    check(habit, 0)
    assert habit.is_stale


def test_changes_mark_stale_but_keep_old_scores(habit):
    check(habit, 0, 1)
    habit.recompute(TODAY)
    before = habit.score_at(TODAY)

    habit.frequency = "weekly"
    assert habit.is_stale
    assert habit.frequency == WEEKLY
    assert habit.score_at(TODAY) == before

    habit.recompute(TODAY)
    assert habit.score_at(TODAY) != before


def test_remove_entries_marks_stale_only_when_something_removed(habit):
    check(habit, 0)
    habit.recompute(TODAY)
    assert habit.remove_entries(days_ago(3)) == 0
    assert not habit.is_stale
    assert habit.remove_entries(TODAY) == 1
    assert habit.is_stale
    habit.recompute(TODAY)
    assert habit.score_at(TODAY) == 0.0


def test_invalid_frequency_rejected_before_scoring(habit):
    with pytest.raises(InvalidFrequency):
        habit.frequency = "0/7"
    assert habit.frequency == DAILY


def test_invalid_frequency_on_construction():
    with pytest.raises(InvalidFrequency):
        Habit(frequency="3/0")


@pytest.mark.parametrize("target", [-1.0, float("nan"), float("inf")])
def test_bad_target_rejected(target):
    with pytest.raises(ValueError):
        Habit(numerical=True, target_value=target)


def test_numerical_type_accepts_string(numerical_habit):
    numerical_habit.numerical_type = "at_most"
    assert numerical_habit.numerical_type == NumericalHabitType.AT_MOST
    assert numerical_habit.is_stale


def test_half_life_change_marks_stale(habit):
    check(habit, 0, 1)
    habit.recompute(TODAY)
    before = habit.score_at(TODAY)

    habit.half_life_days = 26.0
    assert habit.is_stale
    assert habit.half_life_days == 26.0
    assert habit.score_at(TODAY) == before

    habit.recompute(TODAY)
    assert habit.score_at(TODAY) < before


@pytest.mark.parametrize("half_life", [0.0, -13.0, float("nan")])
def test_bad_half_life_rejected(habit, half_life):
    with pytest.raises(ValueError):
        habit.half_life_days = half_life
    assert habit.half_life_days == 13.0


def test_entry_kind_mismatch_rejected_at_ingestion(habit, numerical_habit):
    with pytest.raises(InconsistentEntry):
        habit.add_entry(Entry(timestamp=TODAY, value=5.0))
    with pytest.raises(InconsistentEntry):
        numerical_habit.add_entry(Entry(timestamp=TODAY))
    assert len(habit.entries) == 0
    assert len(numerical_habit.entries) == 0


def test_numerical_habit_scores(numerical_habit):
    numerical_habit.add_entries(Entry(timestamp=days_ago(i), value=10.0) for i in range(20))
    numerical_habit.recompute(TODAY)
    assert numerical_habit.score_at(TODAY) == pytest.approx(0.655747, abs=1e-6)

    numerical_habit.target_value = 20.0
    numerical_habit.recompute(TODAY)
    assert numerical_habit.score_at(TODAY) == pytest.approx(0.655747 / 2, abs=1e-6)


def test_recompute_logs_habit_name(habit, caplog):
    check(habit, 0)
    with caplog.at_level(logging.DEBUG, logger="habitscore"):
        habit.recompute(TODAY)
    records = [r for r in caplog.records if r.name == "habitscore.habit"]
    assert records
    assert "recomputed 1 entries" in records[0].getMessage()


# ---------------------------------------------------------------------------
# ScoreList queries
# ---------------------------------------------------------------------------

def test_empty_score_list():
    scores = ScoreList()
    assert len(scores) == 0
    assert not scores
    assert scores.first_day is None
    assert scores.today is None
    assert scores.value_at(TODAY) == 0.0
    assert list(scores) == []
    assert list(scores.iter_back(TODAY)) == []


def test_bounds_and_length(habit):
    check(habit, 4, 2)
    habit.recompute(TODAY)
    assert habit.scores.first_day == days_ago(4)
    assert habit.scores.today == TODAY
    assert len(habit.scores) == 5


def test_value_before_first_day_is_zero_and_after_today_is_terminal(habit):
    check(habit, *range(5))
    habit.recompute(TODAY)
    assert habit.scores.value_at(days_ago(5)) == 0.0
    assert habit.scores.value_at(days_ago(500)) == 0.0
    terminal = habit.scores.value_at(TODAY)
    assert habit.scores.value_at(TODAY + timedelta(days=1)) == terminal
    assert habit.scores.value_at(TODAY + timedelta(days=365)) == terminal


def test_get_returns_score(habit):
    check(habit, 0)
    habit.recompute(TODAY)
    assert habit.scores.get(TODAY) == Score(timestamp=TODAY, value=habit.score_at(TODAY))


def test_get_by_interval_newest_first(habit):
    check(habit, *range(3))
    habit.recompute(TODAY)
    scores = habit.scores.get_by_interval(days_ago(4), TODAY)
    assert [s.timestamp for s in scores] == [days_ago(i) for i in range(5)]
    assert [s.value for s in scores[3:]] == [0.0, 0.0]
    assert scores[0].value > scores[1].value > scores[2].value > 0


def test_get_by_interval_single_day_and_reversed_bounds(habit):
    habit.recompute(TODAY)
    assert len(habit.scores.get_by_interval(TODAY, TODAY)) == 1
    with pytest.raises(ValueError):
        habit.scores.get_by_interval(TODAY, days_ago(1))


def test_iter_back_is_bounded_and_restartable(habit):
    check(habit, *range(10))
    skip(habit, 3)
    habit.recompute(TODAY)

    walk = habit.scores.iter_back(days_ago(2))
    days = [s.timestamp for s in walk]
    assert days == [days_ago(i) for i in range(2, 10)]
    assert [s.timestamp for s in habit.scores.iter_back(days_ago(2))] == days
    assert list(habit.scores.iter_back(days_ago(20))) == []


def test_iter_back_sees_snapshot_taken_when_called(habit):
    check(habit, *range(5))
    habit.recompute(TODAY)
    walk = habit.scores.iter_back(TODAY)
    old_values = [habit.score_at(days_ago(i)) for i in range(5)]

    habit.add_entry(Entry(timestamp=days_ago(4), kind=EntryKind.NO))
    habit.recompute(TODAY)
    assert [s.value for s in walk] == old_values


def test_iter_yields_oldest_first(habit):
    check(habit, 0, 3)
    habit.recompute(TODAY)
    days = [s.timestamp for s in habit.scores]
    assert days == [days_ago(i) for i in (3, 2, 1, 0)]


def test_invalidate(habit):
    check(habit, 0)
    habit.recompute(TODAY)
    habit.scores.invalidate()
    assert habit.score_at(TODAY) == 0.0
    assert len(habit.scores) == 0


def test_readers_never_see_partial_series():
    """Concurrent readers observe either the old or the new series."""
    scores = ScoreList()
    few = [Entry(timestamp=days_ago(i)) for i in range(3)]
    many = [Entry(timestamp=days_ago(i)) for i in range(300)]
    scores.recompute(few, DAILY, TODAY)
    valid = {3, 300}
    seen: list[int] = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            seen.append(len(list(scores)))

    t = threading.Thread(target=reader)
    t.start()
    for _ in range(20):
        scores.recompute(many, DAILY, TODAY)
        scores.recompute(few, DAILY, TODAY)
    stop.set()
    t.join()
    assert set(seen) <= valid
