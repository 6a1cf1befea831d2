"""Load habit documents (configuration plus entries) from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from habitscore.errors import ErrorCode, HabitScoreError
from habitscore.frequency import HALF_LIFE_DAYS, Frequency
from habitscore.habit import Habit
from habitscore.models import Entry, EntryKind


def load_habit(path: str | Path, half_life_days: float = HALF_LIFE_DAYS) -> Habit:
    """Parse a YAML habit file into a Habit (scores not yet computed)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Habit file not found: {path}")
    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except (yaml.YAMLError, ValueError) as exc:
            # impossible dates such as 2026-02-30 surface as ValueError
            raise _invalid(path, f"not valid YAML: {exc}") from exc
    return habit_from_dict(raw, half_life_days=half_life_days, source=str(path))


def habit_from_dict(raw: Any, half_life_days: float = HALF_LIFE_DAYS, source: str = "<dict>") -> Habit:
    if not isinstance(raw, dict):
        raise _invalid(source, "document must be a mapping")

    try:
        frequency = Frequency.parse(raw.get("frequency", "daily"))
    except ValidationError as exc:
        raise _invalid(source, f"bad frequency: {exc.errors()[0]['msg']}") from exc
    try:
        entries = [Entry(**e) for e in _entry_rows(raw.get("entries") or [], source)]
    except ValidationError as exc:
        raise _invalid(source, f"bad entry: {exc.errors()[0]['msg']}") from exc

    try:
        return Habit(
            name=str(raw.get("name", "")),
            frequency=frequency,
            numerical=bool(raw.get("numerical", False)),
            target_value=raw.get("target_value", 0.0),
            numerical_type=raw.get("numerical_type", "at_least"),
            unit=str(raw.get("unit", "")),
            half_life_days=half_life_days,
            entries=entries,
        )
    except (ValueError, TypeError) as exc:
        raise _invalid(source, str(exc)) from exc


def _entry_rows(rows: Any, source: str) -> list[dict]:
    if not isinstance(rows, list):
        raise _invalid(source, "'entries' must be a list")
    out = []
    for row in rows:
        if not isinstance(row, dict) or "date" not in row:
            raise _invalid(source, f"entry without a date: {row!r}")
        kind = row.get("kind", "yes_manual")
        if isinstance(kind, bool):
            # YAML 1.1 reads a bare yes/no as a boolean
            kind = EntryKind.YES_MANUAL if kind else EntryKind.NO
        fields = {"timestamp": row["date"], "kind": kind}
        if row.get("value") is not None:
            fields["value"] = row["value"]
        out.append(fields)
    return out


def _invalid(source: Any, reason: str) -> HabitScoreError:
    return HabitScoreError(
        ErrorCode.INVALID_DOCUMENT,
        f"Invalid habit document {source}: {reason}",
        {"source": str(source)},
    )
