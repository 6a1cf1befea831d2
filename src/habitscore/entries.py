"""Raw entry log of a habit and resolution of the effective entry per day."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import date

from habitscore.errors import InconsistentEntry
from habitscore.models import Entry

logger = logging.getLogger("habitscore.entries")


def validate_entry(entry: Entry, numerical: bool) -> None:
    """Reject entries whose value does not match the kind of habit."""
    if not numerical and entry.value is not None:
        raise InconsistentEntry(
            f"Entry on {entry.timestamp} carries a value but the habit is not numerical",
            {"timestamp": entry.timestamp.isoformat(), "value": entry.value},
        )
    if numerical and entry.kind.is_positive and entry.value is None:
        raise InconsistentEntry(
            f"Entry on {entry.timestamp} has no value but the habit is numerical",
            {"timestamp": entry.timestamp.isoformat(), "kind": entry.kind.value},
        )


def effective_entries(entries: Iterable[Entry]) -> list[Entry]:
    """One entry per day, oldest first. The last inserted entry for a day wins."""
    by_day: dict[date, Entry] = {}
    for entry in entries:
        by_day[entry.timestamp] = entry
    return [by_day[day] for day in sorted(by_day)]


class EntryList:
    """Insertion-ordered entries of one habit.

    Duplicates for a day are kept as inserted; ``effective()`` resolves them.
    Every entry is checked against the habit kind when it is added, so a bad
    entry never reaches the score computation.
    """

    def __init__(self, entries: Iterable[Entry] | None = None, *, numerical: bool = False) -> None:
        self.numerical = numerical
        self._entries: list[Entry] = []
        if entries:
            self.add_all(entries)

    def add(self, entry: Entry) -> None:
        validate_entry(entry, self.numerical)
        self._entries.append(entry)

    def add_all(self, entries: Iterable[Entry]) -> None:
        """Validate the whole batch first, then append it."""
        batch = list(entries)
        for entry in batch:
            validate_entry(entry, self.numerical)
        self._entries.extend(batch)

    def remove(self, day: date) -> int:
        """Drop every entry recorded for ``day``. Returns how many were removed."""
        kept = [e for e in self._entries if e.timestamp != day]
        removed = len(self._entries) - len(kept)
        self._entries = kept
        if removed:
            logger.debug("removed %d entr%s on %s", removed, "y" if removed == 1 else "ies", day)
        return removed

    def clear(self) -> None:
        self._entries = []

    def get(self, day: date) -> Entry | None:
        """Effective entry for ``day``, or None."""
        for entry in reversed(self._entries):
            if entry.timestamp == day:
                return entry
        return None

    def effective(self) -> list[Entry]:
        return effective_entries(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))
