"""Structured logging setup for habitscore.

Provides JSON-line formatter, a context var naming the habit being scored, and
a `setup_logging()` function called at CLI startup.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from habitscore.config import Config

# Name of the habit whose scores are being computed in the current context
current_habit: ContextVar[str] = ContextVar("current_habit", default="")


class _HabitFilter(logging.Filter):
    """Inject current habit name into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.habit = current_habit.get("")  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """Emit JSON log lines for machine-readable structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        habit = getattr(record, "habit", "")
        payload: dict = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.name,
        }
        if habit:
            payload["habit"] = habit
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(config: "Config") -> None:
    """Configure root logger based on config.logging settings.

    When config.logging.format == 'json', use StructuredFormatter.
    Otherwise use a plain `name: message` format.
    """
    log_cfg = config.logging
    level = getattr(logging, log_cfg.level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicate output
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.addFilter(_HabitFilter())

    if log_cfg.format.lower() == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root.addHandler(handler)


@contextmanager
def habit_context(name: str) -> Iterator[None]:
    """Tag log records emitted inside the block with the habit name."""
    token = current_habit.set(name)
    try:
        yield
    finally:
        current_habit.reset(token)
