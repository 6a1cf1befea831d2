"""CLI commands for scoring habit files."""

from __future__ import annotations

import json
import logging
from datetime import date, timedelta
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from habitscore.errors import ErrorCode, ErrorResponse, HabitScoreError

console = Console()
logger = logging.getLogger("habitscore.cli")


def _parse_day(value: Optional[str], name: str = "--today") -> date:
    """ISO date, or the local current date when omitted."""
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD.", param_hint=name)


def _fail(exc: HabitScoreError, as_json: bool) -> NoReturn:
    logger.warning("%s: %s", exc.code.value, exc.message)
    if as_json:
        console.print_json(ErrorResponse.from_error(exc).model_dump_json())
    else:
        console.print(f"[red]Error:[/red] {exc.message}")
    raise typer.Exit(1)


def _load_and_score(get_config, file: str, today: date, as_json: bool):
    from habitscore.loader import load_habit

    cfg = get_config()
    try:
        habit = load_habit(file, half_life_days=cfg.scoring.half_life_days)
        habit.recompute(today)
    except FileNotFoundError as exc:
        _fail(HabitScoreError(ErrorCode.INVALID_DOCUMENT, str(exc), {"source": file}), as_json)
    except HabitScoreError as exc:
        _fail(exc, as_json)
    return habit


def register(app: typer.Typer, get_config) -> None:
    """Register scoring commands on the main Typer app."""

    @app.command()
    def score(
        file: str = typer.Argument(..., help="YAML habit file"),
        today: Optional[str] = typer.Option(None, "--today", "-t", help="Terminal day (YYYY-MM-DD). Default: local date"),
        days: Optional[int] = typer.Option(None, "--days", "-d", min=1, help="How many days to show"),
        as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    ):
        """Show the most recent daily scores of a habit, newest first."""
        terminal = _parse_day(today)
        habit = _load_and_score(get_config, file, terminal, as_json)
        count = days or get_config().scoring.default_days
        scores = habit.scores.get_by_interval(terminal - timedelta(days=count - 1), terminal)

        if as_json:
            console.print_json(json.dumps({
                "habit": habit.name,
                "frequency": str(habit.frequency),
                "today": terminal.isoformat(),
                "scores": [{"date": s.timestamp.isoformat(), "value": round(s.value, 6)} for s in scores],
            }))
            return

        tbl = Table(title=f"{habit.name or file} ({habit.frequency})", show_header=True)
        tbl.add_column("Date", style="dim")
        tbl.add_column("Entry")
        tbl.add_column("Score", justify="right")
        for s in scores:
            entry = habit.entries.get(s.timestamp)
            kind = entry.kind.value if entry else ""
            if entry is not None and entry.value is not None:
                kind += f" ({entry.value:g}{' ' + habit.unit if habit.unit else ''})"
            tbl.add_row(s.timestamp.isoformat(), kind, f"{s.value * 100:.1f}%")
        console.print(tbl)

    @app.command()
    def value(
        file: str = typer.Argument(..., help="YAML habit file"),
        day: str = typer.Argument(..., help="Day to query (YYYY-MM-DD)"),
        today: Optional[str] = typer.Option(None, "--today", "-t", help="Terminal day (YYYY-MM-DD). Default: local date"),
        as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text"),
    ):
        """Print the score of a habit on one day."""
        query = _parse_day(day, "DAY")
        habit = _load_and_score(get_config, file, _parse_day(today), as_json)
        result = habit.score_at(query)
        if as_json:
            console.print_json(json.dumps({"date": query.isoformat(), "value": round(result, 6)}))
        else:
            console.print(f"{query.isoformat()}: {result:.6f}")
