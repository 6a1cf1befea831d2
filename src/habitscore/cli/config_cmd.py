"""CLI commands for config management."""

from __future__ import annotations

import typer
from pydantic import ValidationError
from rich.console import Console

console = Console()


def register(
    config_app: typer.Typer,
    get_config,
    get_config_value,
    set_config_value,
) -> None:
    """Register config commands on the config sub-app."""

    @config_app.command("show")
    def config_show():
        """Show current configuration."""
        cfg = get_config()
        console.print_json(cfg.model_dump_json(indent=2))

    @config_app.command("set")
    def config_set(key: str = typer.Argument(...), value: str = typer.Argument(...)):
        """Set a config value (dot notation: scoring.half_life_days)."""
        try:
            set_config_value(key, value)
        except ValidationError as exc:
            console.print(f"[red]Invalid value for {key}:[/red] {exc.errors()[0]['msg']}")
            raise typer.Exit(1)
        console.print(f"[green]Set[/green] {key} = {value}")

    @config_app.command("get")
    def config_get(key: str = typer.Argument(...)):
        """Get a config value."""
        cfg = get_config()
        val = get_config_value(cfg, key)
        console.print(f"{key} = {val}")
