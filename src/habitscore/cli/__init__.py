"""habitscore CLI - habit strength scores from YAML habit files."""

from __future__ import annotations

import typer

from habitscore.config import (
    Config,
    get_config_value,
    load_config,
    set_config_value,
)
from habitscore.logging_setup import setup_logging

# Bootstrap logging from config (respects HABITSCORE_LOG_FORMAT / HABITSCORE_LOG_LEVEL)
setup_logging(load_config())

app = typer.Typer(name="habitscore", help="Habit strength scores with exponential decay")
config_app = typer.Typer(help="Manage configuration")

app.add_typer(config_app, name="config")

_config: Config | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _set_config_value(key: str, value: str) -> Config:
    global _config
    _config = set_config_value(key, value)
    return _config


# Register commands from sub-modules
from habitscore.cli import score_cmd as _score_mod  # noqa: E402
from habitscore.cli import config_cmd as _config_cmd_mod  # noqa: E402

_score_mod.register(app, _get_config)
_config_cmd_mod.register(
    config_app,
    _get_config,
    get_config_value,
    _set_config_value,
)

if __name__ == "__main__":
    app()
