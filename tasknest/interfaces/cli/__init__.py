"""CLI interface for TaskNest using Typer.

Usage:
    tasknest add "Write report" -c Work --due 2d
    tasknest tree                 # Whole forest with progress
    tasknest done <id>            # Toggle completion
    tasknest message add <id> "Draft sent"
    tasknest tui                  # Interactive terminal UI

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (task, category, message)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from tasknest import __version__
from tasknest.global_config import get_config_dir, get_global_config
from tasknest.interfaces.cli.commands import category, message, task
from tasknest.interfaces.cli.common import configure_session, get_registry
from tasknest.logging_setup import setup_logging

app = typer.Typer(
    name="tasknest",
    help="Hierarchical task manager with per-task message channels",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"tasknest version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding the task snapshot (or set TASKNEST_DATA_DIR)",
        envvar="TASKNEST_DATA_DIR",
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show log output on the console"),
    no_persist: bool = typer.Option(
        False, "--no-persist", help="Keep changes in memory for this run only"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """TaskNest - tasks, subtasks and a message channel for each."""
    config = get_global_config()
    setup_logging(
        log_dir=get_config_dir(),
        console_level=logging.DEBUG if verbose else logging.WARNING,
        file_level=config.log_level,
    )
    configure_session(data_dir, persist=not no_persist)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(category.app, name="category")
app.add_typer(message.app, name="message")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================

app.command("add")(task.add)
app.command("list")(task.list_tasks)
app.command("tree")(task.tree)
app.command("show")(task.show)
app.command("done")(task.done)
app.command("delete")(task.delete)
app.command("search")(task.search)
app.command("stats")(task.stats)


@app.command("tui")
def tui() -> None:
    """Open the interactive terminal UI."""
    from tasknest.tui.app import run_tui

    # The terminal belongs to the UI now; keep logging to the file only
    setup_logging(
        log_dir=get_config_dir(),
        file_level=get_global_config().log_level,
        console=False,
    )
    run_tui(get_registry())


__all__ = ["app"]
