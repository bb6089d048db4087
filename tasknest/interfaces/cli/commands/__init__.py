"""CLI command groups for TaskNest.

Command groups:
- task: Task lifecycle and views (sub, update, color, link, overdue, ...)
- category: Category labels
- message: Per-task message channel

Each command group is a Typer app that gets registered
with the main app using app.add_typer().
"""

from tasknest.interfaces.cli.commands import category, message, task

__all__ = ["task", "category", "message"]
