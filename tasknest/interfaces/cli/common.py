"""Shared utilities for TaskNest CLI commands.

This module provides common utilities used across CLI commands:
- Session registry (built once per invocation from --data-dir)
- Formatted output helpers (error, success, info)
- Argument parsing for due dates, urgency flags and palettes
- Task formatting for list, tree and detail views
"""

import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

import typer

from tasknest.application import TaskRegistry
from tasknest.bootstrap import create_registry
from tasknest.domain.shared import ensure_aware, utcnow
from tasknest.domain.task import (
    PASTEL_COLORS,
    Task,
    TaskColor,
    TaskMessage,
    TaskUrgency,
    get_palette,
    is_valid_hex,
    walk,
    walk_with_depth,
)

SHORT_ID_LENGTH = 8

_RELATIVE_DUE = re.compile(r"^(\d+)\s*([hdw])$")
_RELATIVE_UNITS = {"h": "hours", "d": "days", "w": "weeks"}

_session: dict[str, Any] = {"data_dir": None, "persist": True, "registry": None}


# =============================================================================
# Session
# =============================================================================


def configure_session(data_dir: Optional[Path], persist: bool = True) -> None:
    """Remember the data directory for this invocation and drop any old registry."""
    _session["data_dir"] = data_dir
    _session["persist"] = persist
    _session["registry"] = None


def get_registry() -> TaskRegistry:
    """Registry for the current invocation, created on first use."""
    if _session["registry"] is None:
        _session["registry"] = create_registry(
            data_dir=_session["data_dir"], persist=_session["persist"]
        )
    return _session["registry"]


def resolve_task(registry: TaskRegistry, task_ref: str) -> Task:
    """Find a task by full id or unique id prefix.

    Raises:
        typer.Exit: If no task, or more than one task, matches.
    """
    task = registry.get_task_by_id(task_ref)
    if task is not None:
        return task

    matches = [t for t in walk(registry.get_all_tasks()) if t.id.startswith(task_ref)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        print_error(f"Task id '{task_ref}' is ambiguous ({len(matches)} matches)")
    else:
        print_error(f"Task not found: {task_ref}")
    raise typer.Exit(1)


def resolve_message(task: Task, message_ref: str) -> TaskMessage:
    """Find a message in a task's channel by full id or unique id prefix."""
    matches = [m for m in task.messages if m.id == message_ref or m.id.startswith(message_ref)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        print_error(f"Message id '{message_ref}' is ambiguous ({len(matches)} matches)")
    else:
        print_error(f"Message not found: {message_ref}")
    raise typer.Exit(1)


# =============================================================================
# Output helpers
# =============================================================================


def print_error(msg: str) -> None:
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a title between two separator lines."""
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


# =============================================================================
# Parsing
# =============================================================================


def parse_due(value: Optional[str]) -> Optional[datetime]:
    """Parse a due date given as ISO-8601 or relative to now (36h, 2d, 1w).

    Naive ISO values are read as local time.

    Raises:
        typer.BadParameter: If the value matches neither form.
    """
    if value is None:
        return None
    text = value.strip().lower()

    relative = _RELATIVE_DUE.match(text)
    if relative:
        amount, unit = relative.groups()
        return utcnow() + timedelta(**{_RELATIVE_UNITS[unit]: int(amount)})

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise typer.BadParameter(
            f"'{value}' is not an ISO date/time or a relative offset like 36h, 2d, 1w"
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return ensure_aware(parsed)


def parse_urgency(values: Optional[list[str]]) -> Optional[list[TaskUrgency]]:
    """Map urgency names (any case) to flags; None when nothing was given."""
    if not values:
        return None
    by_name = {u.value.lower(): u for u in TaskUrgency}
    flags = []
    for value in values:
        flag = by_name.get(value.strip().lower())
        if flag is None:
            choices = ", ".join(u.value for u in TaskUrgency)
            raise typer.BadParameter(f"Unknown urgency '{value}' (choose from {choices})")
        flags.append(flag)
    return flags


def validate_name(name: str) -> str:
    """Names must contain something other than whitespace."""
    name = name.strip()
    if not name:
        raise typer.BadParameter("Task name cannot be empty")
    return name


def resolve_color(
    palette: Optional[str] = None,
    primary: Optional[str] = None,
    secondary: Optional[str] = None,
    accent: Optional[str] = None,
    text: Optional[str] = None,
) -> Optional[TaskColor]:
    """Build a palette from a named preset or four explicit hex colours.

    Returns:
        The palette, or None when no colour option was given.

    Raises:
        typer.BadParameter: For an unknown preset, a partial custom palette,
            or a malformed hex value.
    """
    custom = {"primary": primary, "secondary": secondary, "accent": accent, "text": text}
    given = {key: value for key, value in custom.items() if value is not None}

    if palette is not None:
        if given:
            raise typer.BadParameter("Use either --palette or the individual colour options")
        color = get_palette(palette)
        if color is None:
            raise typer.BadParameter(
                f"Unknown palette '{palette}' (choose from {', '.join(PASTEL_COLORS)})"
            )
        return color

    if not given:
        return None
    missing = [key for key in custom if key not in given]
    if missing:
        raise typer.BadParameter(f"Custom colour needs --{' --'.join(missing)} as well")
    for key, value in given.items():
        if not is_valid_hex(value):
            raise typer.BadParameter(f"--{key} must be a hex colour like #A1B2C3, got '{value}'")
    return TaskColor(
        **{key: value if value.startswith("#") else f"#{value}" for key, value in given.items()}
    )


# =============================================================================
# Formatting
# =============================================================================


def short_id(item_id: str) -> str:
    return item_id[:SHORT_ID_LENGTH]


def format_due(task: Task) -> str:
    if task.due_date is None:
        return ""
    local = task.due_date.astimezone()
    return local.strftime("%Y-%m-%d %H:%M")


def format_task_line(task: Task) -> str:
    """One-line summary: checkbox, name, id, progress, flags and due date."""
    box = "[x]" if task.is_completed else "[ ]"
    parts = [f"{box} {task.name} ({short_id(task.id)})"]
    if not task.is_leaf():
        parts.append(f"{task.get_completion_percentage()}%")
    flags = [u.value for u in task.urgency if u != TaskUrgency.CASUAL]
    if flags:
        parts.append(f"[{', '.join(flags)}]")
    if task.due_date is not None:
        due = f"due {format_due(task)}"
        if task.is_overdue():
            due = typer.style(f"{due} OVERDUE", fg=typer.colors.RED)
        parts.append(due)
    return "  ".join(parts)


def print_task_list(tasks: list[Task], empty_message: str = "No tasks found.") -> None:
    if not tasks:
        print_info(empty_message)
        return
    for task in tasks:
        typer.echo(format_task_line(task))


def print_forest(tasks: list[Task]) -> None:
    """Indented view of every task with its subtasks."""
    for task, depth in walk_with_depth(tasks):
        typer.echo(f"{'  ' * depth}- {format_task_line(task)}")


def format_message(message: TaskMessage, replied_to: Optional[TaskMessage] = None) -> str:
    marks = ""
    if message.is_pinned:
        marks += "📌"
    if message.is_starred:
        marks += "⭐"
    stamp = message.timestamp.astimezone().strftime("%Y-%m-%d %H:%M")
    prefix = f"{marks} " if marks else ""
    line = f"{short_id(message.id)} {stamp} {prefix}{message.author}: {message.content}"
    if replied_to is not None:
        line += f"  (reply to {replied_to.author}: {replied_to.content[:40]})"
    if message.attachments:
        line += "  📎 " + ", ".join(a.name for a in message.attachments)
    if message.reactions:
        line += "  " + " ".join(f"{r.emoji}{r.count}" for r in message.reactions)
    return line


def print_task_detail(task: Task) -> None:
    """Full view of one task (fields, links, attachments, subtasks)."""
    print_header(f"TASK: {task.name}")
    typer.echo(f"ID:          {task.id}")
    if task.parent_id:
        typer.echo(f"Parent:      {task.parent_id}")
    typer.echo(f"Type:        {task.type.value}")
    typer.echo(f"Categories:  {', '.join(task.categories)}")
    typer.echo(f"Urgency:     {', '.join(u.value for u in task.urgency)}")
    typer.echo(f"Status:      {'completed' if task.is_completed else 'open'}")
    typer.echo(f"Progress:    {task.get_completion_percentage()}%")
    if task.due_date is not None:
        typer.echo(f"Due:         {format_due(task)}")
    typer.echo(f"Color:       {task.color.primary} / {task.color.secondary}")
    if task.notes:
        typer.echo(f"\n## Notes\n{task.notes}")
    if task.links:
        typer.echo("\n## Links")
        for link in task.links:
            typer.echo(f"- {link.title} <{link.url}> ({short_id(link.id)})")
    if task.attachments:
        typer.echo("\n## Attachments")
        for attachment in task.attachments:
            typer.echo(f"- {attachment.name} [{attachment.type.value}] {attachment.url}")
    if task.subtasks:
        typer.echo("\n## Subtasks")
        print_forest(task.subtasks)
    typer.echo(f"\nMessages: {len(task.messages)}")
    print_separator()


__all__ = [
    "configure_session",
    "get_registry",
    "resolve_task",
    "resolve_message",
    "print_error",
    "print_success",
    "print_info",
    "print_separator",
    "print_header",
    "parse_due",
    "parse_urgency",
    "validate_name",
    "resolve_color",
    "short_id",
    "format_task_line",
    "format_message",
    "print_task_list",
    "print_forest",
    "print_task_detail",
]
