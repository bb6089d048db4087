"""Task management CLI commands.

Commands for the task lifecycle: creating tasks and subtasks, editing,
toggling completion, deleting, and the list/tree/search views.
"""

from typing import Optional

import typer

from tasknest.application import StatusFilter, filter_view
from tasknest.domain.task import MAX_TASK_DEPTH, TaskPatch, TaskType
from tasknest.interfaces.cli.common import (
    get_registry,
    parse_due,
    parse_urgency,
    print_error,
    print_forest,
    print_header,
    print_info,
    print_success,
    print_task_detail,
    print_task_list,
    resolve_color,
    resolve_task,
    short_id,
    validate_name,
)

app = typer.Typer(help="Task management commands")


# =============================================================================
# Create
# =============================================================================


def add(
    name: str = typer.Argument(..., help="Task name"),
    task_type: TaskType = typer.Option(
        TaskType.DO, "--type", "-t", case_sensitive=False, help="Kind of work"
    ),
    category: Optional[list[str]] = typer.Option(
        None, "--category", "-c", help="Category label (repeatable, default Personal)"
    ),
    urgency: Optional[list[str]] = typer.Option(
        None, "--urgency", "-u", help="Casual, Important or Urgent (repeatable)"
    ),
    due: Optional[str] = typer.Option(
        None, "--due", "-d", help="Due date: ISO date/time or offset like 36h, 2d"
    ),
    palette: Optional[str] = typer.Option(None, "--palette", help="Preset colour palette"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Free-form notes"),
) -> None:
    """Create a root task."""
    registry = get_registry()
    task = registry.create_task(
        validate_name(name),
        task_type=task_type,
        categories=category or "Personal",
        urgency=parse_urgency(urgency),
        due_date=parse_due(due),
        color=resolve_color(palette),
    )
    if notes:
        registry.update_task(task.id, TaskPatch(notes=notes))
    print_success(f"Created task {task.name} ({short_id(task.id)})")


@app.command("sub")
def sub(
    parent: str = typer.Argument(..., help="Parent task id (or unique prefix)"),
    name: str = typer.Argument(..., help="Subtask name"),
    task_type: TaskType = typer.Option(
        TaskType.DO, "--type", "-t", case_sensitive=False, help="Kind of work"
    ),
    category: Optional[list[str]] = typer.Option(
        None, "--category", "-c", help="Category label (default: the parent's)"
    ),
    urgency: Optional[list[str]] = typer.Option(None, "--urgency", "-u", help="Urgency flag"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date"),
) -> None:
    """Add a subtask under an existing task."""
    registry = get_registry()
    parent_task = resolve_task(registry, parent)
    subtask = registry.create_subtask(
        parent_task.id,
        validate_name(name),
        task_type=task_type,
        categories=category or None,
        urgency=parse_urgency(urgency),
        due_date=parse_due(due),
    )
    if subtask is None:
        print_error(f"Cannot nest deeper than {MAX_TASK_DEPTH} levels below a root task")
        raise typer.Exit(1)
    print_success(f"Added subtask {subtask.name} ({short_id(subtask.id)}) to {parent_task.name}")


# =============================================================================
# Update
# =============================================================================


@app.command("update")
def update(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    task_type: Optional[TaskType] = typer.Option(
        None, "--type", "-t", case_sensitive=False, help="New kind of work"
    ),
    category: Optional[list[str]] = typer.Option(
        None, "--category", "-c", help="Replace categories (repeatable)"
    ),
    urgency: Optional[list[str]] = typer.Option(
        None, "--urgency", "-u", help="Replace urgency flags (repeatable)"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Replace notes"),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="New due date"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
) -> None:
    """Edit a task's fields; options not given are left unchanged."""
    if due is not None and clear_due:
        raise typer.BadParameter("Use either --due or --clear-due")

    changes: dict = {}
    if name is not None:
        changes["name"] = validate_name(name)
    if task_type is not None:
        changes["type"] = task_type
    if category:
        changes["categories"] = category
    if urgency:
        changes["urgency"] = parse_urgency(urgency)
    if notes is not None:
        changes["notes"] = notes
    if due is not None:
        changes["due_date"] = parse_due(due)
    if clear_due:
        changes["due_date"] = None

    if not changes:
        print_info("Nothing to update.")
        return

    registry = get_registry()
    task = resolve_task(registry, task_ref)
    registry.update_task(task.id, TaskPatch(**changes))
    print_success(f"Updated {task.name}")


@app.command("color")
def color(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    palette: Optional[str] = typer.Option(None, "--palette", "-p", help="Preset palette name"),
    primary: Optional[str] = typer.Option(None, "--primary", help="Primary hex colour"),
    secondary: Optional[str] = typer.Option(None, "--secondary", help="Secondary hex colour"),
    accent: Optional[str] = typer.Option(None, "--accent", help="Accent hex colour"),
    text: Optional[str] = typer.Option(None, "--text", help="Text hex colour"),
) -> None:
    """Change a task's colour palette."""
    new_color = resolve_color(palette, primary, secondary, accent, text)
    if new_color is None:
        raise typer.BadParameter("Give --palette or all four custom colours")

    registry = get_registry()
    task = resolve_task(registry, task_ref)
    registry.update_task_color(task.id, new_color)
    print_success(f"Updated colour of {task.name}")


@app.command("link")
def link(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    url: str = typer.Argument(..., help="Link target"),
    title: str = typer.Option("", "--title", help="Display title (defaults to the URL)"),
) -> None:
    """Attach a link to a task."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    added = registry.add_link(task.id, url, title)
    print_success(f"Linked {added.title} to {task.name}")


@app.command("unlink")
def unlink(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    link_id: str = typer.Argument(..., help="Link id (or unique prefix)"),
) -> None:
    """Remove a link from a task."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    matches = [item for item in task.links if item.id.startswith(link_id)]
    if len(matches) != 1 or not registry.remove_link(task.id, matches[0].id):
        print_error(f"Link not found: {link_id}")
        raise typer.Exit(1)
    print_success(f"Removed link from {task.name}")


@app.command("attach")
def attach(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    name: str = typer.Argument(..., help="Attachment name"),
    url: str = typer.Argument(..., help="Attachment location"),
) -> None:
    """Attach a file reference to a task."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    registry.add_attachment(task.id, name, url)
    print_success(f"Attached {name} to {task.name}")


def done(task_ref: str = typer.Argument(..., help="Task id (or unique prefix)")) -> None:
    """Toggle completion of a task and all its subtasks."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    registry.toggle_task_completion(task.id)
    state = "completed" if task.is_completed else "reopened"
    print_success(f"{task.name} {state}")


def delete(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task together with all its subtasks."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    if not yes and task.subtasks:
        typer.confirm(f"Delete {task.name} and its subtasks?", abort=True)
    registry.delete_task(task.id)
    print_success(f"Deleted {task.name}")


# =============================================================================
# Views
# =============================================================================


def list_tasks(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
    query: Optional[str] = typer.Option(
        None, "--query", "-q", help="Search text, or urgent/completed/overdue"
    ),
    status: StatusFilter = typer.Option(
        StatusFilter.ALL, "--status", "-s", case_sensitive=False, help="Completion filter"
    ),
) -> None:
    """List tasks the way the main view shows them."""
    tasks = filter_view(get_registry(), category=category, query=query, status=status)
    print_task_list(tasks)


def tree() -> None:
    """Show every task with its subtasks and completion percentage."""
    tasks = get_registry().get_all_tasks()
    if not tasks:
        print_info("No tasks yet. Create one with: tasknest add NAME")
        return
    print_forest(tasks)


def show(task_ref: str = typer.Argument(..., help="Task id (or unique prefix)")) -> None:
    """Show one task in detail."""
    print_task_detail(resolve_task(get_registry(), task_ref))


def search(query: str = typer.Argument(..., help="Text to find in names and notes")) -> None:
    """Search every task (subtasks included) by name and notes."""
    print_task_list(get_registry().search_tasks(query), f"No tasks match '{query}'.")


def stats() -> None:
    """Show task statistics."""
    summary = get_registry().get_task_stats()
    print_header("STATS")
    typer.echo(f"Total:       {summary.total}")
    typer.echo(f"Completed:   {summary.completed} ({summary.completion_rate}%)")
    typer.echo(f"Overdue:     {summary.overdue}")
    typer.echo(f"Upcoming:    {summary.upcoming}")


@app.command("overdue")
def overdue() -> None:
    """List incomplete root tasks past their due date."""
    print_task_list(get_registry().get_overdue_tasks(), "Nothing overdue.")


@app.command("upcoming")
def upcoming(
    hours: Optional[float] = typer.Option(
        None, "--hours", min=0, help="Window in hours (default from config, 48)"
    ),
) -> None:
    """List incomplete root tasks due soon."""
    print_task_list(get_registry().get_upcoming_tasks(hours), "Nothing due soon.")


# Also reachable as top-level shortcuts
app.command("add")(add)
app.command("done")(done)
app.command("delete")(delete)
app.command("list")(list_tasks)
app.command("tree")(tree)
app.command("show")(show)
app.command("search")(search)
app.command("stats")(stats)
