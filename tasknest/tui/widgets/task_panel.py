"""Task details panel widget for the TaskNest TUI."""

from typing import Optional

from rich.markup import escape
from textual.widgets import Static

from tasknest.domain.task import Task, TaskUrgency

URGENCY_COLORS = {
    TaskUrgency.CASUAL: "dim",
    TaskUrgency.IMPORTANT: "yellow",
    TaskUrgency.URGENT: "red",
}


class TaskPanel(Static):
    """Panel displaying details of the selected task."""

    DEFAULT_CSS = """
    TaskPanel {
        background: $surface;
        padding: 1 2;
        border: solid $primary;
        height: auto;
        min-height: 12;
    }

    TaskPanel.no-task {
        color: $text-muted;
    }
    """

    def __init__(
        self,
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__("No task selected", id=id, classes=classes)
        self._task: Optional[Task] = None
        self.add_class("no-task")

    @property
    def current_task(self) -> Optional[Task]:
        return self._task

    def show_task(self, task: Optional[Task]) -> None:
        """Display ``task``, or the empty state for None."""
        self._task = task
        if task is None:
            self.update("No task selected")
            self.add_class("no-task")
            return

        self.remove_class("no-task")
        lines = [f"[bold underline]{escape(task.name)}[/bold underline]", ""]

        status = "[green]Completed[/green]" if task.is_completed else "Open"
        lines.append(f"Status: {status}   Progress: {task.get_completion_percentage()}%")
        lines.append(f"Type: {task.type.value}   Categories: {escape(', '.join(task.categories))}")
        urgency = " ".join(
            f"[{URGENCY_COLORS[u]}]{u.value}[/{URGENCY_COLORS[u]}]" for u in task.urgency
        )
        lines.append(f"Urgency: {urgency}")

        if task.due_date is not None:
            due = task.due_date.astimezone().strftime("%Y-%m-%d %H:%M")
            if task.is_overdue():
                due = f"[red]{due} (overdue)[/red]"
            lines.append(f"Due: {due}")

        lines.append(f"Color: [{task.color.accent}]■[/] {task.color.primary}")

        if task.notes:
            lines.append("")
            lines.append("[bold]Notes:[/bold]")
            lines.extend(f"  {escape(line)}" for line in task.notes.split("\n"))

        if task.links:
            lines.append("")
            lines.append("[bold]Links:[/bold]")
            lines.extend(
                f"  [cyan]{escape(link.title)}[/cyan] {escape(link.url)}" for link in task.links
            )

        if task.attachments:
            lines.append("")
            lines.append("[bold]Attachments:[/bold]")
            lines.extend(f"  [magenta]{escape(a.name)}[/magenta]" for a in task.attachments)

        if task.subtasks:
            done = sum(1 for subtask in task.subtasks if subtask.is_completed)
            lines.append("")
            lines.append(f"Subtasks: {done}/{len(task.subtasks)} direct subtasks done")

        self.update("\n".join(lines))
