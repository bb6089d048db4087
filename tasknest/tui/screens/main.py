"""Main screen for the TaskNest TUI.

The MainScreen shows the task forest on the left and the selected task's
details and channel on the right.
"""

from typing import TYPE_CHECKING, Optional

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Footer, Header, Label

from tasknest.tui.widgets import ChannelPanel, TaskPanel, TaskTreeWidget

if TYPE_CHECKING:
    from tasknest.tui.app import TaskNestApp


class MainScreen(Screen):
    """Main application screen with split layout.

    Layout:
    +-----------------------+-------------------------+
    | Task tree (45%)       | Task details            |
    |                       |-------------------------|
    |                       | Channel                 |
    +-----------------------+-------------------------+
    | Footer with keybindings                         |
    +-------------------------------------------------+
    """

    DEFAULT_CSS = """
    #main-container {
        height: 1fr;
    }

    #left-panel {
        width: 45%;
        height: 100%;
    }

    #right-panel {
        width: 55%;
        height: 100%;
    }

    #task-tree {
        height: 100%;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Container(id="left-panel"):
                yield TaskTreeWidget(id="task-tree")
            with Vertical(id="right-panel"):
                yield TaskPanel(id="task-panel")
                yield ChannelPanel(id="channel-panel")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_data()
        self.query_one("#task-tree", TaskTreeWidget).focus()

    @property
    def tasknest_app(self) -> "TaskNestApp":
        return self.app  # type: ignore[return-value]

    def refresh_data(self, select_id: Optional[str] = None) -> None:
        """Re-read the whole forest from the registry and redraw every panel."""
        app = self.tasknest_app
        registry = app.registry
        if select_id is not None:
            app.selected_task_id = select_id

        self.query_one("#task-tree", TaskTreeWidget).load_tasks(
            registry.get_all_tasks(), select_id=app.selected_task_id
        )

        selected = None
        if app.selected_task_id is not None:
            selected = registry.get_task_by_id(app.selected_task_id)
            if selected is None:
                app.selected_task_id = None
        self._show_task(selected)

        stats = registry.get_task_stats()
        self.sub_title = (
            f"{stats.total} tasks, {stats.completed} done ({stats.completion_rate}%), "
            f"{stats.overdue} overdue, {stats.upcoming} upcoming"
        )

    def _show_task(self, task) -> None:
        self.query_one("#task-panel", TaskPanel).show_task(task)
        self.query_one("#channel-panel", ChannelPanel).show_channel(task)

    def on_task_tree_widget_task_highlighted(self, event: TaskTreeWidget.TaskHighlighted) -> None:
        app = self.tasknest_app
        app.selected_task_id = event.task_id
        task = app.registry.get_task_by_id(event.task_id) if event.task_id else None
        self._show_task(task)

    def on_task_tree_widget_completion_toggle_requested(
        self, event: TaskTreeWidget.CompletionToggleRequested
    ) -> None:
        self.tasknest_app.selected_task_id = event.task_id
        self.tasknest_app.action_toggle_completion()


class HelpModal(ModalScreen):
    """Modal dialog showing keybinding help."""

    BINDINGS = [
        ("escape", "dismiss", "Close"),
        ("question_mark", "dismiss", "Close"),
    ]

    DEFAULT_CSS = """
    HelpModal {
        align: center middle;
    }

    #help-modal {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    #help-title {
        text-style: bold;
        margin-bottom: 1;
        color: $primary;
    }

    .help-section-title {
        text-style: bold;
        color: $secondary;
        margin-top: 1;
    }

    .help-row {
        height: 1;
    }

    .help-key {
        width: 12;
        color: $warning;
    }
    """

    def compose(self) -> ComposeResult:
        with Container(id="help-modal"):
            yield Label("TaskNest - Keyboard Shortcuts", id="help-title")

            yield Label("Tasks", classes="help-section-title")
            yield self._help_row("a", "Add a root task")
            yield self._help_row("s", "Add a subtask to the selected task")
            yield self._help_row("Space", "Toggle completion (with subtasks)")
            yield self._help_row("m", "Post a message in the task channel")
            yield self._help_row("x", "Delete the selected task")
            yield self._help_row("r", "Refresh every panel")

            yield Label("Navigation", classes="help-section-title")
            yield self._help_row("Up/Down", "Move through the tree")
            yield self._help_row("Enter", "Expand or collapse")

            yield Label("Application", classes="help-section-title")
            yield self._help_row("?", "Show this help")
            yield self._help_row("q", "Quit")

    def _help_row(self, key: str, description: str) -> Horizontal:
        return Horizontal(
            Label(f"  {key}", classes="help-key"),
            Label(description),
            classes="help-row",
        )


__all__ = ["MainScreen", "HelpModal"]
