"""Main TaskNest TUI application.

The TaskNestApp owns the session's task registry. Every action calls the
registry and then redraws the main screen from the full forest.
"""

import logging
from typing import Optional

from textual.app import App
from textual.binding import Binding

from tasknest.application import TaskRegistry
from tasknest.tui.screens import ConfirmModal, HelpModal, MainScreen, PromptModal

logger = logging.getLogger(__name__)


class TaskNestApp(App):
    """Hierarchical task manager with a message channel per task."""

    TITLE = "TaskNest"
    SUB_TITLE = "Tasks, subtasks and channels"

    BINDINGS = [
        Binding("a", "add_task", "Add", show=True),
        Binding("s", "add_subtask", "Subtask", show=True),
        Binding("space", "toggle_completion", "Done", show=True),
        Binding("m", "post_message", "Message", show=True),
        Binding("x", "delete_task", "Delete", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        Binding("question_mark", "show_help", "Help", show=True, key_display="?"),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, registry: TaskRegistry) -> None:
        super().__init__()
        self.registry = registry
        self.selected_task_id: Optional[str] = None

    def on_mount(self) -> None:
        self.push_screen(MainScreen())

    # =========================================================================
    # Actions
    # =========================================================================

    def action_add_task(self) -> None:
        if not self._on_main_screen():
            return

        def create(name: Optional[str]) -> None:
            if name is None:
                return
            task = self.registry.create_task(name)
            self.notify(f"Created: {task.name}")
            self._refresh_main(select_id=task.id)

        self.push_screen(PromptModal("New task", placeholder="Task name"), create)

    def action_add_subtask(self) -> None:
        if not self._on_main_screen():
            return
        parent = self._selected_task()
        if parent is None:
            self.notify("Select a task first", severity="warning")
            return

        def create(name: Optional[str]) -> None:
            if name is None:
                return
            subtask = self.registry.add_subtask(parent.id, name)
            if subtask is None:
                self.notify("Subtask not added: parent gone or too deep", severity="error")
            else:
                self.notify(f"Added subtask: {subtask.name}")
            self._refresh_main(select_id=subtask.id if subtask else None)

        prompt = PromptModal(f"New subtask of {parent.name}", placeholder="Subtask name")
        self.push_screen(prompt, create)

    def action_toggle_completion(self) -> None:
        if not self._on_main_screen():
            return
        task = self._selected_task()
        if task is None:
            self.notify("Select a task first", severity="warning")
            return
        self.registry.toggle_task_completion(task.id)
        self.notify(f"{'Completed' if task.is_completed else 'Reopened'}: {task.name}")
        self._refresh_main()

    def action_post_message(self) -> None:
        if not self._on_main_screen():
            return
        task = self._selected_task()
        if task is None:
            self.notify("Select a task first", severity="warning")
            return

        def post(content: Optional[str]) -> None:
            if content is None:
                return
            self.registry.add_message(task.id, content)
            self._refresh_main()

        prompt = PromptModal(f"Message to {task.name}", placeholder="Write a message")
        self.push_screen(prompt, post)

    def action_delete_task(self) -> None:
        if not self._on_main_screen():
            return
        task = self._selected_task()
        if task is None:
            self.notify("Select a task first", severity="warning")
            return

        def confirm(answer: Optional[bool]) -> None:
            if not answer:
                return
            if self.registry.delete_task(task.id):
                self.notify(f"Deleted: {task.name}")
            self.selected_task_id = None
            self._refresh_main()

        question = f"Delete '{task.name}'"
        if task.subtasks:
            question += " and all its subtasks"
        self.push_screen(ConfirmModal(question + "?"), confirm)

    def action_refresh(self) -> None:
        self._refresh_main()
        self.notify("Refreshed")

    def action_show_help(self) -> None:
        self.push_screen(HelpModal())

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _on_main_screen(self) -> bool:
        return isinstance(self.screen, MainScreen)

    def _selected_task(self):
        if self.selected_task_id is None:
            return None
        return self.registry.get_task_by_id(self.selected_task_id)

    def _refresh_main(self, select_id: Optional[str] = None) -> None:
        for screen in self.screen_stack:
            if isinstance(screen, MainScreen):
                screen.refresh_data(select_id=select_id)


def run_tui(registry: TaskRegistry) -> None:
    """Run the TUI until the user quits."""
    logger.info("Starting TUI")
    TaskNestApp(registry).run()


__all__ = ["TaskNestApp", "run_tui"]
