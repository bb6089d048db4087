"""Task tree widget for the TaskNest TUI."""

from typing import Optional

from rich.markup import escape
from textual.message import Message
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from tasknest.domain.task import Task, TaskUrgency

COMPLETION_ICONS = {
    True: "[green]☑[/green]",
    False: "[dim]☐[/dim]",
}


def task_label(task: Task) -> str:
    """Tree label: completion box, name, progress for parents, urgent marker."""
    label = f"{COMPLETION_ICONS[task.is_completed]} {escape(task.name)}"
    if not task.is_leaf():
        label = f"[bold]{label}[/bold] [dim]{task.get_completion_percentage()}%[/dim]"
    if TaskUrgency.URGENT in task.urgency and not task.is_completed:
        label += " [red]![/red]"
    if task.is_overdue():
        label += " [red]overdue[/red]"
    return label


class TaskTreeWidget(Tree[Task]):
    """Widget displaying the task forest with completion icons."""

    class TaskHighlighted(Message):
        """Posted when the cursor moves onto a task."""

        def __init__(self, task_id: Optional[str]) -> None:
            super().__init__()
            self.task_id = task_id

    class CompletionToggleRequested(Message):
        """Posted when space is pressed on a task."""

        def __init__(self, task_id: str) -> None:
            super().__init__()
            self.task_id = task_id

    DEFAULT_CSS = """
    TaskTreeWidget {
        background: $surface;
        padding: 1;
        border: solid $primary;
    }

    TaskTreeWidget:focus > .tree--cursor {
        background: $primary;
    }
    """

    def __init__(
        self,
        label: str = "Tasks",
        id: Optional[str] = None,
        classes: Optional[str] = None,
    ) -> None:
        super().__init__(label, id=id, classes=classes)
        self.show_root = False
        self._task_nodes: dict[str, TreeNode[Task]] = {}

    def load_tasks(self, tasks: list[Task], select_id: Optional[str] = None) -> None:
        """Rebuild the tree from the root tasks.

        Expanded tasks stay expanded across reloads.

        Args:
            tasks: Root tasks, in display order.
            select_id: Task to put the cursor on afterwards, if present.
        """
        expanded = {task_id for task_id, node in self._task_nodes.items() if node.is_expanded}
        self._task_nodes.clear()
        self.clear()

        stack: list[tuple[TreeNode[Task], Task]] = [(self.root, task) for task in reversed(tasks)]
        while stack:
            parent, task = stack.pop()
            if task.is_leaf():
                node = parent.add_leaf(task_label(task), data=task)
            else:
                node = parent.add(task_label(task), data=task, expand=task.id in expanded)
                stack.extend((node, child) for child in reversed(task.subtasks))
            self._task_nodes[task.id] = node

        self.root.expand()
        if select_id is not None and select_id in self._task_nodes:
            node = self._task_nodes[select_id]
            ancestor = node.parent
            while ancestor is not None:
                ancestor.expand()
                ancestor = ancestor.parent
            self.call_after_refresh(self.move_cursor, node)

    def get_selected_task(self) -> Optional[Task]:
        node = self.cursor_node
        if node is None:
            return None
        return node.data

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted[Task]) -> None:
        event.stop()
        task = event.node.data
        self.post_message(self.TaskHighlighted(task.id if task is not None else None))

    def action_toggle_node(self) -> None:
        """Space toggles completion; expanding stays on enter."""
        task = self.get_selected_task()
        if task is not None:
            self.post_message(self.CompletionToggleRequested(task.id))
