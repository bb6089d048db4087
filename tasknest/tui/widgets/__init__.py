"""TUI widgets for TaskNest."""

from .channel import ChannelPanel
from .task_panel import TaskPanel
from .tree_view import TaskTreeWidget

__all__ = [
    "TaskTreeWidget",
    "TaskPanel",
    "ChannelPanel",
]
