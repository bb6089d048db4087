"""TUI screens for TaskNest."""

from .main import HelpModal, MainScreen
from .prompt import ConfirmModal, PromptModal

__all__ = [
    "MainScreen",
    "HelpModal",
    "PromptModal",
    "ConfirmModal",
]
