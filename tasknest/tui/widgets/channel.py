"""Task channel widget for the TaskNest TUI."""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from tasknest.domain.task import Task, TaskMessage, get_reply_target, pinned_first


def render_message(message: TaskMessage, replied_to: Optional[TaskMessage] = None) -> Text:
    """One channel entry as styled text (user content is never parsed as markup)."""
    text = Text()
    if message.is_pinned:
        text.append("\U0001f4cc ")
    if message.is_starred:
        text.append("⭐ ")
    stamp = message.timestamp.astimezone().strftime("%H:%M")
    text.append(f"{stamp} ", style="dim")
    if message.is_system:
        text.append(message.content, style="italic cyan")
    else:
        text.append(f"{message.author}: ", style="bold")
        text.append(message.content)
    if replied_to is not None:
        text.append(f"\n    ↳ {replied_to.author}: {replied_to.content[:60]}", style="dim")
    if message.reactions:
        text.append("\n    " + "  ".join(f"{r.emoji} {r.count}" for r in message.reactions))
    return text


class ChannelPanel(VerticalScroll):
    """Scrollable message channel of the selected task, pinned messages first."""

    DEFAULT_CSS = """
    ChannelPanel {
        background: $surface;
        border: solid $secondary;
        padding: 0 1;
        height: 1fr;
    }

    ChannelPanel .channel-message {
        margin: 0 0 1 0;
    }

    ChannelPanel .channel-empty {
        color: $text-muted;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("No task selected", classes="channel-empty")

    def show_channel(self, task: Optional[Task]) -> None:
        self.remove_children()
        if task is None:
            self.mount(Static("No task selected", classes="channel-empty"))
            return
        if not task.messages:
            self.mount(Static("No messages yet. Press m to post one.", classes="channel-empty"))
            return
        self.mount_all(
            Static(render_message(m, get_reply_target(task, m)), classes="channel-message")
            for m in pinned_first(task.messages)
        )
        self.scroll_end(animate=False)
