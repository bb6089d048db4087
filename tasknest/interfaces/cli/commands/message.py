"""Task channel CLI commands.

Each task has its own message channel. These commands post, reply to,
delete, star, pin, react to and attach files to messages in it.
"""

from typing import Optional

import typer

from tasknest.domain.task import MessageAttachmentKind, channel
from tasknest.interfaces.cli.common import (
    format_message,
    get_registry,
    print_error,
    print_info,
    print_success,
    resolve_message,
    resolve_task,
    short_id,
)

app = typer.Typer(help="Task channel commands")


@app.command("list")
def list_messages(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    starred_only: bool = typer.Option(False, "--starred", help="Only starred messages"),
) -> None:
    """Show a task's channel, pinned messages first."""
    task = resolve_task(get_registry(), task_ref)
    if starred_only:
        messages = channel.starred(task.messages)
    else:
        messages = channel.pinned_first(task.messages)
    if not messages:
        print_info("No messages.")
        return
    for message in messages:
        typer.echo(format_message(message, channel.get_reply_target(task, message)))


@app.command("add")
def add(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    content: str = typer.Argument(..., help="Message text"),
    author: Optional[str] = typer.Option(
        None, "--author", help="Author name (default from config)"
    ),
) -> None:
    """Post a message to a task's channel."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    message = registry.add_message(task.id, content, author)
    print_success(f"Posted {short_id(message.id)} to {task.name}")


@app.command("reply")
def reply(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    message_ref: str = typer.Argument(..., help="Message to reply to"),
    content: str = typer.Argument(..., help="Reply text"),
    author: Optional[str] = typer.Option(None, "--author", help="Author name"),
) -> None:
    """Reply to a message in a task's channel."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    target = resolve_message(task, message_ref)
    message = registry.add_message(task.id, content, author, reply_to_id=target.id)
    print_success(f"Replied with {short_id(message.id)}")


@app.command("delete")
def delete(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    message_ref: str = typer.Argument(..., help="Message id (or unique prefix)"),
) -> None:
    """Delete a message."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    target = resolve_message(task, message_ref)
    registry.delete_message(task.id, target.id)
    print_success("Message deleted")


@app.command("attach")
def attach(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    message_ref: str = typer.Argument(..., help="Message id (or unique prefix)"),
    name: str = typer.Argument(..., help="Attachment name"),
    url: str = typer.Argument(..., help="Attachment location"),
    kind: MessageAttachmentKind = typer.Option(
        MessageAttachmentKind.FILE, "--type", "-t", case_sensitive=False, help="Attachment kind"
    ),
) -> None:
    """Attach a file or link to a message."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    target = resolve_message(task, message_ref)
    registry.add_message_attachment(task.id, target.id, name, url, kind)
    print_success(f"Attached {name} to message {short_id(target.id)}")


@app.command("star")
def star(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    message_ref: str = typer.Argument(..., help="Message id (or unique prefix)"),
) -> None:
    """Toggle the star on a message."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    target = resolve_message(task, message_ref)
    registry.toggle_message_star(task.id, target.id)
    print_success("Starred" if target.is_starred else "Unstarred")


@app.command("pin")
def pin(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    message_ref: str = typer.Argument(..., help="Message id (or unique prefix)"),
) -> None:
    """Toggle the pin on a message."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    target = resolve_message(task, message_ref)
    registry.toggle_message_pin(task.id, target.id)
    print_success("Pinned" if target.is_pinned else "Unpinned")


@app.command("react")
def react(
    task_ref: str = typer.Argument(..., help="Task id (or unique prefix)"),
    message_ref: str = typer.Argument(..., help="Message id (or unique prefix)"),
    emoji: str = typer.Argument(..., help="Reaction emoji"),
    user: Optional[str] = typer.Option(None, "--user", help="Reacting user (default from config)"),
) -> None:
    """Add or remove your reaction on a message."""
    registry = get_registry()
    task = resolve_task(registry, task_ref)
    target = resolve_message(task, message_ref)
    if not registry.toggle_reaction(task.id, target.id, emoji, user):
        print_error("Could not update reaction")
        raise typer.Exit(1)
    reaction = target.find_reaction(emoji)
    print_success(f"{emoji} {reaction.count if reaction else 0}")


@app.command("export")
def export(task_ref: str = typer.Argument(..., help="Task id (or unique prefix)")) -> None:
    """Print the channel as plain text."""
    task = resolve_task(get_registry(), task_ref)
    typer.echo(channel.format_transcript(task))
