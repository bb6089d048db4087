"""Operations on a task's message channel.

Starring, pinning, reactions, replies and bulk actions over
``Task.messages``. Functions that change a message refresh the owning
task's ``updated_at``; lookups that miss return None/False.
"""

from collections.abc import Iterable

from .models import DEFAULT_AUTHOR, MessageAttachment, MessageReaction, Task, TaskMessage


def toggle_star(task: Task, message_id: str) -> bool:
    message = task.find_message(message_id)
    if message is None:
        return False
    message.is_starred = not message.is_starred
    task.touch()
    return True


def toggle_pin(task: Task, message_id: str) -> bool:
    message = task.find_message(message_id)
    if message is None:
        return False
    message.is_pinned = not message.is_pinned
    task.touch()
    return True


def toggle_reaction(task: Task, message_id: str, emoji: str, user: str = DEFAULT_AUTHOR) -> bool:
    """Add or withdraw ``user``'s ``emoji`` reaction on a message.

    If the user already reacted with that emoji the reaction is withdrawn,
    and an emoji nobody reacts with any more is dropped from the message.

    Returns:
        True if the message exists.
    """
    message = task.find_message(message_id)
    if message is None:
        return False

    reaction = message.find_reaction(emoji)
    if reaction is None:
        message.reactions.append(MessageReaction(emoji=emoji, users=[user]))
    elif reaction.has_user(user):
        reaction.remove_user(user)
        if reaction.count == 0:
            message.reactions = [r for r in message.reactions if r.emoji != emoji]
    else:
        reaction.add_user(user)

    task.touch()
    return True


def reply(
    task: Task,
    reply_to_id: str,
    content: str,
    author: str = DEFAULT_AUTHOR,
    attachments: list[MessageAttachment] | None = None,
) -> TaskMessage | None:
    """Post a message that replies to an existing one.

    Returns:
        The new message, or None if ``reply_to_id`` is not in the channel.
    """
    if task.find_message(reply_to_id) is None:
        return None
    message = task.add_message(content, author=author, attachments=attachments)
    message.reply_to_id = reply_to_id
    return message


def get_reply_target(task: Task, message: TaskMessage) -> TaskMessage | None:
    if message.reply_to_id is None:
        return None
    return task.find_message(message.reply_to_id)


def pinned_first(messages: Iterable[TaskMessage]) -> list[TaskMessage]:
    """Order messages with pinned ones first, otherwise keeping channel order."""
    return sorted(messages, key=lambda message: not message.is_pinned)


def starred(messages: Iterable[TaskMessage]) -> list[TaskMessage]:
    return [message for message in messages if message.is_starred]


def delete_messages(task: Task, message_ids: Iterable[str]) -> int:
    """Delete several messages; return how many were found and removed."""
    return sum(1 for message_id in list(message_ids) if task.delete_message(message_id))


def format_transcript(task: Task, message_ids: Iterable[str] | None = None) -> str:
    """Render messages as ``author: content`` lines.

    Args:
        task: Task whose channel to render.
        message_ids: Messages to include, in the given order. All messages
            in channel order when omitted; unknown ids are skipped.

    Returns:
        Newline-separated transcript.
    """
    if message_ids is None:
        selected = list(task.messages)
    else:
        selected = [m for m in (task.find_message(i) for i in message_ids) if m is not None]
    return "\n".join(f"{message.author}: {message.content}" for message in selected)
