# tests/test_channel.py

from __future__ import annotations

from tasknest.domain.task import (
    Task,
    delete_messages,
    format_transcript,
    get_reply_target,
    pinned_first,
    reply,
    starred,
    toggle_pin,
    toggle_reaction,
    toggle_star,
)


def _task_with_messages() -> tuple[Task, list]:
    task = Task.create("channel")
    messages = [task.add_message(text, author="Ann") for text in ("one", "two", "three")]
    return task, messages


def test_star_and_pin_toggle() -> None:
    task, (first, second, third) = _task_with_messages()

    assert toggle_star(task, second.id)
    assert toggle_pin(task, third.id)
    assert starred(task.messages) == [second]
    assert pinned_first(task.messages) == [third, first, second]

    assert toggle_pin(task, third.id)
    assert third.is_pinned is False
    assert toggle_star(task, "missing") is False


def test_reaction_toggle_per_user() -> None:
    task, (message, _, _) = _task_with_messages()

    toggle_reaction(task, message.id, "👍", "Ann")
    toggle_reaction(task, message.id, "👍", "Bob")
    assert message.find_reaction("👍").count == 2

    toggle_reaction(task, message.id, "👍", "Ann")
    assert message.find_reaction("👍").users == ["Bob"]

    toggle_reaction(task, message.id, "👍", "Bob")
    assert message.reactions == []


def test_reply_links_to_target() -> None:
    task, (first, _, _) = _task_with_messages()

    answer = reply(task, first.id, "agreed", author="Bob")

    assert answer is not None
    assert answer.reply_to_id == first.id
    assert get_reply_target(task, answer) is first
    assert reply(task, "missing", "lost") is None


def test_delete_messages_counts_found() -> None:
    task, (first, second, _) = _task_with_messages()
    assert delete_messages(task, [first.id, "missing", second.id]) == 2
    assert len(task.messages) == 1


def test_transcript() -> None:
    task, (first, _, third) = _task_with_messages()

    assert format_transcript(task) == "Ann: one\nAnn: two\nAnn: three"
    assert format_transcript(task, [third.id, first.id]) == "Ann: three\nAnn: one"
