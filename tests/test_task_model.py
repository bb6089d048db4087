# tests/test_task_model.py

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from tasknest.domain.shared import utcnow
from tasknest.domain.task import (
    COMPLETED_MESSAGE,
    DEFAULT_TASK_COLOR,
    MessageKind,
    Task,
    TaskPatch,
    TaskType,
    TaskUrgency,
    get_palette,
    inherit_color,
)


def _tree() -> tuple[Task, Task, Task, Task]:
    """A with subtasks B and C; C has subtask D."""
    a = Task.create("A")
    b = Task.create("B")
    c = Task.create("C")
    d = Task.create("D")
    a.add_subtask(b)
    a.add_subtask(c)
    c.add_subtask(d)
    return a, b, c, d


def test_create_defaults() -> None:
    task = Task.create("Read chapter 3")

    assert task.type == TaskType.DO
    assert task.categories == ["Personal"]
    assert task.urgency == [TaskUrgency.CASUAL]
    assert task.notes == ""
    assert task.is_completed is False
    assert task.parent_id is None
    assert task.messages == []
    assert task.color == DEFAULT_TASK_COLOR
    assert task.created_at == task.updated_at


def test_ids_are_unique() -> None:
    assert Task.create("x").id != Task.create("x").id


def test_leaf_completion_is_all_or_nothing() -> None:
    task = Task.create("leaf")
    assert task.get_completion_percentage() == 0
    task.toggle_completion()
    assert task.get_completion_percentage() == 100


def test_parent_completion_counts_all_descendants() -> None:
    a, b, c, d = _tree()

    d.is_completed = True
    assert a.get_completion_percentage() == 33
    assert c.get_completion_percentage() == 100

    b.is_completed = True
    assert a.get_completion_percentage() == 67


def test_parent_percentage_ignores_own_flag() -> None:
    a, _, _, _ = _tree()
    a.is_completed = True
    assert a.get_completion_percentage() == 0


def test_toggle_cascades_down_in_both_directions() -> None:
    a, b, c, d = _tree()

    a.toggle_completion()
    assert [t.is_completed for t in (a, b, c, d)] == [True, True, True, True]

    a.toggle_completion()
    assert [t.is_completed for t in (a, b, c, d)] == [False, False, False, False]


def test_toggle_overrides_mixed_subtree() -> None:
    a, b, _, d = _tree()
    b.is_completed = True

    a.toggle_completion()
    assert d.is_completed is True

    a.toggle_completion()
    assert b.is_completed is False


def test_toggle_posts_system_message() -> None:
    task = Task.create("t")
    task.toggle_completion()

    last = task.messages[-1]
    assert last.content == COMPLETED_MESSAGE
    assert last.type == MessageKind.SYSTEM
    assert last.author == "System"


def test_add_subtask_links_parent_and_inherits_color() -> None:
    parent = Task.create("parent", color=get_palette("Mint Fresh"))
    child = Task.create("child")

    parent.add_subtask(child)

    assert child.parent_id == parent.id
    assert parent.subtasks == [child]
    assert child.color == inherit_color(parent.color)
    assert parent.messages[-1].content == "➕ Subtask added: child"


def test_remove_nested_subtask() -> None:
    a, b, c, d = _tree()

    assert a.remove_subtask(d.id) is True
    assert c.subtasks == []
    assert a.remove_subtask("missing") is False
    assert a.find_subtask(b.id) is b


@pytest.mark.parametrize(
    ("hours", "urgent"),
    [(36, True), (72, False), (-5, False)],
)
def test_urgency_escalates_near_due_date(hours: int, urgent: bool) -> None:
    task = Task.create("t", due_date=utcnow() + timedelta(hours=hours))
    assert (TaskUrgency.URGENT in task.urgency) is urgent


def test_escalation_adds_urgent_once() -> None:
    task = Task.create("t", urgency=[TaskUrgency.URGENT], due_date=utcnow() + timedelta(hours=1))
    assert task.urgency == [TaskUrgency.URGENT]
    assert task.escalate_urgency() is False


def test_overdue_and_upcoming() -> None:
    now = utcnow()
    late = Task.create("late", due_date=now - timedelta(hours=1))
    soon = Task.create("soon", due_date=now + timedelta(hours=10))

    assert late.is_overdue(now)
    assert not soon.is_overdue(now)
    assert soon.is_upcoming(timedelta(hours=48), now)

    soon.toggle_completion()
    assert not soon.is_upcoming(timedelta(hours=48), now)


def test_update_task_applies_only_set_fields() -> None:
    task = Task.create("old", categories=["Work"], due_date=utcnow() + timedelta(days=10))

    task.update_task(TaskPatch(name="new", notes="details"))

    assert task.name == "new"
    assert task.notes == "details"
    assert task.categories == ["Work"]
    assert task.due_date is not None


def test_update_task_can_clear_due_date() -> None:
    task = Task.create("t", due_date=utcnow() + timedelta(days=10))
    task.update_task(TaskPatch(due_date=None))
    assert task.due_date is None


def test_update_task_rechecks_urgency() -> None:
    task = Task.create("t")
    task.update_task(TaskPatch(due_date=utcnow() + timedelta(hours=3)))
    assert TaskUrgency.URGENT in task.urgency


def test_patch_rejects_structural_fields() -> None:
    with pytest.raises(ValidationError):
        TaskPatch.model_validate({"subtasks": []})


def test_patch_accepts_legacy_single_category() -> None:
    patch = TaskPatch.model_validate({"category": "Work"})
    assert patch.categories == ["Work"]


def test_patch_rejects_empty_categories() -> None:
    with pytest.raises(ValidationError):
        TaskPatch(categories=[])


def test_links_and_attachments() -> None:
    task = Task.create("t")
    link = task.add_link("https://example.org", "Example")
    attachment = task.add_attachment("notes.pdf", "file:///tmp/notes.pdf")

    assert task.remove_link(link.id) is True
    assert task.remove_link(link.id) is False
    assert task.remove_attachment(attachment.id) is True
    assert task.attachments == []


def test_removing_unknown_link_leaves_task_untouched() -> None:
    task = Task.create("t")
    stamp = task.updated_at

    assert task.remove_link("nope") is False
    assert task.remove_attachment("nope") is False
    assert task.updated_at == stamp


def test_messages() -> None:
    task = Task.create("t")
    message = task.add_message("hello", author="Ann")

    assert task.find_message(message.id) is message
    assert message.type == MessageKind.TEXT
    assert task.delete_message(message.id) is True
    assert task.delete_message(message.id) is False


def test_serialize_uses_camel_case_and_reports_progress() -> None:
    a, _, _, d = _tree()
    d.is_completed = True

    data = a.serialize()

    assert data["completionPercentage"] == 33
    assert "isCompleted" in data
    assert "createdAt" in data
    assert data["subtasks"][1]["subtasks"][0]["parentId"] == data["subtasks"][1]["id"]
