# tests/test_registry.py

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import pytest
from pydantic import ValidationError

from tasknest.application import TaskRegistry
from tasknest.domain.shared import Err, Ok, utcnow
from tasknest.domain.task import (
    COLOR_MESSAGE,
    CREATED_MESSAGE,
    MAX_TASK_DEPTH,
    MessageAttachment,
    TaskPatch,
    TaskType,
    TaskUrgency,
    get_palette,
    walk,
)
from tasknest.infrastructure.storage import MemorySnapshotRepository, SnapshotRepository


class FailingStore:
    """Store whose every load and save fails."""

    def __init__(self) -> None:
        self.save_attempts = 0

    def load(self):
        return Err("disk on fire")

    def save(self, data: dict[str, Any]):
        self.save_attempts += 1
        return Err("disk still on fire")


def test_empty_registry(registry: TaskRegistry) -> None:
    assert registry.get_all_tasks() == []
    assert registry.get_categories() == ["Personal", "School", "Work", "Vacation"]
    stats = registry.get_task_stats()
    assert stats.as_dict() == {
        "total": 0,
        "completed": 0,
        "overdue": 0,
        "upcoming": 0,
        "completionRate": 0,
    }


def test_create_task_persists_and_announces(
    registry: TaskRegistry, store: MemorySnapshotRepository
) -> None:
    task = registry.create_task("Write essay", TaskType.LEARN, "School")

    assert registry.get_all_tasks() == [task]
    assert task.messages[0].content == CREATED_MESSAGE
    assert store.save_count == 1
    assert store.data["tasks"][0]["name"] == "Write essay"


def test_new_category_label_is_registered(registry: TaskRegistry) -> None:
    registry.create_task("Gym", categories=["Health", "Personal"])
    assert registry.get_categories()[-1] == "Health"
    assert registry.get_categories().count("Personal") == 1


def test_create_subtask_inherits_parent_categories(registry: TaskRegistry) -> None:
    parent = registry.create_task("Trip", categories="Vacation", color=get_palette("Sky Blue"))

    sub = registry.create_subtask(parent.id, "Book hotel")

    assert sub is not None
    assert sub.parent_id == parent.id
    assert sub.categories == ["Vacation"]
    assert sub.color.primary != parent.color.primary
    assert CREATED_MESSAGE not in [m.content for m in sub.messages]
    assert parent.messages[-1].content == "➕ Subtask added: Book hotel"


def test_subtask_of_unknown_parent(registry: TaskRegistry, store: MemorySnapshotRepository) -> None:
    assert registry.add_subtask("missing", "orphan") is None
    assert store.save_count == 0


def test_nested_lookup(registry: TaskRegistry) -> None:
    root = registry.create_task("root")
    child = registry.add_subtask(root.id, "child")
    grandchild = registry.add_subtask(child.id, "grandchild")

    assert registry.get_task_by_id(grandchild.id) is grandchild
    assert registry.get_task_by_id("missing") is None


def test_toggle_cascades(registry: TaskRegistry) -> None:
    a = registry.create_task("A")
    b = registry.add_subtask(a.id, "B")
    c = registry.add_subtask(a.id, "C")
    d = registry.add_subtask(c.id, "D")

    assert registry.toggle_task_completion(a.id)
    assert all(t.is_completed for t in (a, b, c, d))
    assert a.get_completion_percentage() == 100

    registry.toggle_task_completion(a.id)
    assert not any(t.is_completed for t in (a, b, c, d))
    assert registry.toggle_task_completion("missing") is False


def test_search_covers_every_depth(registry: TaskRegistry) -> None:
    root = registry.create_task("Foo Bar")
    baz = registry.add_subtask(root.id, "Baz")
    registry.update_task(baz.id, TaskPatch(notes="contains FOO"))
    registry.create_task("Unrelated")

    assert registry.search_tasks("foo") == [root, baz]


def test_delete_root_and_nested(registry: TaskRegistry) -> None:
    keep = registry.create_task("keep")
    root = registry.create_task("root")
    child = registry.add_subtask(root.id, "child")
    grandchild = registry.add_subtask(child.id, "grandchild")
    sibling = registry.add_subtask(root.id, "sibling")

    assert registry.delete_task(child.id) is True
    assert registry.get_task_by_id(child.id) is None
    assert registry.get_task_by_id(grandchild.id) is None
    assert root.subtasks == [sibling]

    assert registry.delete_task(root.id) is True
    assert registry.get_all_tasks() == [keep]
    assert registry.delete_task(root.id) is False


def test_update_task_with_mapping(registry: TaskRegistry) -> None:
    task = registry.create_task("old")

    assert registry.update_task(task.id, {"name": "new", "category": "Errands"})

    assert task.name == "new"
    assert task.categories == ["Errands"]
    assert "Errands" in registry.get_categories()
    assert registry.update_task("missing", {"name": "x"}) is False


def test_update_task_rejects_unknown_fields(registry: TaskRegistry) -> None:
    task = registry.create_task("t")
    with pytest.raises(ValidationError):
        registry.update_task(task.id, {"subtasks": []})


def test_update_task_keeps_at_least_one_category(registry: TaskRegistry) -> None:
    task = registry.create_task("t", categories="Work")

    with pytest.raises(ValidationError):
        registry.update_task(task.id, {"categories": []})
    assert task.categories == ["Work"]


def test_update_color_posts_message(registry: TaskRegistry) -> None:
    task = registry.create_task("t")
    palette = get_palette("Peach")

    assert registry.update_task_color(task.id, palette)
    assert task.color == palette
    assert task.messages[-1].content == COLOR_MESSAGE


def test_root_filters(registry: TaskRegistry) -> None:
    now = utcnow()
    work = registry.create_task("report", categories="Work", due_date=now + timedelta(hours=20))
    late = registry.create_task("taxes", due_date=now - timedelta(days=1))
    later = registry.create_task(
        "vacation", categories="Vacation", due_date=now + timedelta(days=5)
    )
    registry.create_subtask(work.id, "draft", categories="Work", urgency=[TaskUrgency.URGENT])

    assert registry.get_tasks_by_category("Work") == [work]
    assert registry.get_tasks_by_urgency(TaskUrgency.URGENT) == [work]
    assert registry.get_overdue_tasks() == [late]
    assert registry.get_upcoming_tasks() == [work]
    assert registry.get_upcoming_tasks(24 * 7) == [work, later]


def test_upcoming_excludes_completed(registry: TaskRegistry) -> None:
    task = registry.create_task("soon", due_date=utcnow() + timedelta(hours=10))
    registry.toggle_task_completion(task.id)
    assert registry.get_upcoming_tasks(48) == []


def test_stats(registry: TaskRegistry) -> None:
    now = utcnow()
    done = registry.create_task("done")
    registry.toggle_task_completion(done.id)
    registry.create_task("late", due_date=now - timedelta(hours=2))
    registry.create_task("soon", due_date=now + timedelta(hours=2))

    stats = registry.get_task_stats()

    assert (stats.total, stats.completed, stats.overdue, stats.upcoming) == (3, 1, 1, 1)
    assert stats.completion_rate == 33


def test_add_category_is_idempotent(
    registry: TaskRegistry, store: MemorySnapshotRepository
) -> None:
    registry.add_category("Hobby")
    registry.add_category("Hobby")

    assert registry.get_categories().count("Hobby") == 1
    assert store.save_count == 2


def test_channel_operations(registry: TaskRegistry) -> None:
    task = registry.create_task("t")
    first = registry.add_message(task.id, "hello")
    answer = registry.add_message(task.id, "hi back", author="Bob", reply_to_id=first.id)

    assert first.author == "User"
    assert answer.reply_to_id == first.id
    assert registry.add_message(task.id, "lost", reply_to_id="missing") is None
    assert registry.add_message("missing", "lost") is None

    assert registry.toggle_message_star(task.id, first.id)
    assert registry.toggle_message_pin(task.id, first.id)
    assert registry.toggle_reaction(task.id, first.id, "🎉")
    assert first.is_starred and first.is_pinned
    assert first.find_reaction("🎉").users == ["User"]

    assert registry.delete_message(task.id, answer.id)
    assert registry.delete_message(task.id, answer.id) is False


def test_links_and_attachments(registry: TaskRegistry) -> None:
    task = registry.create_task("t")

    link = registry.add_link(task.id, "https://example.org")
    assert link.title == "https://example.org"
    assert registry.remove_link(task.id, link.id)
    assert registry.remove_link(task.id, link.id) is False

    attachment = registry.add_attachment(task.id, "plan.pdf", "file:///plan.pdf")
    assert task.attachments == [attachment]
    assert registry.add_link("missing", "https://example.org") is None


def test_state_survives_a_new_registry(file_registry: TaskRegistry, snapshot_path) -> None:
    root = file_registry.create_task("root", categories="Hobby")
    child = file_registry.add_subtask(root.id, "child")
    file_registry.toggle_task_completion(child.id)

    reloaded = TaskRegistry(SnapshotRepository(snapshot_path))

    assert reloaded.get_all_tasks() == file_registry.get_all_tasks()
    assert reloaded.get_task_by_id(child.id).parent_id == root.id
    assert "Hobby" in reloaded.get_categories()


def test_loads_lazily_once() -> None:
    store = MemorySnapshotRepository()
    TaskRegistry(store).create_task("saved")
    registry = TaskRegistry(store)

    assert registry.loaded is False
    assert [t.name for t in registry.get_all_tasks()] == ["saved"]
    assert registry.loaded is True


def test_failing_store_degrades_to_memory(caplog: pytest.LogCaptureFixture) -> None:
    store = FailingStore()
    registry = TaskRegistry(store)

    with caplog.at_level(logging.ERROR, logger="tasknest.application.registry"):
        task = registry.create_task("still works")

    assert registry.get_all_tasks() == [task]
    assert registry.get_categories() == ["Personal", "School", "Work", "Vacation"]
    assert store.save_attempts == 1
    assert any("Failed to load" in r.getMessage() for r in caplog.records)
    assert any("Failed to save" in r.getMessage() for r in caplog.records)


def test_corrupt_snapshot_starts_empty() -> None:
    store = MemorySnapshotRepository({"tasks": [{"id": "x"}]})
    registry = TaskRegistry(store)

    assert registry.get_all_tasks() == []
    assert isinstance(store.load(), Err)


def test_missing_snapshot_is_not_an_error() -> None:
    assert MemorySnapshotRepository().load() == Ok(None)


def _chain(registry: TaskRegistry, levels: int) -> str:
    """Nest ``levels`` subtasks below one root; return the deepest id."""
    deepest = registry.create_task("level 0").id
    for level in range(1, levels + 1):
        deepest = registry.add_subtask(deepest, f"level {level}").id
    return deepest


def test_nesting_stops_at_depth_limit(file_registry: TaskRegistry, snapshot_path) -> None:
    deepest = _chain(file_registry, MAX_TASK_DEPTH)

    assert file_registry.add_subtask(deepest, "one too many") is None
    assert file_registry.create_subtask(deepest, "still too many") is None

    reloaded = TaskRegistry(SnapshotRepository(snapshot_path))
    assert sum(1 for _ in walk(reloaded.get_all_tasks())) == MAX_TASK_DEPTH + 1
    assert reloaded.get_task_by_id(deepest) is not None


def test_deep_chain_in_memory_store(
    registry: TaskRegistry, store: MemorySnapshotRepository
) -> None:
    deepest = _chain(registry, MAX_TASK_DEPTH)
    registry.toggle_task_completion(deepest)

    reloaded = TaskRegistry(store)
    assert reloaded.get_task_by_id(deepest).is_completed
    assert store.save_count == MAX_TASK_DEPTH + 2


def test_message_attachment_survives_reload(
    file_registry: TaskRegistry, snapshot_path
) -> None:
    task = file_registry.create_task("t")
    message = file_registry.add_message(task.id, "see file")

    attachment = file_registry.add_message_attachment(
        task.id, message.id, "plan.pdf", "file:///plan.pdf"
    )
    assert isinstance(attachment, MessageAttachment)
    assert file_registry.add_message_attachment(task.id, "missing", "x", "y") is None
    assert file_registry.add_message_attachment("missing", message.id, "x", "y") is None

    reloaded = TaskRegistry(SnapshotRepository(snapshot_path))
    stored = reloaded.get_task_by_id(task.id).find_message(message.id)
    assert [a.name for a in stored.attachments] == ["plan.pdf"]
    assert stored.attachments[0].id == attachment.id
