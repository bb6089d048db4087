"""Snapshot format for the whole task forest.

The snapshot is one JSON document::

    {"tasks": [<serialized Task>, ...], "categories": ["Personal", ...]}

Only root tasks appear in ``tasks``; subtasks are nested inside their
owners. Dates are ISO-8601 strings. Missing optional fields fall back to
the model defaults, so snapshots written by older versions still load.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from tasknest.domain.shared.common import utcnow
from tasknest.domain.task import DEFAULT_CATEGORIES, Task, walk


class Snapshot(BaseModel):
    """Root document of the persisted state."""

    tasks: list[Task] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    @field_validator("tasks", mode="before")
    @classmethod
    def _null_tasks(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("categories", mode="before")
    @classmethod
    def _null_categories(cls, value: Any) -> Any:
        return list(DEFAULT_CATEGORIES) if not value else value

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


def _relink(tasks: list[Task]) -> None:
    """Point every subtask's ``parent_id`` at the task that owns it."""
    for task in walk(tasks):
        for subtask in task.subtasks:
            subtask.parent_id = task.id


def serialize_forest(tasks: list[Task], categories: list[str]) -> dict[str, Any]:
    """Render the forest and category set as a JSON-ready snapshot."""
    snapshot = Snapshot(tasks=tasks, categories=categories)
    return snapshot.model_dump(mode="json", by_alias=True)


def deserialize_forest(data: Any) -> Snapshot:
    """Rebuild the forest from snapshot data.

    Parent references are re-derived from nesting and urgency escalation is
    re-run, since a due date may have entered the urgent window while the
    snapshot sat on disk.

    Raises:
        pydantic.ValidationError: If the data does not describe a snapshot.
    """
    snapshot = Snapshot.model_validate(data)
    for root in snapshot.tasks:
        root.parent_id = None
    _relink(snapshot.tasks)

    now = utcnow()
    for task in walk(snapshot.tasks):
        task.escalate_urgency(now)
    return snapshot
