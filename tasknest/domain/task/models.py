"""Task domain models.

Pure domain models for the task tree. Uses Pydantic so the same classes
serve as the in-memory model and as the snapshot schema: attributes are
snake_case in Python and camelCase in the persisted JSON.

A ``Task`` exclusively owns its ``subtasks``; each subtask records the id
of its owner in ``parent_id``. Completion cascades downwards only.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from tasknest.domain.shared.common import ensure_aware, new_id, percent, utcnow

from .color import DEFAULT_TASK_COLOR, TaskColor, inherit_color
from .traversal import count_completed_descendants, count_descendants, find_by_id, walk

# A due date this close (and still in the future) makes a task urgent
URGENCY_HORIZON = timedelta(hours=48)

# Deepest level a subtask may sit at (roots are level 0). Snapshot
# serialization stops working a little past 250 levels.
MAX_TASK_DEPTH = 100

DEFAULT_CATEGORY = "Personal"
DEFAULT_CATEGORIES = ("Personal", "School", "Work", "Vacation")
DEFAULT_AUTHOR = "User"
SYSTEM_AUTHOR = "System"

CREATED_MESSAGE = (
    "🎯 Task created! Use this channel to track progress, share updates, and collaborate."
)
COMPLETED_MESSAGE = "✅ Task marked as completed"
REOPENED_MESSAGE = "🔄 Task reopened"
COLOR_MESSAGE = "🎨 Task color updated to custom theme"


class TaskType(str, Enum):
    """What kind of work a task is."""

    LEARN = "Learn"
    DISCOVER = "Discover"
    DO = "Do"
    REPEAT = "Repeat"


class TaskUrgency(str, Enum):
    """Urgency flags; a task may carry several."""

    CASUAL = "Casual"
    IMPORTANT = "Important"
    URGENT = "Urgent"


class MessageKind(str, Enum):
    TEXT = "text"
    SYSTEM = "system"


class AttachmentKind(str, Enum):
    IMAGE = "image"
    FILE = "file"
    LINK = "link"


class MessageAttachmentKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    LINK = "link"


def _unique(values: list[Any]) -> list[Any]:
    """Drop duplicates, keeping first occurrences in order."""
    return list(dict.fromkeys(values))


class SnapshotModel(BaseModel):
    """Base for records persisted in the snapshot (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Task value records
# =============================================================================


class TaskLink(SnapshotModel):
    id: str = Field(default_factory=new_id)
    url: str
    title: str = ""


class TaskAttachment(SnapshotModel):
    id: str = Field(default_factory=new_id)
    name: str
    url: str
    type: AttachmentKind = AttachmentKind.FILE


# =============================================================================
# Channel messages
# =============================================================================


class MessageAttachment(SnapshotModel):
    """A file or link attached to a channel message."""

    id: str = Field(default_factory=new_id)
    name: str
    url: str
    type: MessageAttachmentKind = MessageAttachmentKind.FILE
    size: int | None = None
    mime_type: str | None = None


class MessageReaction(SnapshotModel):
    """An emoji reaction and the users who left it.

    ``count`` is derived from ``users`` so the two can never disagree.
    """

    emoji: str
    users: list[str] = Field(default_factory=list)

    @field_validator("users")
    @classmethod
    def _unique_users(cls, users: list[str]) -> list[str]:
        return _unique(users)

    @computed_field
    @property
    def count(self) -> int:
        return len(self.users)

    def has_user(self, user: str) -> bool:
        return user in self.users

    def add_user(self, user: str) -> None:
        if user not in self.users:
            self.users.append(user)

    def remove_user(self, user: str) -> None:
        if user in self.users:
            self.users.remove(user)


class TaskMessage(SnapshotModel):
    """One entry in a task's channel."""

    id: str = Field(default_factory=new_id)
    content: str
    timestamp: datetime = Field(default_factory=utcnow)
    author: str = DEFAULT_AUTHOR
    attachments: list[MessageAttachment] = Field(default_factory=list)
    type: MessageKind = MessageKind.TEXT
    is_starred: bool = False
    is_pinned: bool = False
    reply_to_id: str | None = None
    reactions: list[MessageReaction] = Field(default_factory=list)

    @field_validator("timestamp")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @field_validator("attachments", "reactions", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("is_starred", "is_pinned", mode="before")
    @classmethod
    def _null_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def is_system(self) -> bool:
        return self.type == MessageKind.SYSTEM

    def find_reaction(self, emoji: str) -> MessageReaction | None:
        for reaction in self.reactions:
            if reaction.emoji == emoji:
                return reaction
        return None


# =============================================================================
# Partial updates
# =============================================================================


class TaskPatch(SnapshotModel):
    """The user-editable fields of a task, all optional.

    Only fields explicitly set on the patch are applied, so
    ``TaskPatch(due_date=None)`` clears a due date while ``TaskPatch()``
    leaves it alone. Structural fields (id, subtasks, parent, messages,
    timestamps) are deliberately absent and rejected if passed.

    Setting ``is_completed`` here does not cascade to subtasks; use
    ``Task.toggle_completion`` for that.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    type: TaskType | None = None
    categories: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("categories", "category"),
    )
    urgency: list[TaskUrgency] | None = None
    notes: str | None = None
    due_date: datetime | None = None
    is_completed: bool | None = None
    color: TaskColor | None = None

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("categories", "urgency")
    @classmethod
    def _dedupe(cls, value: list[Any] | None) -> list[Any] | None:
        return None if value is None else _unique(value)

    @field_validator("categories")
    @classmethod
    def _at_least_one_category(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and not value:
            raise ValueError("a task needs at least one category")
        return value

    @field_validator("due_date")
    @classmethod
    def _aware_due_date(cls, value: datetime | None) -> datetime | None:
        return None if value is None else ensure_aware(value)

    def changes(self) -> dict[str, Any]:
        """Return the fields this patch sets, by attribute name.

        A field set to None is only meaningful for ``due_date``; for every
        other field it is treated as "not provided".
        """
        changes: dict[str, Any] = {}
        for field in self.model_fields_set:
            value = getattr(self, field)
            if value is None and field != "due_date":
                continue
            changes[field] = value
        return changes


# =============================================================================
# Task tree node
# =============================================================================


class Task(SnapshotModel):
    """A task and the subtree of subtasks it owns.

    Leaf tasks report completion from their own flag; tasks with subtasks
    report the share of completed descendants.
    """

    id: str = Field(default_factory=new_id, frozen=True)
    name: str
    type: TaskType = TaskType.DO
    categories: list[str] = Field(
        default_factory=lambda: [DEFAULT_CATEGORY],
        validation_alias=AliasChoices("categories", "category"),
    )
    urgency: list[TaskUrgency] = Field(default_factory=lambda: [TaskUrgency.CASUAL])
    notes: str = ""
    due_date: datetime | None = None
    links: list[TaskLink] = Field(default_factory=list)
    attachments: list[TaskAttachment] = Field(default_factory=list)
    subtasks: list["Task"] = Field(default_factory=list)
    is_completed: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    parent_id: str | None = None
    messages: list[TaskMessage] = Field(default_factory=list)
    color: TaskColor = DEFAULT_TASK_COLOR

    # ---- validation (also applied when loading snapshots) ----

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> Any:
        if value is None:
            return [DEFAULT_CATEGORY]
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: list[str]) -> list[str]:
        return _unique(value) or [DEFAULT_CATEGORY]

    @field_validator("urgency")
    @classmethod
    def _unique_urgency(cls, value: list[TaskUrgency]) -> list[TaskUrgency]:
        return _unique(value)

    @field_validator("due_date")
    @classmethod
    def _aware_due_date(cls, value: datetime | None) -> datetime | None:
        return None if value is None else ensure_aware(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware_timestamps(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _null_notes(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("links", "attachments", "subtasks", "messages", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("urgency", mode="before")
    @classmethod
    def _null_urgency(cls, value: Any) -> Any:
        return [TaskUrgency.CASUAL] if value is None else value

    @field_validator("is_completed", mode="before")
    @classmethod
    def _null_completed(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("color", mode="before")
    @classmethod
    def _null_color(cls, value: Any) -> Any:
        return DEFAULT_TASK_COLOR if value is None else value

    # ---- construction ----

    @classmethod
    def create(
        cls,
        name: str,
        task_type: TaskType = TaskType.DO,
        categories: str | list[str] | None = None,
        urgency: list[TaskUrgency] | None = None,
        due_date: datetime | None = None,
        parent_id: str | None = None,
        color: TaskColor | None = None,
    ) -> "Task":
        """Build a new task with fresh id and timestamps.

        Urgency is escalated immediately if the due date is near. No system
        message is added here; the registry announces root tasks itself.

        Args:
            name: Display name.
            task_type: Kind of work.
            categories: One label or a list of labels.
            urgency: Urgency flags, defaults to [Casual].
            due_date: Optional deadline (naive values are taken as UTC).
            parent_id: Owner id when the task is built as a subtask.
            color: Palette, defaults to the neutral palette.

        Returns:
            The new task.
        """
        now = utcnow()
        task = cls(
            name=name,
            type=task_type,
            categories=categories if categories is not None else [DEFAULT_CATEGORY],
            urgency=list(urgency) if urgency is not None else [TaskUrgency.CASUAL],
            due_date=due_date,
            parent_id=parent_id,
            color=color or DEFAULT_TASK_COLOR,
            created_at=now,
            updated_at=now,
        )
        task.escalate_urgency(now)
        return task

    # ---- derived state ----

    def is_leaf(self) -> bool:
        return len(self.subtasks) == 0

    def get_completion_percentage(self) -> int:
        """Completion as an integer percentage.

        A leaf is 0 or 100 from its own flag. Otherwise the percentage of
        all transitive descendants (not the task itself) that are complete.
        """
        if self.is_leaf():
            return 100 if self.is_completed else 0
        return percent(count_completed_descendants(self), count_descendants(self))

    @computed_field(alias="completionPercentage")
    @property
    def completion_percentage(self) -> int:
        return self.get_completion_percentage()

    def is_overdue(self, now: datetime | None = None) -> bool:
        now = now or utcnow()
        return self.due_date is not None and self.due_date < now and not self.is_completed

    def is_upcoming(self, window: timedelta, now: datetime | None = None) -> bool:
        now = now or utcnow()
        if self.due_date is None or self.is_completed:
            return False
        return now < self.due_date <= now + window

    def escalate_urgency(self, now: datetime | None = None) -> bool:
        """Add the Urgent flag if the due date falls within the horizon.

        Returns:
            True if the flag was added by this call.
        """
        if self.due_date is None or TaskUrgency.URGENT in self.urgency:
            return False
        now = now or utcnow()
        remaining = self.due_date - now
        if timedelta(0) < remaining <= URGENCY_HORIZON:
            self.urgency.append(TaskUrgency.URGENT)
            return True
        return False

    def touch(self) -> None:
        self.updated_at = utcnow()

    # ---- completion ----

    def toggle_completion(self) -> None:
        """Flip completion and force the new state onto every descendant."""
        self.is_completed = not self.is_completed
        self.touch()
        self.add_system_message(COMPLETED_MESSAGE if self.is_completed else REOPENED_MESSAGE)
        for node in walk(self.subtasks):
            node.is_completed = self.is_completed

    # ---- subtasks ----

    def add_subtask(self, subtask: "Task") -> None:
        """Take ownership of ``subtask``.

        The subtask is re-parented, given a darker variant of this task's
        palette, and announced in this task's channel.
        """
        subtask.parent_id = self.id
        subtask.color = inherit_color(self.color)
        self.subtasks.append(subtask)
        self.touch()
        self.add_system_message(f"➕ Subtask added: {subtask.name}")

    def remove_subtask(self, subtask_id: str) -> bool:
        """Remove a subtask (and its subtree) from anywhere below this task.

        Direct children are checked first, then each child's own subtree.

        Returns:
            True if a task was removed.
        """
        for index, subtask in enumerate(self.subtasks):
            if subtask.id == subtask_id:
                del self.subtasks[index]
                self.touch()
                return True

        for subtask in self.subtasks:
            if subtask.remove_subtask(subtask_id):
                self.touch()
                return True
        return False

    def find_subtask(self, subtask_id: str) -> "Task | None":
        """Depth-first search of the subtree, excluding this task."""
        return find_by_id(self.subtasks, subtask_id)

    # ---- links and attachments ----

    def add_link(self, url: str, title: str) -> TaskLink:
        link = TaskLink(url=url, title=title)
        self.links.append(link)
        self.touch()
        return link

    def remove_link(self, link_id: str) -> bool:
        before = len(self.links)
        self.links = [link for link in self.links if link.id != link_id]
        if len(self.links) == before:
            return False
        self.touch()
        return True

    def add_attachment(
        self,
        name: str,
        url: str,
        kind: AttachmentKind = AttachmentKind.FILE,
    ) -> TaskAttachment:
        attachment = TaskAttachment(name=name, url=url, type=kind)
        self.attachments.append(attachment)
        self.touch()
        return attachment

    def remove_attachment(self, attachment_id: str) -> bool:
        before = len(self.attachments)
        self.attachments = [a for a in self.attachments if a.id != attachment_id]
        if len(self.attachments) == before:
            return False
        self.touch()
        return True

    # ---- channel ----

    def add_message(
        self,
        content: str,
        author: str = DEFAULT_AUTHOR,
        attachments: list[MessageAttachment] | None = None,
    ) -> TaskMessage:
        """Append a user message to the channel and return it.

        The caller may set ``reply_to_id`` on the returned message.
        """
        message = TaskMessage(
            content=content,
            author=author,
            attachments=list(attachments or []),
            type=MessageKind.TEXT,
        )
        self.messages.append(message)
        self.touch()
        return message

    def add_system_message(self, content: str) -> TaskMessage:
        message = TaskMessage(
            content=content,
            author=SYSTEM_AUTHOR,
            type=MessageKind.SYSTEM,
        )
        self.messages.append(message)
        self.touch()
        return message

    def find_message(self, message_id: str) -> TaskMessage | None:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    def delete_message(self, message_id: str) -> bool:
        for index, message in enumerate(self.messages):
            if message.id == message_id:
                del self.messages[index]
                self.touch()
                return True
        return False

    def add_attachment_to_message(self, message_id: str, attachment: MessageAttachment) -> bool:
        message = self.find_message(message_id)
        if message is None:
            return False
        message.attachments.append(attachment)
        self.touch()
        return True

    # ---- edits ----

    def update_task(self, patch: TaskPatch) -> None:
        """Apply a partial update, then re-check urgency escalation."""
        for field, value in patch.changes().items():
            if isinstance(value, list):
                value = list(value)
            setattr(self, field, value)
        self.touch()
        self.escalate_urgency()

    def update_color(self, color: TaskColor) -> None:
        self.color = color
        self.touch()
        self.add_system_message(COLOR_MESSAGE)

    # ---- serialization ----

    def serialize(self) -> dict[str, Any]:
        """Plain JSON-ready structure of this task and its whole subtree.

        Keys are camelCase, datetimes are ISO-8601 strings, and every node
        includes its computed ``completionPercentage``.
        """
        return self.model_dump(mode="json", by_alias=True)
