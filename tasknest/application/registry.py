"""Task registry - owner of the task forest.

The registry holds the root tasks and the category set, and is the only
place that talks to persistence. Front-ends call its public methods and
re-read ``get_all_tasks()`` after each call; every mutating call writes a
full snapshot.

Persistence problems never reach the caller. A failed load leaves the
registry empty with the default categories, and a failed save keeps the
change in memory; both are logged.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from tasknest.application import task_service
from tasknest.application.task_service import DEFAULT_UPCOMING_HOURS, TaskStats
from tasknest.domain.shared.result import Err
from tasknest.domain.task import (
    CREATED_MESSAGE,
    DEFAULT_AUTHOR,
    DEFAULT_CATEGORIES,
    MAX_TASK_DEPTH,
    AttachmentKind,
    MessageAttachment,
    MessageAttachmentKind,
    Task,
    TaskAttachment,
    TaskColor,
    TaskLink,
    TaskMessage,
    TaskPatch,
    TaskType,
    TaskUrgency,
    channel,
    depth_of,
)
from tasknest.infrastructure.storage import SnapshotStore, serialize_forest

logger = logging.getLogger(__name__)


class TaskRegistry:
    """The forest of root tasks plus the category labels.

    Construct one per session in the composition root
    (``tasknest.bootstrap.create_registry``) and pass it to the front-end.
    The snapshot is loaded lazily on first use.

    Example:
        registry = TaskRegistry(SnapshotRepository(path))
        task = registry.create_task("Read chapter 3", TaskType.LEARN, "School")
        registry.add_subtask(task.id, "Take notes")
    """

    def __init__(
        self,
        store: SnapshotStore,
        default_categories: Iterable[str] = DEFAULT_CATEGORIES,
        upcoming_window_hours: float = DEFAULT_UPCOMING_HOURS,
        author: str = DEFAULT_AUTHOR,
    ) -> None:
        """Initialize the registry.

        Args:
            store: Snapshot backend (file or in-memory repository).
            default_categories: Categories used when no snapshot exists.
            upcoming_window_hours: Default horizon for upcoming tasks.
            author: Author name for messages posted through the registry.
        """
        self._store = store
        self._tasks: list[Task] = []
        self._categories: dict[str, None] = dict.fromkeys(default_categories)
        self._upcoming_window_hours = upcoming_window_hours
        self._author = author
        self._loaded = False

    # =========================================================================
    # Persistence
    # =========================================================================

    @property
    def author(self) -> str:
        return self._author

    @property
    def loaded(self) -> bool:
        return self._loaded

    def ensure_loaded(self) -> None:
        """Load the snapshot once; later calls are no-ops."""
        if self._loaded:
            return
        self._loaded = True

        result = self._store.load()
        if isinstance(result, Err):
            logger.error("Failed to load tasks, starting empty: %s", result.error)
            return

        snapshot = result.value
        if snapshot is None:
            logger.info("No saved tasks found, starting empty")
            return

        self._tasks = snapshot.tasks
        self._categories = dict.fromkeys(snapshot.categories)
        logger.info(
            "Loaded %d tasks and %d categories",
            len(self._tasks),
            len(self._categories),
        )

    def _persist(self) -> bool:
        try:
            data = serialize_forest(self._tasks, list(self._categories))
        except ValueError:
            logger.exception("Failed to serialize tasks; changes kept in memory only")
            return False

        result = self._store.save(data)
        if isinstance(result, Err):
            logger.error("Failed to save tasks; changes kept in memory only: %s", result.error)
            return False

        logger.debug("Saved %d root tasks", len(self._tasks))
        return True

    def _register_categories(self, categories: Iterable[str]) -> None:
        for category in categories:
            self._categories.setdefault(category, None)

    # =========================================================================
    # Create
    # =========================================================================

    def create_task(
        self,
        name: str,
        task_type: TaskType = TaskType.DO,
        categories: str | list[str] = "Personal",
        urgency: list[TaskUrgency] | None = None,
        due_date: datetime | None = None,
        color: TaskColor | None = None,
    ) -> Task:
        """Create a root task.

        The task's channel opens with a creation message, and any category
        labels not seen before are added to the category set.

        Args:
            name: Display name (validated by the caller).
            task_type: Kind of work.
            categories: One label or several.
            urgency: Urgency flags, defaults to [Casual].
            due_date: Optional deadline.
            color: Palette chosen by the front-end.

        Returns:
            The new task.
        """
        self.ensure_loaded()
        task = Task.create(
            name,
            task_type=task_type,
            categories=categories,
            urgency=urgency,
            due_date=due_date,
            color=color,
        )
        task.add_system_message(CREATED_MESSAGE)
        self._tasks.append(task)
        self._register_categories(task.categories)
        self._persist()
        logger.info("Created task id=%s name=%r", task.id, task.name)
        return task

    def create_subtask(
        self,
        parent_id: str,
        name: str,
        task_type: TaskType = TaskType.DO,
        categories: str | list[str] | None = None,
        urgency: list[TaskUrgency] | None = None,
        due_date: datetime | None = None,
        color: TaskColor | None = None,
    ) -> Task | None:
        """Create a task under an existing one.

        The subtask inherits a darker variant of the parent's palette
        (``color`` only matters if the subtask is later re-parented) and
        the parent's categories unless others are given.

        Returns:
            The new subtask, or None if ``parent_id`` is unknown or the
            parent already sits at ``MAX_TASK_DEPTH``.
        """
        self.ensure_loaded()
        parent_depth = depth_of(self._tasks, parent_id)
        if parent_depth is None:
            return None
        if parent_depth >= MAX_TASK_DEPTH:
            logger.warning(
                "Subtask refused: %s is already %d levels deep", parent_id, parent_depth
            )
            return None
        parent = self.get_task_by_id(parent_id)

        subtask = Task.create(
            name,
            task_type=task_type,
            categories=categories if categories is not None else list(parent.categories),
            urgency=urgency,
            due_date=due_date,
            parent_id=parent_id,
            color=color,
        )
        parent.add_subtask(subtask)
        self._register_categories(subtask.categories)
        self._persist()
        logger.info("Created subtask id=%s parent=%s", subtask.id, parent_id)
        return subtask

    def add_subtask(self, parent_id: str, name: str) -> Task | None:
        """Shorthand for a plain "Do" subtask with the parent's categories."""
        return self.create_subtask(parent_id, name)

    # =========================================================================
    # Read
    # =========================================================================

    def get_all_tasks(self) -> list[Task]:
        """Return the root tasks (a new list; the tasks themselves are live)."""
        self.ensure_loaded()
        return list(self._tasks)

    def get_task_by_id(self, task_id: str) -> Task | None:
        self.ensure_loaded()
        for task in self._tasks:
            if task.id == task_id:
                return task
            found = task.find_subtask(task_id)
            if found is not None:
                return found
        return None

    def get_categories(self) -> list[str]:
        self.ensure_loaded()
        return list(self._categories)

    def get_tasks_by_category(self, category: str) -> list[Task]:
        """Root tasks labelled with ``category`` (subtasks are not included)."""
        self.ensure_loaded()
        return task_service.in_category(self._tasks, category)

    def get_tasks_by_urgency(self, urgency: TaskUrgency) -> list[Task]:
        """Root tasks carrying the ``urgency`` flag."""
        self.ensure_loaded()
        return task_service.with_urgency(self._tasks, urgency)

    def get_overdue_tasks(self) -> list[Task]:
        self.ensure_loaded()
        return task_service.overdue(self._tasks)

    def get_upcoming_tasks(self, window_hours: float | None = None) -> list[Task]:
        """Incomplete root tasks due within the window (48 hours by default)."""
        self.ensure_loaded()
        if window_hours is None:
            window_hours = self._upcoming_window_hours
        return task_service.upcoming(self._tasks, window_hours)

    def search_tasks(self, query: str) -> list[Task]:
        """Case-insensitive name/notes search across every task at any depth."""
        self.ensure_loaded()
        return task_service.search_forest(self._tasks, query)

    def get_task_stats(self) -> TaskStats:
        self.ensure_loaded()
        return task_service.compute_stats(self._tasks, self._upcoming_window_hours)

    # =========================================================================
    # Update
    # =========================================================================

    def update_task(self, task_id: str, patch: TaskPatch | Mapping[str, Any]) -> bool:
        """Apply a partial update to a task.

        Args:
            task_id: Task to update.
            patch: A TaskPatch, or a mapping of editable fields (snake_case
                or camelCase) that is validated into one.

        Returns:
            True if the task exists and was updated.

        Raises:
            pydantic.ValidationError: If a mapping names fields that are not
                editable or carries values of the wrong type.
        """
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return False

        if not isinstance(patch, TaskPatch):
            patch = TaskPatch.model_validate(dict(patch))

        task.update_task(patch)
        if patch.categories:
            self._register_categories(patch.categories)
        self._persist()
        return True

    def update_task_color(self, task_id: str, color: TaskColor) -> bool:
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return False
        task.update_color(color)
        self._persist()
        return True

    def toggle_task_completion(self, task_id: str) -> bool:
        """Flip a task's completion, cascading to its subtasks."""
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return False
        task.toggle_completion()
        self._persist()
        return True

    def add_category(self, category: str) -> None:
        self.ensure_loaded()
        self._categories.setdefault(category, None)
        self._persist()

    # ---- links and attachments ----

    def add_link(self, task_id: str, url: str, title: str = "") -> TaskLink | None:
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return None
        link = task.add_link(url, title or url)
        self._persist()
        return link

    def remove_link(self, task_id: str, link_id: str) -> bool:
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None or not task.remove_link(link_id):
            return False
        self._persist()
        return True

    def add_attachment(
        self,
        task_id: str,
        name: str,
        url: str,
        kind: AttachmentKind = AttachmentKind.FILE,
    ) -> TaskAttachment | None:
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return None
        attachment = task.add_attachment(name, url, kind)
        self._persist()
        return attachment

    # ---- channel ----

    def add_message(
        self,
        task_id: str,
        content: str,
        author: str | None = None,
        attachments: list[MessageAttachment] | None = None,
        reply_to_id: str | None = None,
    ) -> TaskMessage | None:
        """Post to a task's channel.

        Returns:
            The new message, or None if the task (or the message being
            replied to) does not exist.
        """
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return None

        author = author or self._author
        if reply_to_id is not None:
            message = channel.reply(task, reply_to_id, content, author, attachments)
            if message is None:
                return None
        else:
            message = task.add_message(content, author, attachments)
        self._persist()
        return message

    def add_message_attachment(
        self,
        task_id: str,
        message_id: str,
        name: str,
        url: str,
        kind: MessageAttachmentKind = MessageAttachmentKind.FILE,
    ) -> MessageAttachment | None:
        """Attach a file or link to a message already in the channel.

        Returns:
            The new attachment, or None if the task or message is unknown.
        """
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None:
            return None
        attachment = MessageAttachment(name=name, url=url, type=kind)
        if not task.add_attachment_to_message(message_id, attachment):
            return None
        self._persist()
        return attachment

    def delete_message(self, task_id: str, message_id: str) -> bool:
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None or not task.delete_message(message_id):
            return False
        self._persist()
        return True

    def toggle_message_star(self, task_id: str, message_id: str) -> bool:
        return self._channel_op(task_id, lambda task: channel.toggle_star(task, message_id))

    def toggle_message_pin(self, task_id: str, message_id: str) -> bool:
        return self._channel_op(task_id, lambda task: channel.toggle_pin(task, message_id))

    def toggle_reaction(
        self,
        task_id: str,
        message_id: str,
        emoji: str,
        user: str | None = None,
    ) -> bool:
        user = user or self._author
        return self._channel_op(
            task_id,
            lambda task: channel.toggle_reaction(task, message_id, emoji, user),
        )

    def _channel_op(self, task_id: str, operation: Callable[[Task], bool]) -> bool:
        self.ensure_loaded()
        task = self.get_task_by_id(task_id)
        if task is None or not operation(task):
            return False
        self._persist()
        return True

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_task(self, task_id: str) -> bool:
        """Delete a task and its whole subtree, wherever it lives."""
        self.ensure_loaded()
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[index]
                self._persist()
                logger.info("Deleted task id=%s", task_id)
                return True

        for task in self._tasks:
            if task.remove_subtask(task_id):
                self._persist()
                logger.info("Deleted subtask id=%s", task_id)
                return True
        return False


__all__ = ["TaskRegistry"]
