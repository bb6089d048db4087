"""Task query service.

Pure functions over a forest of root tasks: the filters behind the
registry's query operations, dashboard statistics, and the combined view
filter the front-ends use for their task lists. No I/O, no mutation.

Category, urgency, overdue and upcoming filters look at root tasks only;
text search covers every task at any depth.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel

from tasknest.domain.shared.common import percent, utcnow
from tasknest.domain.task import Task, TaskUrgency, filter_nodes, matches_query

if TYPE_CHECKING:
    from tasknest.application.registry import TaskRegistry

DEFAULT_UPCOMING_HOURS = 48

# Search keywords that act as shortcuts in the task list view
URGENT_KEYWORD = "urgent"
COMPLETED_KEYWORD = "completed"
OVERDUE_KEYWORD = "overdue"


class StatusFilter(str, Enum):
    """Completion filter applied to a task list."""

    ALL = "all"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class TaskStats(BaseModel):
    """Summary counts over the root tasks.

    Provides the figures shown on the dashboard/sidebar.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    completed: int
    overdue: int
    upcoming: int

    @computed_field(alias="completionRate")
    @property
    def completion_rate(self) -> int:
        """Percentage of root tasks completed (0 when there are none)."""
        return percent(self.completed, self.total)

    def as_dict(self) -> dict[str, int]:
        return self.model_dump(by_alias=True)


# =============================================================================
# Root filters
# =============================================================================


def in_category(tasks: Iterable[Task], category: str) -> list[Task]:
    return [task for task in tasks if category in task.categories]


def with_urgency(tasks: Iterable[Task], urgency: TaskUrgency) -> list[Task]:
    return [task for task in tasks if urgency in task.urgency]


def overdue(tasks: Iterable[Task], now: datetime | None = None) -> list[Task]:
    """Root tasks whose due date has passed and that are not complete."""
    now = now or utcnow()
    return [task for task in tasks if task.is_overdue(now)]


def upcoming(
    tasks: Iterable[Task],
    window_hours: float = DEFAULT_UPCOMING_HOURS,
    now: datetime | None = None,
) -> list[Task]:
    """Incomplete root tasks due within the next ``window_hours``."""
    now = now or utcnow()
    window = timedelta(hours=window_hours)
    return [task for task in tasks if task.is_upcoming(window, now)]


def search_forest(tasks: Iterable[Task], query: str) -> list[Task]:
    """Every task at any depth whose name or notes contain ``query``.

    Results are in depth-first order of the root list.
    """
    return filter_nodes(tasks, matches_query(query))


# =============================================================================
# Statistics
# =============================================================================


def compute_stats(
    tasks: list[Task],
    window_hours: float = DEFAULT_UPCOMING_HOURS,
    now: datetime | None = None,
) -> TaskStats:
    """Calculate statistics over root tasks.

    Args:
        tasks: Root tasks.
        window_hours: Horizon for "upcoming".
        now: Reference time, defaults to the current time.

    Returns:
        TaskStats with totals, overdue/upcoming counts and completion rate.
    """
    now = now or utcnow()
    return TaskStats(
        total=len(tasks),
        completed=sum(1 for task in tasks if task.is_completed),
        overdue=len(overdue(tasks, now)),
        upcoming=len(upcoming(tasks, window_hours, now)),
    )


# =============================================================================
# List views
# =============================================================================


def filter_view(
    registry: "TaskRegistry",
    category: str | None = None,
    query: str | None = None,
    status: StatusFilter = StatusFilter.ALL,
) -> list[Task]:
    """Build the task list shown by a front-end.

    Starts from the root tasks and narrows by category. A query of
    "urgent", "completed" or "overdue" filters the roots by that property;
    any other query runs a full-forest search (then the category filter).
    The status filter is applied last, and completed tasks are moved to
    the end while otherwise keeping their order.

    Args:
        registry: Registry to read from.
        category: Category label to keep, if any.
        query: Search text or shortcut keyword.
        status: Completion filter.

    Returns:
        Tasks to display, in display order.
    """
    tasks = registry.get_all_tasks()

    if category:
        tasks = in_category(tasks, category)

    if query:
        keyword = query.strip().lower()
        if keyword == URGENT_KEYWORD:
            tasks = with_urgency(tasks, TaskUrgency.URGENT)
        elif keyword == COMPLETED_KEYWORD:
            tasks = [task for task in tasks if task.is_completed]
        elif keyword == OVERDUE_KEYWORD:
            tasks = overdue(tasks)
        else:
            tasks = registry.search_tasks(query)
            if category:
                tasks = in_category(tasks, category)

    if status == StatusFilter.COMPLETE:
        tasks = [task for task in tasks if task.is_completed]
    elif status == StatusFilter.INCOMPLETE:
        tasks = [task for task in tasks if not task.is_completed]

    return sorted(tasks, key=lambda task: task.is_completed)


def category_counts(registry: "TaskRegistry") -> dict[str, int]:
    """Number of root tasks per known category."""
    return {
        category: len(registry.get_tasks_by_category(category))
        for category in registry.get_categories()
    }
