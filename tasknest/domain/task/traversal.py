"""Tree traversal over forests of tasks.

All functions in this module are pure - no I/O, no side effects.
Traversal is depth-first pre-order with children visited in list order,
using an explicit stack so deeply nested trees do not hit the recursion
limit.
"""

from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Task

Predicate = Callable[["Task"], bool]


# =============================================================================
# Fundamental Operations
# =============================================================================


def walk_with_depth(tasks: Iterable["Task"]) -> Iterator[tuple["Task", int]]:
    """Yield every task in the forest together with its depth.

    Roots have depth 0.

    Args:
        tasks: Root tasks of the forest (or the children of one task).

    Yields:
        (task, depth) pairs in depth-first pre-order.
    """
    stack = [(task, 0) for task in reversed(list(tasks))]
    while stack:
        task, depth = stack.pop()
        yield task, depth
        for child in reversed(task.subtasks):
            stack.append((child, depth + 1))


def walk(tasks: Iterable["Task"]) -> Iterator["Task"]:
    """Yield every task in the forest in depth-first pre-order."""
    for task, _ in walk_with_depth(tasks):
        yield task


def filter_nodes(tasks: Iterable["Task"], predicate: Predicate) -> list["Task"]:
    """Collect every task in the forest matching a predicate.

    Args:
        tasks: Root tasks to search.
        predicate: Function (task) -> bool

    Returns:
        Matching tasks in traversal order.
    """
    return [task for task in walk(tasks) if predicate(task)]


def find_first(tasks: Iterable["Task"], predicate: Predicate) -> "Task | None":
    """Find the first task matching a predicate (depth-first)."""
    for task in walk(tasks):
        if predicate(task):
            return task
    return None


def find_by_id(tasks: Iterable["Task"], task_id: str) -> "Task | None":
    """Find a task anywhere in the forest by identifier."""
    return find_first(tasks, lambda task: task.id == task_id)


def depth_of(tasks: Iterable["Task"], task_id: str) -> int | None:
    """Depth of a task in the forest (roots are 0), or None if absent."""
    for task, depth in walk_with_depth(tasks):
        if task.id == task_id:
            return depth
    return None


# =============================================================================
# Predicates
# =============================================================================


def matches_query(query: str) -> Predicate:
    """Return a predicate matching tasks whose name or notes contain ``query``.

    Matching is a case-insensitive substring test.
    """
    needle = query.lower()

    def predicate(task: "Task") -> bool:
        return needle in task.name.lower() or needle in task.notes.lower()

    return predicate


def is_completed(task: "Task") -> bool:
    return task.is_completed


# =============================================================================
# Aggregates
# =============================================================================


def count_descendants(task: "Task") -> int:
    """Count every task below ``task`` (the task itself excluded)."""
    return sum(1 for _ in walk(task.subtasks))


def count_completed_descendants(task: "Task") -> int:
    """Count completed tasks below ``task`` (the task itself excluded)."""
    return sum(1 for node in walk(task.subtasks) if node.is_completed)


def collect_categories(tasks: Iterable["Task"]) -> list[str]:
    """Return every category label used in the forest, first-seen order."""
    seen: dict[str, None] = {}
    for task in walk(tasks):
        for category in task.categories:
            seen.setdefault(category, None)
    return list(seen)
