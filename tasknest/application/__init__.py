"""Application layer for TaskNest.

Coordinates the domain model and persistence for the front-ends:

- task_service: Pure queries, statistics and list-view filtering
- registry: TaskRegistry, the owner of the task forest
"""

from tasknest.application import task_service
from tasknest.application.registry import TaskRegistry
from tasknest.application.task_service import (
    StatusFilter,
    TaskStats,
    category_counts,
    compute_stats,
    filter_view,
)

__all__ = [
    "TaskRegistry",
    "TaskStats",
    "StatusFilter",
    "task_service",
    "compute_stats",
    "filter_view",
    "category_counts",
]
