"""Storage infrastructure for TaskNest.

Persistence of the task forest as a single JSON snapshot, using Result
values for explicit error handling.
"""

from tasknest.infrastructure.storage.json_storage import JsonStorage
from tasknest.infrastructure.storage.repositories import (
    SNAPSHOT_SUFFIX,
    MemorySnapshotRepository,
    SnapshotRepository,
    SnapshotStore,
)
from tasknest.infrastructure.storage.snapshot import (
    Snapshot,
    deserialize_forest,
    serialize_forest,
)

__all__ = [
    "JsonStorage",
    "SnapshotRepository",
    "MemorySnapshotRepository",
    "SnapshotStore",
    "SNAPSHOT_SUFFIX",
    "Snapshot",
    "serialize_forest",
    "deserialize_forest",
]
