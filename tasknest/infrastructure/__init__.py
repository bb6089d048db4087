"""Infrastructure layer for TaskNest.

Provides I/O implementations behind the application layer:

- storage: JSON snapshot persistence (file-backed and in-memory)
"""

from tasknest.infrastructure.storage import (
    JsonStorage,
    MemorySnapshotRepository,
    SnapshotRepository,
)

__all__ = [
    "JsonStorage",
    "SnapshotRepository",
    "MemorySnapshotRepository",
]
