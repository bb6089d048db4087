"""Repository implementations for the task snapshot.

Wrap snapshot persistence with Result-based error handling. The registry
depends only on the ``load``/``save`` pair, so any object offering them
(see ``SnapshotStore``) can stand in for the file-backed repository.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from tasknest.domain.shared.result import Err, Ok, Result
from tasknest.infrastructure.storage.json_storage import JsonStorage
from tasknest.infrastructure.storage.snapshot import Snapshot, deserialize_forest

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".json"


class SnapshotStore(Protocol):
    """What the task registry needs from a persistence backend."""

    def load(self) -> Result[Snapshot | None, str]: ...

    def save(self, data: dict[str, Any]) -> Result[None, str]: ...


class SnapshotRepository:
    """Repository for the snapshot JSON file.

    Example:
        repo = SnapshotRepository(Path("~/.tasknest/todoApp.json").expanduser())
        result = repo.load()
    """

    def __init__(self, path: Path, storage: JsonStorage | None = None) -> None:
        """Initialize the repository.

        Args:
            path: Location of the snapshot file.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        self._path = Path(path)
        self._storage = storage or JsonStorage()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Result[Snapshot | None, str]:
        """Load the snapshot.

        Returns:
            Ok(Snapshot) if the file exists and is valid, Ok(None) if there
            is no snapshot yet, Err(str) if the file is unreadable or corrupt.
        """
        if not self._path.exists():
            return Ok(None)

        result = self._storage.load_json(self._path)
        if isinstance(result, Err):
            return result

        try:
            snapshot = deserialize_forest(result.value)
        except ValidationError as e:
            return Err(f"Invalid snapshot data in {self._path}: {e}")

        logger.debug(
            "Snapshot loaded path=%s roots=%d categories=%d",
            self._path,
            len(snapshot.tasks),
            len(snapshot.categories),
        )
        return Ok(snapshot)

    def save(self, data: dict[str, Any]) -> Result[None, str]:
        """Write serialized snapshot data.

        Args:
            data: Output of ``serialize_forest``.

        Returns:
            Ok(None) if successful, Err(str) with error message if failed.
        """
        return self._storage.save_json(self._path, data)

    def exists(self) -> bool:
        return self._path.exists()


class MemorySnapshotRepository:
    """In-process snapshot store for tests and throwaway sessions.

    Keeps the last saved document as JSON text, so it holds exactly what
    the file repository would write, and validates it on load the same way.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._text = json.dumps(data) if data is not None else None
        self.save_count = 0

    @property
    def data(self) -> dict[str, Any] | None:
        return json.loads(self._text) if self._text is not None else None

    def load(self) -> Result[Snapshot | None, str]:
        if self._text is None:
            return Ok(None)
        try:
            return Ok(deserialize_forest(json.loads(self._text)))
        except ValidationError as e:
            return Err(f"Invalid snapshot data: {e}")

    def save(self, data: dict[str, Any]) -> Result[None, str]:
        try:
            self._text = json.dumps(data, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            return Err(f"Failed to encode snapshot: {e}")
        self.save_count += 1
        return Ok(None)

    def exists(self) -> bool:
        return self._text is not None
