"""JSON file storage with Result-based error handling.

Provides a thin wrapper around file I/O for JSON documents, returning
Result types instead of raising exceptions.
"""

import json
import os
from pathlib import Path
from typing import Any

from tasknest.domain.shared.result import Err, Ok, Result


class JsonStorage:
    """Low-level JSON file I/O with Result-based error handling.

    No domain logic lives here - just reading and writing documents.
    Writes go to a sibling temporary file first and are moved into place
    with ``os.replace`` so an interrupted save never leaves half a file.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path("todoApp.json"))
        if isinstance(result, Ok):
            data = result.value
        else:
            print(f"Error: {result.error}")
    """

    def load_json(self, path: Path) -> Result[Any, str]:
        """Load a JSON document from a file.

        Args:
            path: Path to the JSON file to read.

        Returns:
            Ok(data) if successful, Err(str) with error message if failed.
        """
        try:
            if not path.exists():
                return Err(f"File not found: {path}")

            content = path.read_text(encoding="utf-8")
            return Ok(json.loads(content))

        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except PermissionError:
            return Err(f"Permission denied reading {path}")
        except OSError as e:
            return Err(f"Error reading {path}: {e}")

    def save_json(
        self,
        path: Path,
        data: Any,
        indent: int = 2,
    ) -> Result[None, str]:
        """Save a JSON document to a file atomically.

        Args:
            path: Path to the JSON file to write.
            data: JSON-serializable value.
            indent: JSON indentation level (default 2).

        Returns:
            Ok(None) if successful, Err(str) with error message if failed.
        """
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            content = json.dumps(data, indent=indent, ensure_ascii=False)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, path)
            return Ok(None)

        except (TypeError, ValueError) as e:
            return Err(f"Data not JSON serializable: {e}")
        except PermissionError:
            return Err(f"Permission denied writing {path}")
        except OSError as e:
            return Err(f"Error writing {path}: {e}")

    def delete(self, path: Path) -> Result[None, str]:
        """Remove a file if it exists."""
        try:
            path.unlink(missing_ok=True)
            return Ok(None)
        except OSError as e:
            return Err(f"Error deleting {path}: {e}")
