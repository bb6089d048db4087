# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tasknest.application import TaskRegistry
from tasknest.infrastructure.storage import MemorySnapshotRepository, SnapshotRepository


@pytest.fixture(autouse=True)
def tasknest_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Point the config directory at a per-test folder.

    Nothing under the real home directory is ever read or written by tests.
    """
    home = tmp_path / "home"
    monkeypatch.setenv("TASKNEST_HOME", str(home))
    monkeypatch.delenv("TASKNEST_DATA_DIR", raising=False)
    return home


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by setup_logging (the CLI calls it on every run)."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.fixture()
def store() -> MemorySnapshotRepository:
    return MemorySnapshotRepository()


@pytest.fixture()
def registry(store: MemorySnapshotRepository) -> TaskRegistry:
    """Registry over an in-memory snapshot store."""
    return TaskRegistry(store)


@pytest.fixture()
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "todoApp.json"


@pytest.fixture()
def file_registry(snapshot_path: Path) -> TaskRegistry:
    """Registry backed by a real snapshot file under tmp_path."""
    return TaskRegistry(SnapshotRepository(snapshot_path))
