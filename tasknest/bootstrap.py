"""Composition root.

Wires configuration, storage and the task registry together so that the
CLI and TUI receive a ready registry instead of building one themselves.
"""

import logging
from pathlib import Path

from tasknest.application import TaskRegistry
from tasknest.global_config import AppConfig, get_global_config
from tasknest.infrastructure.storage import (
    MemorySnapshotRepository,
    SnapshotRepository,
    SnapshotStore,
)

logger = logging.getLogger(__name__)


def create_store(
    config: AppConfig,
    data_dir: Path | None = None,
    persist: bool = True,
) -> SnapshotStore:
    """Pick the snapshot backend: the JSON file, or memory when ``persist`` is off."""
    if not persist:
        return MemorySnapshotRepository()
    path = config.snapshot_path(data_dir.expanduser() if data_dir is not None else None)
    logger.debug("Using snapshot file %s", path)
    return SnapshotRepository(path)


def create_registry(
    config: AppConfig | None = None,
    data_dir: Path | None = None,
    persist: bool = True,
) -> TaskRegistry:
    """Build the registry for one session.

    Args:
        config: Preferences; loaded from the config dir when omitted.
        data_dir: Overrides ``config.data_dir`` for this run.
        persist: False keeps everything in memory.
    """
    if config is None:
        config = get_global_config()
    return TaskRegistry(
        create_store(config, data_dir, persist),
        default_categories=config.default_categories,
        upcoming_window_hours=config.upcoming_window_hours,
        author=config.author,
    )
