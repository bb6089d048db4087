# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from tasknest.bootstrap import create_registry
from tasknest.global_config import AppConfig, get_config_dir, get_global_config, save_global_config
from tasknest.infrastructure.storage import MemorySnapshotRepository
from tasknest.logging_setup import LOG_FILE_NAME, setup_logging


def test_config_dir_follows_env(tasknest_home: Path) -> None:
    assert get_config_dir() == tasknest_home
    assert tasknest_home.is_dir()


def test_defaults_when_missing() -> None:
    config = get_global_config()
    assert config.snapshot_name == "todoApp"
    assert config.upcoming_window_hours == 48
    assert config.default_categories == ["Personal", "School", "Work", "Vacation"]


def test_save_and_reload(tmp_path: Path) -> None:
    config = AppConfig(author="Ann", data_dir=tmp_path / "data", log_level="debug")
    save_global_config(config)

    loaded = get_global_config()

    assert loaded.author == "Ann"
    assert loaded.log_level == "DEBUG"
    assert loaded.snapshot_path() == tmp_path / "data" / "todoApp.json"


def test_invalid_config_falls_back(tasknest_home: Path) -> None:
    tasknest_home.mkdir(parents=True, exist_ok=True)
    (tasknest_home / "config.json").write_text('{"upcoming_window_hours": -1}', encoding="utf-8")
    assert get_global_config().upcoming_window_hours == 48


def test_unknown_log_level_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig(log_level="LOUD")


def test_create_registry_uses_config(tmp_path: Path) -> None:
    config = AppConfig(default_categories=["Inbox"], author="Ann")

    registry = create_registry(config, data_dir=tmp_path)
    task = registry.create_task("t")
    registry.add_message(task.id, "hi")

    assert registry.get_categories() == ["Inbox", "Personal"]
    assert task.messages[-1].author == "Ann"
    assert (tmp_path / "todoApp.json").exists()


def test_create_registry_in_memory() -> None:
    registry = create_registry(AppConfig(), persist=False)
    registry.create_task("t")
    assert isinstance(registry._store, MemorySnapshotRepository)


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = setup_logging(log_dir=tmp_path / "logs", console=False)

    logging.getLogger("tasknest.test").info("hello log")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / LOG_FILE_NAME
    assert "hello log" in log_file.read_text(encoding="utf-8")


def test_setup_logging_again_closes_previous_file_handler(tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path / "first", console=False)
    first = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]

    setup_logging(log_dir=tmp_path / "second", console=False)

    assert len(first) == 1
    assert first[0] not in logging.getLogger().handlers
    assert first[0].stream is None
