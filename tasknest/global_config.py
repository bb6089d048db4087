"""Global configuration storage for TaskNest.

Stores user preferences in ~/.tasknest/config.json (or $TASKNEST_HOME).
"""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from tasknest.domain.task import DEFAULT_AUTHOR, DEFAULT_CATEGORIES
from tasknest.infrastructure.storage import SNAPSHOT_SUFFIX

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TASKNEST_HOME"
CONFIG_FILE_NAME = "config.json"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseModel):
    """User preferences.

    Attributes:
        data_dir: Directory holding the snapshot; None means the config dir.
        snapshot_name: Snapshot file name without extension.
        default_categories: Categories offered before any snapshot exists.
        upcoming_window_hours: Horizon for "upcoming" queries and stats.
        author: Name used for messages posted from this machine.
        log_level: Console log level name.
    """

    data_dir: Path | None = None
    snapshot_name: str = "todoApp"
    default_categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    upcoming_window_hours: float = Field(default=48, gt=0)
    author: str = DEFAULT_AUTHOR
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    def resolve_data_dir(self) -> Path:
        if self.data_dir is not None:
            return self.data_dir.expanduser()
        return get_config_dir()

    def snapshot_path(self, data_dir: Path | None = None) -> Path:
        """Location of the snapshot file, optionally under another directory."""
        directory = data_dir if data_dir is not None else self.resolve_data_dir()
        return directory / f"{self.snapshot_name}{SNAPSHOT_SUFFIX}"


def get_config_dir() -> Path:
    """Get the TaskNest config directory."""
    override = os.environ.get(HOME_ENV_VAR)
    config_dir = Path(override).expanduser() if override else Path.home() / ".tasknest"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_global_config() -> AppConfig:
    """Load global configuration, falling back to defaults."""
    config_file = get_config_dir() / CONFIG_FILE_NAME
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return AppConfig.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring invalid config %s: %s", config_file, e)
    return AppConfig()


def save_global_config(config: AppConfig) -> Path:
    """Save global configuration and return the file written."""
    config_file = get_config_dir() / CONFIG_FILE_NAME
    config_file.write_text(
        json.dumps(config.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )
    return config_file
