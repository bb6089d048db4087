"""Logging configuration for the CLI and TUI front-ends."""

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasknest.log"

# Names given to the handlers installed here
CONSOLE_HANDLER_NAME = "tasknest.console"
FILE_HANDLER_NAME = "tasknest.file"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the console readable.

    - tasknest logs pass through
    - captured Python warnings and third-party logs only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "tasknest" or record.name.startswith("tasknest."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int | str = logging.WARNING,
    file_level: int | str = logging.DEBUG,
    console: bool = True,
) -> Path:
    """Configure root logging with a filtered stderr handler and a log file.

    Call this before the first log record. Calling it again replaces the
    handlers and closes the ones a previous call installed. The TUI passes
    ``console=False`` since stderr belongs to the terminal renderer.

    Returns:
        Path of the log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        # Handlers installed by someone else stay open
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            handler.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.set_name(CONSOLE_HANDLER_NAME)
        ch.setLevel(console_level)
        ch.setFormatter(fmt)
        ch.addFilter(_ConsoleNoiseFilter())
        root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.set_name(FILE_HANDLER_NAME)
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
