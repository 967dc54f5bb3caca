# src/taskique/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "taskique"
LOG_FILE_NAME = "taskique.log"

# App loggers that would clutter the prompt below WARNING
# (per-request gateway lines, storage writes on every tag change).
QUIET_APP_LOGGERS = ("taskique.api.", "taskique.storage.")

# Third-party loggers capped at WARNING everywhere, file included.
CHATTY_LIBRARIES = ("httpx", "httpcore")


class ConsoleFilter(logging.Filter):
    """
    Decides what reaches stderr, where the REPL prompt lives.

    taskique records pass (except the quiet ones below WARNING);
    anything else, captured warnings included, only at ERROR.
    """

    def __init__(self, quiet: tuple[str, ...] = QUIET_APP_LOGGERS) -> None:
        super().__init__()
        self._quiet = quiet

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name != APP_LOGGER and not name.startswith(APP_LOGGER + "."):
            return record.levelno >= logging.ERROR
        if name.startswith(self._quiet):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskique",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    stderr gets a filtered view at `console_level`; <log_dir>/taskique.log
    gets everything at `file_level`. Replaces existing root handlers, so
    calling it twice does not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    console.addFilter(ConsoleFilter())

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(formatter)

    root.addHandler(console)
    root.addHandler(to_file)

    for name in CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return log_file
