# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskboard.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum level shown on the console per logger-name prefix; longest prefix wins.
# The REPL prints to the same terminal, so store chatter stays in the file.
CONSOLE_FLOORS: dict[str, int] = {
    "taskboard": logging.NOTSET,
    "taskboard.todos": logging.INFO,
    "taskboard.storage": logging.WARNING,
    "py.warnings": logging.ERROR,
}
_THIRD_PARTY_FLOOR = logging.ERROR


class PrefixLevelFilter(logging.Filter):
    def __init__(self, floors: dict[str, int], default: int) -> None:
        super().__init__()
        # longest first, so "taskboard.todos" beats "taskboard"
        self._floors = sorted(floors.items(), key=lambda kv: len(kv[0]), reverse=True)
        self._default = default

    def floor_for(self, name: str) -> int:
        for prefix, level in self._floors:
            if name == prefix or name.startswith(prefix + "."):
                return level
        return self._default

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.floor_for(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskboard",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """Install console + rotating file handlers on the root logger; returns the log file path."""
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(PrefixLevelFilter(CONSOLE_FLOORS, _THIRD_PARTY_FLOOR))

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)

    root.addHandler(console)
    root.addHandler(file_handler)
    logging.captureWarnings(True)
    return log_file
