from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler

from config import APP_NAME

PLAIN_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"

# -q -q -q ... -v
_LEVELS = [logging.CRITICAL, logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]


def level_for_verbosity(verbosity: int) -> int:
    """0 is INFO, each -v goes one level down and each -q one level up."""
    index = _LEVELS.index(logging.INFO) + verbosity
    return _LEVELS[max(0, min(index, len(_LEVELS) - 1))]


def parse_level(name: str | None) -> int | None:
    """Level for a name such as "WARNING"; None for an empty or unknown name."""
    if not name:
        return None
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def temp_log_file(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return os.path.join(tempfile.gettempdir(),
                        f"{APP_NAME}_{now.strftime('%Y-%m-%d_%H-%M-%S')}.log")


def setup_logging(verbosity: int = 0, log_filename: str | None = None,
                  console: Console | None = None) -> RichHandler:
    """
    Configures the root logger: a rich console handler at the level chosen by
    the verbosity and a plain-text file handler that records everything.
    Returns the console handler so its level can still be changed.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level_for_verbosity(verbosity))
    root.addHandler(console_handler)

    if log_filename:
        file_handler = logging.FileHandler(log_filename, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
        root.addHandler(file_handler)

    return console_handler
