"""Logging configuration for bizdocs.

Call setup_logging() once at CLI startup. Modules log through
``logging.getLogger("bizdocs.<area>")``.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

DEFAULT_LEVEL = "WARNING"


class HumanFormatter(logging.Formatter):
    """Readable console format, colored when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record):
        ts = datetime.now().strftime("%H:%M:%S")
        line = f"{ts} [{record.levelname[0]}] {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0]:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if not self.color:
            return line
        return f"{self.COLORS.get(record.levelname, '')}{line}{self.RESET}"


class ConsoleHandler(logging.StreamHandler):
    """Stream handler that writes to sys.stderr as it is at emit time."""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def resolve_level(level: Optional[str] = None) -> int:
    """Resolve a level name, falling back to BIZDOCS_LOG_LEVEL, then WARNING."""
    if level is None:
        level = os.environ.get("BIZDOCS_LOG_LEVEL", DEFAULT_LEVEL)
    return getattr(logging, str(level).upper(), logging.WARNING)


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the bizdocs logger tree to write to stderr.

    Args:
        level: Override log level (default: from BIZDOCS_LOG_LEVEL env or WARNING)

    Returns:
        The package root logger
    """
    root = logging.getLogger("bizdocs")
    root.setLevel(resolve_level(level))
    root.handlers.clear()
    root.propagate = False

    console = ConsoleHandler()
    console.setFormatter(HumanFormatter(color=sys.stderr.isatty()))
    root.addHandler(console)

    # Quiet noisy libs
    for name in ("sqlalchemy", "openpyxl"):
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug("Logging initialized at %s", logging.getLevelName(root.level))
    return root
