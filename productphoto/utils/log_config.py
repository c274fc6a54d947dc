"""Logging setup shared by the CLIs.

Every event is written to a log file as ``<ISO8601> - <LEVEL>: <message>``
and mirrored to the console through rich. The console line is rendered by
``RichHandler`` with its own time and level columns, so only the file carries
the exact ``<ISO8601> - <LEVEL>: <message>`` layout.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(levelname)s: %(message)s"


class ISOFormatter(logging.Formatter):
    """Formatter rendering ``asctime`` as an ISO 8601 UTC timestamp."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
            timespec="milliseconds"
        )


def configure_logging(
    log_file: Path | None,
    *,
    console: Console | None = None,
    level: int = logging.INFO,
    quiet: bool = False,
) -> logging.Logger:
    """Configure the ``productphoto`` logger tree.

    Args:
        log_file: File receiving every log line (appended). Parent
            directories are created. None disables file logging.
        console: Rich console for the console handler.
        level: Minimum level for both handlers.
        quiet: Only warnings and above reach the console (used with --json).

    Returns:
        The configured ``productphoto`` logger.
    """
    root = logging.getLogger("productphoto")
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(ISOFormatter(LOG_FORMAT))
        file_handler.setLevel(level)
        root.addHandler(file_handler)

    rich_handler = RichHandler(console=console, show_time=True, show_path=False)
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    rich_handler.setLevel(logging.WARNING if quiet else level)
    root.addHandler(rich_handler)

    root.propagate = False
    return root
