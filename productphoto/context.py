"""Explicit run context threaded through the pipeline.

Holds the logger, the sleep function used for fixed inter-call delays, and
the one-time output-directory snapshot the matting stage takes at the start
of its run (None until then). Tests substitute a recording sleep and inspect
the snapshot directly.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable


@dataclass(frozen=True)
class DirectorySnapshot:
    """Lower-cased file names of a directory, taken once.

    The snapshot is never refreshed during a run: files written after it was
    taken are not visible to ``contains``.
    """

    directory: Path
    names: frozenset[str]
    taken_at: datetime

    @classmethod
    def take(cls, directory: Path) -> DirectorySnapshot:
        names = (
            frozenset(p.name.lower() for p in directory.iterdir())
            if directory.is_dir()
            else frozenset()
        )
        return cls(directory=directory, names=names, taken_at=datetime.now(timezone.utc))

    def contains(self, file_name: str) -> bool:
        return file_name.lower() in self.names

    def __len__(self) -> int:
        return len(self.names)


@dataclass
class RunContext:
    """Per-run collaborators shared by the controller and the matting stage."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("productphoto"))
    sleep: Callable[[float], None] = time.sleep
    snapshot: DirectorySnapshot | None = None

    def pause(self, seconds: float) -> None:
        """Fixed, non-adaptive delay. Zero or negative disables it."""
        if seconds > 0:
            self.sleep(seconds)
