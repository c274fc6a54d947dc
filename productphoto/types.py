"""Core data types for productphoto.

Every stage of the pipeline produces/consumes these types:
- Acquisition: catalog items, candidates, downloaded artifacts, verdicts
- Matting: per-file records and the run summary
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


# Characters that are not safe in file names on common filesystems
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/*?:"<>|]')


def clean_filename(name: str) -> str:
    """Replace every filesystem-unsafe character with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class AcquisitionStatus(str, enum.Enum):
    """Terminal state of one catalog item."""

    success = "success"
    failed = "failed"
    skipped = "skipped"


class MattingStatus(str, enum.Enum):
    """Outcome of one source file in a matting run."""

    processed = "processed"
    skipped = "skipped"
    failed = "failed"


# ---------------------------------------------------------------------------
# Acquisition types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogItem:
    """One device in the catalog.

    ``model`` is optional; an empty string means the product has no model
    segment (e.g. the first-generation Venu).
    """

    series: str
    product: str
    model: str = ""

    @property
    def stem(self) -> str:
        """Unsanitized ``<series>_<product>[_<model>]``."""
        parts = [self.series, self.product]
        if self.model:
            parts.append(self.model)
        return "_".join(parts)

    @property
    def file_key(self) -> str:
        """Filesystem-safe canonical file stem. Pure function of the item."""
        return clean_filename(self.stem)

    def to_dict(self) -> dict[str, str]:
        return {"series": self.series, "product": self.product, "model": self.model}


@dataclass(frozen=True)
class Candidate:
    """A discovered image URL, ranked by discovery order."""

    url: str
    rank: int


@dataclass
class Artifact:
    """A downloaded temporary image owned by a single candidate attempt."""

    local_path: Path
    extension: str
    source_url: str


@dataclass(frozen=True)
class ClassificationVerdict:
    """Accept/reject outcome of the vision classifier."""

    accepted: bool
    raw_text: str = ""


@dataclass
class AcquisitionResult:
    """Emitted exactly once per catalog item."""

    file_key: str
    status: AcquisitionStatus
    final_path: Path | None = None
    label: str = ""
    attempts: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_key": self.file_key,
            "label": self.label,
            "status": self.status.value,
            "final_path": str(self.final_path) if self.final_path else None,
            "attempts": self.attempts,
        }


@dataclass
class AcquisitionSummary:
    """All results of an acquisition run, in catalog order."""

    results: list[AcquisitionResult] = field(default_factory=list)

    def _count(self, status: AcquisitionStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def successful(self) -> int:
        return self._count(AcquisitionStatus.success)

    @property
    def failed(self) -> int:
        return self._count(AcquisitionStatus.failed)

    @property
    def skipped(self) -> int:
        return self._count(AcquisitionStatus.skipped)

    def to_dict(self) -> dict[str, Any]:
        return {
            "successful": self.successful,
            "failed": self.failed,
            "skipped": self.skipped,
            "results": [r.to_dict() for r in self.results],
        }


# ---------------------------------------------------------------------------
# Matting types
# ---------------------------------------------------------------------------


@dataclass
class MattingRecord:
    """Emitted exactly once per eligible source file per matting run."""

    source_file_name: str
    output_file_name: str
    status: MattingStatus
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source_file_name,
            "output": self.output_file_name,
            "status": self.status.value,
            "error": self.error,
        }


@dataclass
class MattingSummary:
    """Tally of a matting run."""

    records: list[MattingRecord] = field(default_factory=list)

    def _count(self, status: MattingStatus) -> int:
        return sum(1 for r in self.records if r.status == status)

    @property
    def processed(self) -> int:
        return self._count(MattingStatus.processed)

    @property
    def skipped(self) -> int:
        return self._count(MattingStatus.skipped)

    @property
    def failed(self) -> int:
        return self._count(MattingStatus.failed)

    @property
    def total(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "skipped": self.skipped,
            "failed": self.failed,
            "total": self.total,
            "records": [r.to_dict() for r in self.records],
        }
