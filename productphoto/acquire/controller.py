"""Per-item acquisition state machine.

For each catalog item, in catalog order::

    CheckExisting ─► Skipped
         │
    SearchCandidates ─► (none) ─► Failed
         │
    TryCandidate(i) ─► Download ─► (failed) ─────────────┐
                          │                              │
                       Validate ─► (invalid) ─► cleanup ─┤
                          │                              │
                       Finalize ─► Success      Next(i+1) or Failed

Candidates and items are processed strictly sequentially. Fixed pauses
separate candidate attempts and items; they are the only rate limiting.
A temporary artifact never outlives its candidate attempt: it is either
renamed to the canonical path or deleted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from productphoto.acquire.base import ArtifactValidator, CandidateSource, ImageFetcher
from productphoto.acquire.query import QueryBuilder
from productphoto.config import AcquisitionConfig
from productphoto.context import RunContext
from productphoto.errors import CleanupError
from productphoto.types import (
    AcquisitionResult,
    AcquisitionStatus,
    AcquisitionSummary,
    Artifact,
    Candidate,
    CatalogItem,
)
from productphoto.utils.image import IMAGE_EXTENSIONS, find_existing


class AcquisitionController:
    """Drive discovery, download, validation and finalization per catalog item."""

    def __init__(
        self,
        output_dir: Path,
        source: CandidateSource,
        fetcher: ImageFetcher,
        validator: ArtifactValidator,
        *,
        config: AcquisitionConfig | None = None,
        query_builder: QueryBuilder | None = None,
        context: RunContext | None = None,
    ) -> None:
        self.output_dir = output_dir
        self.source = source
        self.fetcher = fetcher
        self.validator = validator
        self.config = config or AcquisitionConfig()
        self.query_builder = query_builder or QueryBuilder.from_config(self.config)
        self.context = context or RunContext()

    @property
    def log(self) -> logging.Logger:
        return self.context.logger

    # ------------------------------------------------------------------

    def run(self, items: Iterable[CatalogItem]) -> AcquisitionSummary:
        """Process every item in order and return the results in the same order."""
        items = list(items)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        summary = AcquisitionSummary()

        for idx, item in enumerate(items):
            result = self.process_item(item)
            summary.results.append(result)

            # Skipped items made no network calls, so there is nothing to pace
            is_last = idx == len(items) - 1
            if not is_last and result.status != AcquisitionStatus.skipped:
                self.context.pause(self.config.item_delay_seconds)

        self.log.info(
            "Download complete. Successful: %d, Failed: %d, Skipped: %d",
            summary.successful, summary.failed, summary.skipped,
        )
        return summary

    def process_item(self, item: CatalogItem) -> AcquisitionResult:
        """Run the state machine for one item. Never raises for per-candidate errors."""
        query, file_key = self.query_builder.build(item)
        label = self.query_builder.full_name(item)
        base = self.output_dir / file_key

        existing = find_existing(base)
        if existing is not None:
            self.log.info("Skipping %s - image already exists at %s", label, existing)
            return AcquisitionResult(
                file_key, AcquisitionStatus.skipped, final_path=existing, label=label
            )

        urls = self.source.find(query, self.config.max_candidates)
        if not urls:
            self.log.warning("No images found for %s", label)
            return AcquisitionResult(file_key, AcquisitionStatus.failed, label=label)

        candidates = [
            Candidate(url=url, rank=i)
            for i, url in enumerate(urls[: self.config.max_candidates])
        ]
        attempts = 0
        for candidate in candidates:
            if candidate.rank > 0:
                self.context.pause(self.config.candidate_delay_seconds)
            attempts += 1
            final_path = self._try_candidate(candidate, base, label)
            if final_path is not None:
                return AcquisitionResult(
                    file_key,
                    AcquisitionStatus.success,
                    final_path=final_path,
                    label=label,
                    attempts=attempts,
                )

        self.log.warning(
            "Failed to find a valid image for %s after trying %d images", label, attempts
        )
        return AcquisitionResult(
            file_key, AcquisitionStatus.failed, label=label, attempts=attempts
        )

    # ------------------------------------------------------------------

    def _try_candidate(self, candidate: Candidate, base: Path, label: str) -> Path | None:
        """One Download → Validate → Finalize attempt. Returns the canonical path on success."""
        temp = base.with_name(f"{base.name}_temp{candidate.rank}")
        artifact: Artifact | None = None
        try:
            artifact = self.fetcher.fetch(candidate.url, temp)
            if artifact is None:
                self.log.warning("Failed to download image from %s", candidate.url)
                return None

            if self.validator.validate(artifact, label):
                final_path = base.with_name(base.name + artifact.extension)
                artifact.local_path.replace(final_path)
                self.log.info("Valid image found and saved as %s", final_path)
                return final_path

            self.log.info("Deleting invalid image %s", artifact.local_path)
            self._discard(artifact.local_path)
            return None
        except Exception as e:
            self.log.error("Error processing %s: %s", candidate.url, e)
            self._discard_temp(temp, artifact)
            return None

    def _discard_temp(self, temp: Path, artifact: Artifact | None) -> None:
        """Best-effort removal of every file this attempt may have left."""
        paths = [temp] + [temp.with_name(temp.name + ext) for ext in IMAGE_EXTENSIONS]
        if artifact is not None:
            paths.insert(0, artifact.local_path)
        for path in dict.fromkeys(paths):
            self._discard(path)

    def _discard(self, path: Path) -> None:
        try:
            _remove(path)
        except CleanupError as e:
            self.log.error("Error cleaning up temp file: %s", e)


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise CleanupError(f"{path}: {exc}") from exc
