"""Idempotent background-removal stage.

Consumes the accepted-images directory and writes ``<stem>_nobg.png`` for
every supported source file. The output directory is listed once, before the
loop starts; that snapshot alone decides skip vs. process, so outputs written
during the run are not consulted again.
"""

from __future__ import annotations

from pathlib import Path

from productphoto.config import MattingConfig
from productphoto.context import DirectorySnapshot, RunContext
from productphoto.errors import MattingError
from productphoto.matte.base import BackgroundRemover
from productphoto.types import MattingRecord, MattingStatus, MattingSummary
from productphoto.utils.image import content_type_for


def output_name_for(source: Path, suffix: str = "_nobg") -> str:
    """``Fenix_Fenix_7.jpg`` → ``Fenix_Fenix_7_nobg.png`` (remove.bg returns PNG)."""
    return f"{source.stem}{suffix}.png"


class MattingStage:
    """Run a ``BackgroundRemover`` over every supported file in *source_dir*."""

    def __init__(
        self,
        source_dir: Path,
        output_dir: Path,
        remover: BackgroundRemover,
        *,
        config: MattingConfig | None = None,
        context: RunContext | None = None,
    ) -> None:
        self.source_dir = source_dir
        self.output_dir = output_dir
        self.remover = remover
        self.config = config or MattingConfig()
        self.context = context or RunContext()

    def source_files(self) -> list[Path]:
        """Supported-format files in the source directory, sorted by name."""
        formats = {f.lower() for f in self.config.supported_formats}
        return sorted(
            p for p in self.source_dir.iterdir()
            if p.is_file() and p.suffix.lower() in formats
        )

    def run(self, force: bool = False) -> MattingSummary:
        """Process every source file once; returns per-file records and counts.

        Raises:
            FileNotFoundError: if the source directory does not exist.
        """
        log = self.context.logger
        if not self.source_dir.is_dir():
            raise FileNotFoundError(f"Source directory does not exist: {self.source_dir}")

        log.info("Starting background removal process")
        log.info("Source directory: %s", self.source_dir)
        log.info("Output directory: %s", self.output_dir)
        if force:
            log.info("Force mode enabled: will reprocess all images regardless of existing output files")

        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True)
            log.info("Created output directory: %s", self.output_dir)

        snapshot = DirectorySnapshot.take(self.output_dir)
        self.context.snapshot = snapshot
        files = self.source_files()
        log.info("Found %d total images in source directory", len(files))

        summary = MattingSummary()
        for index, source in enumerate(files, start=1):
            record = self._process_file(source, snapshot, force, f"[{index}/{len(files)}]")
            summary.records.append(record)

        log.info("Processing complete:")
        log.info("  Successfully processed: %d", summary.processed)
        log.info("  Skipped (already exist): %d", summary.skipped)
        log.info("  Failed to process: %d", summary.failed)
        log.info("  Total images handled: %d", summary.total)
        return summary

    def _process_file(
        self, source: Path, snapshot: DirectorySnapshot, force: bool, progress: str
    ) -> MattingRecord:
        log = self.context.logger
        output_name = output_name_for(source, self.config.output_suffix)

        if not force and snapshot.contains(output_name):
            log.info("%s Skipping: %s (already processed)", progress, source.name)
            return MattingRecord(source.name, output_name, MattingStatus.skipped)

        log.info("%s Processing: %s", progress, source.name)
        output_path = self.output_dir / output_name
        try:
            result = self.remover.remove_background(
                source.read_bytes(), source.name, content_type_for(source)
            )
            output_path.write_bytes(result)
        except Exception as e:
            log.error("  Failed to process %s: %s", source.name, e)
            if isinstance(e, MattingError) and e.retryable:
                log.info("  %s may succeed on a later run", source.name)
            return MattingRecord(source.name, output_name, MattingStatus.failed, error=str(e))

        log.info("  Saved to: %s", output_path)
        return MattingRecord(source.name, output_name, MattingStatus.processed)
