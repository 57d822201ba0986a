"""Batch pipeline orchestrating enumeration, per-file processing and summary."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from loguru import logger

from daystamp.core.errors import FileProcessingError, InputDirectoryError, OutputDirectoryError
from daystamp.core.models import (
    SUPPORTED_EXTENSIONS,
    FileFailure,
    PhotoRecord,
    RunConfig,
    RunSummary,
)
from daystamp.core.services.day_offset import day_offset, format_watermark_text
from daystamp.core.services.interfaces import ReferenceTimeResolver
from daystamp.infrastructure.image_service import ImageService


def is_supported(path: Path) -> bool:
    """Return True when `path` has a supported image extension (case-insensitive)."""
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def output_path_for(config: RunConfig, input_path: Path) -> Path:
    """Output keeps the input's base name, extension included, although content is PNG."""
    return config.output_dir / input_path.name


class BatchPipeline:
    """Watermark every supported image of `config.input_dir`.

    Collaborators are injected so tests can swap the timestamp resolver.
    """

    def __init__(
        self, config: RunConfig, images: ImageService, resolver: ReferenceTimeResolver
    ) -> None:
        self._config = config
        self._images = images
        self._resolver = resolver

    def prepare(self) -> None:
        """Check the input directory and create the output directory.

        Raises InputDirectoryError or OutputDirectoryError.
        """
        input_dir = self._config.input_dir
        if not input_dir.is_dir():
            raise InputDirectoryError(
                f"Input directory '{input_dir}' does not exist or is not a directory"
            )
        try:
            self._config.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as ex:
            raise OutputDirectoryError(
                f"Cannot create output directory '{self._config.output_dir}': {ex}"
            ) from ex

    def collect(self, summary: RunSummary) -> list[Path]:
        """List supported files of the input directory in name order."""
        try:
            entries = sorted(self._config.input_dir.iterdir(), key=lambda p: p.name)
        except OSError as ex:
            raise InputDirectoryError(
                f"Cannot read input directory '{self._config.input_dir}': {ex}"
            ) from ex

        files: list[Path] = []
        for entry in entries:
            if entry.is_dir():
                continue
            if entry.is_file() and is_supported(entry):
                files.append(entry)
            else:
                logger.info("Skipping unsupported file: {}", entry.name)
                summary.skipped.append(entry.name)
        return files

    def process_file(self, path: Path) -> PhotoRecord:
        """Watermark a single file; raises FileProcessingError on any stage failure."""
        record = PhotoRecord(file_path=path)
        # Timestamp first: it must not depend on the image decoding.
        record.reference = self._resolver.resolve(path)
        record.day_offset = day_offset(self._config.target_date, record.reference.timestamp)
        record.watermark_text = format_watermark_text(
            record.reference.timestamp, record.day_offset
        )

        canvas, record.image_format = self._images.decode(path)
        try:
            logger.info(
                "Processing {} (format: {}, using {} time)",
                path.name,
                record.image_format,
                record.reference.source.value,
            )
            self._images.draw_watermark(canvas, record.watermark_text)
            record.output_path = output_path_for(self._config, path)
            self._images.encode(canvas, record.output_path)
        finally:
            canvas.close()

        logger.info("Watermarked {} -> {}", path.name, record.output_path)
        return record

    def _process_safely(self, path: Path) -> PhotoRecord | FileFailure:
        try:
            return self.process_file(path)
        except FileProcessingError as ex:
            logger.error("Failed to process {} ({}): {}", path.name, ex.stage, ex.cause)
            return FileFailure(file_path=path, stage=ex.stage, reason=str(ex.cause))

    def run(self) -> RunSummary:
        """Run the whole batch and return its summary.

        Setup errors propagate before any file is touched; per-file errors are
        recorded in the summary and never stop the run.
        """
        self.prepare()
        summary = RunSummary()
        files = self.collect(summary)
        summary.qualifying = len(files)

        logger.info(
            "Processing {} image(s) from '{}' into '{}'",
            len(files),
            self._config.input_dir,
            self._config.output_dir,
        )

        if self._config.workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self._config.workers) as pool:
                results = list(pool.map(self._process_safely, files))
        else:
            results = [self._process_safely(p) for p in files]

        for result in results:
            if isinstance(result, FileFailure):
                summary.failed.append(result)
            elif result.output_path is not None:
                summary.written.append(result.output_path)

        if summary.qualifying == 0:
            logger.info(
                "No supported image files ({}) found in '{}'",
                ", ".join(SUPPORTED_EXTENSIONS),
                self._config.input_dir,
            )
        else:
            logger.info(
                "Finished: processed {} image(s), {} written, {} failed",
                summary.processed,
                len(summary.written),
                len(summary.failed),
            )
        return summary
