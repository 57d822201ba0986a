"""Core domain models for a watermarking run and its per-file records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path

SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png")


class TimeSource(Enum):
    """Filesystem field a reference timestamp was taken from."""

    CREATED = "created"
    MODIFIED = "modified"


@dataclass(frozen=True)
class RunConfig:
    """Immutable settings for one run, built once at startup."""

    input_dir: Path
    output_dir: Path
    target_date: date
    font_size: float = 70.0
    font_path: Path | None = None
    color: tuple[int, int, int, int] = (255, 165, 0, 255)
    offset_x: int = 100
    offset_y: int = 100
    workers: int = 1


@dataclass(frozen=True)
class ReferenceTime:
    """Timestamp chosen to represent when a photo was taken."""

    timestamp: datetime
    source: TimeSource


@dataclass
class PhotoRecord:
    """A single photo moving through the pipeline."""

    file_path: Path
    reference: ReferenceTime | None = None
    day_offset: int | None = None
    watermark_text: str = ""
    image_format: str | None = None
    output_path: Path | None = None


@dataclass
class FileFailure:
    """A file that was skipped because one of its stages failed.

    Attributes:
        file_path: Input file that failed.
        stage: Pipeline stage name (``metadata``, ``decode``, ``write``...).
        reason: Human readable cause.
    """

    file_path: Path
    stage: str
    reason: str


@dataclass
class RunSummary:
    """Outcome of a batch run."""

    qualifying: int = 0
    written: list[Path] = field(default_factory=list)
    failed: list[FileFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        """Number of qualifying files the pipeline attempted."""
        return len(self.written) + len(self.failed)
