"""Exception hierarchy.

`SetupError` subclasses abort the whole run before any file is touched.
`FileProcessingError` subclasses only skip the file they were raised for.
"""

from __future__ import annotations

from pathlib import Path


class DaystampError(Exception):
    """Base class for all errors raised by this package."""


class SetupError(DaystampError):
    """A run-level precondition failed."""


class ConfigError(SetupError):
    """Settings are malformed (bad target date, bad color, unreadable file)."""


class FontLoadError(SetupError):
    """The watermark font could not be loaded."""


class InputDirectoryError(SetupError):
    """The input directory is missing or not a directory."""


class OutputDirectoryError(SetupError):
    """The output directory could not be created."""


class FileProcessingError(DaystampError):
    """Processing of a single file failed; the run continues."""

    stage = "process"

    def __init__(self, path: str | Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path.name}: {cause}")


class MetadataError(FileProcessingError):
    """File metadata could not be read."""

    stage = "metadata"


class DecodeError(FileProcessingError):
    """The file is not a decodable image or is corrupt."""

    stage = "decode"


class WriteError(FileProcessingError):
    """The output file could not be created or encoded."""

    stage = "write"
