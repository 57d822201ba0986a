"""Utilities for filesystem timestamps and date parsing.

This module centralizes how a photo's reference timestamp is read from file
metadata so the rest of the app can depend on a single behavior: prefer the
creation time, fall back to the modification time, and say so in the log.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timezone
import os
from pathlib import Path
from typing import Any

from loguru import logger

from daystamp.core.errors import ConfigError, MetadataError
from daystamp.core.models import ReferenceTime, TimeSource

TARGET_DATE_FMT = "%Y-%m-%d"


def parse_target_date(value: str | date) -> date:
    """Parse an ISO `YYYY-MM-DD` target date; raise ConfigError when malformed."""
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), TARGET_DATE_FMT).date()
    except (ValueError, TypeError) as ex:
        raise ConfigError(f"Invalid target date {value!r}: {ex}") from ex


def _utc_from_epoch(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def birthtime_of(st: Any) -> float | None:
    """Return creation time from a stat result, or None when unavailable.

    `st_birthtime` exists on macOS/BSD and on Windows with recent Python. Linux
    `os.stat` does not expose it. A value of 0 is the unset sentinel.
    """
    value = getattr(st, "st_birthtime", None)
    if not value:
        return None
    return float(value)


class StatTimeResolver:
    """Resolve reference timestamps from `os.stat` results."""

    def __init__(self, stat: Callable[[Path], Any] = os.stat) -> None:
        self._stat = stat

    def resolve(self, path: Path) -> ReferenceTime:
        """Return creation time of `path`, falling back to modification time."""
        try:
            st = self._stat(path)
        except OSError as ex:
            raise MetadataError(path, ex) from ex

        created = birthtime_of(st)
        if created is not None:
            return ReferenceTime(_utc_from_epoch(created), TimeSource.CREATED)

        logger.warning(
            "Creation time unavailable for {}, using modification time", Path(path).name
        )
        return ReferenceTime(_utc_from_epoch(float(st.st_mtime)), TimeSource.MODIFIED)
