"""Core service interfaces.

Platform specific pieces (how a creation time is obtained) live behind these
protocols so the pipeline only depends on the fallback contract.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from daystamp.core.models import ReferenceTime


class ReferenceTimeResolver(Protocol):
    """Resolves the reference timestamp of a file.

    Implementations must prefer the creation time and fall back to the
    modification time when creation time is unavailable or unset, logging a
    warning when they do. Raising is reserved for unreadable metadata.
    """

    def resolve(self, path: Path) -> ReferenceTime:
        """Return the reference timestamp for `path`."""
        raise NotImplementedError
