"""Settings access helpers for JSON-based configuration.

Run configuration is layered: built-in defaults, then the JSON settings file,
then explicit overrides (CLI flags). The result is a frozen `RunConfig`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from daystamp.core.errors import ConfigError
from daystamp.core.models import RunConfig
from daystamp.infrastructure.utils import parse_target_date

DEFAULTS: dict[str, Any] = {
    "input_dir": "./photos",
    "output_dir": "./output_images",
    "target_date": "2024-10-03",
    "workers": 1,
    "watermark.font_path": None,
    "watermark.font_size": 70.0,
    "watermark.color": [255, 165, 0, 255],
    "watermark.offset_x": 100,
    "watermark.offset_y": 100,
}


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


def load_settings(settings_path: str | Path) -> JsonSettings:
    """Open `settings_path`, turning missing or malformed files into ConfigError."""
    try:
        return JsonSettings(settings_path)
    except FileNotFoundError as ex:
        raise ConfigError(str(ex)) from ex
    except (OSError, ValueError) as ex:
        raise ConfigError(f"Cannot read settings {settings_path}: {ex}") from ex


def parse_color(value: Any) -> tuple[int, int, int, int]:
    """Parse `[r, g, b]`, `[r, g, b, a]` or `"r,g,b[,a]"` into an RGBA tuple."""
    parts = value.split(",") if isinstance(value, str) else value
    try:
        channels = [int(p) for p in parts]
    except (TypeError, ValueError) as ex:
        raise ConfigError(f"Invalid color {value!r}: {ex}") from ex
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4 or any(c < 0 or c > 255 for c in channels):
        raise ConfigError(f"Invalid color {value!r}: expected 3 or 4 channels in 0-255")
    return (channels[0], channels[1], channels[2], channels[3])


def _number(key: str, value: Any, kind: type, minimum: float) -> Any:
    try:
        number = kind(value)
    except (TypeError, ValueError) as ex:
        raise ConfigError(f"Invalid {key} {value!r}: {ex}") from ex
    if number < minimum:
        raise ConfigError(f"Invalid {key} {value!r}: must be >= {minimum}")
    return number


def build_run_config(
    settings: JsonSettings | None = None, overrides: dict[str, Any] | None = None
) -> RunConfig:
    """Merge defaults, `settings` and `overrides` into a validated RunConfig.

    Override keys use the same dotted names as the settings file; a value of
    None means "not given".
    """
    overrides = overrides or {}

    def pick(key: str) -> Any:
        value = overrides.get(key)
        if value is not None:
            return value
        if settings is not None:
            value = settings.get(key)
            if value is not None:
                return value
        return DEFAULTS[key]

    font_path = pick("watermark.font_path")
    return RunConfig(
        input_dir=Path(pick("input_dir")).expanduser(),
        output_dir=Path(pick("output_dir")).expanduser(),
        target_date=parse_target_date(pick("target_date")),
        font_size=_number("font size", pick("watermark.font_size"), float, 1),
        font_path=Path(font_path).expanduser() if font_path else None,
        color=parse_color(pick("watermark.color")),
        offset_x=_number("offset_x", pick("watermark.offset_x"), int, 0),
        offset_y=_number("offset_y", pick("watermark.offset_y"), int, 0),
        workers=_number("workers", pick("workers"), int, 1),
    )
