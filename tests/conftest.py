from __future__ import annotations

from datetime import date
from pathlib import Path

from PIL import Image
from loguru import logger
import pytest

from daystamp.core.models import RunConfig
from daystamp.infrastructure.image_service import ImageService


@pytest.fixture
def log_messages():
    """Collect loguru records as "LEVEL message" strings."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda m: messages.append(f"{m.record['level'].name} {m.record['message']}"),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_image():
    """Write a solid-color image to `path` in the format implied by its extension."""

    def _make(path: Path, size=(200, 100), color=(40, 80, 120), fmt: str | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def config(tmp_path: Path) -> RunConfig:
    return RunConfig(
        input_dir=tmp_path / "in",
        output_dir=tmp_path / "out",
        target_date=date(2024, 10, 3),
        font_size=12,
        color=(255, 165, 0, 255),
        offset_x=5,
        offset_y=10,
    )


@pytest.fixture
def image_service(config: RunConfig) -> ImageService:
    return ImageService.from_config(config)
