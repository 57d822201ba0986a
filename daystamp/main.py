from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from loguru import logger

from daystamp.app.pipeline import BatchPipeline
from daystamp.core.errors import SetupError
from daystamp.infrastructure.image_service import ImageService
from daystamp.infrastructure.logging import init_logging
from daystamp.infrastructure.settings import JsonSettings, build_run_config, load_settings
from daystamp.infrastructure.utils import StatTimeResolver

BASE_DIR = Path(__file__).parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daystamp",
        description="Stamp photos with their file date and the day offset from a target date.",
    )
    parser.add_argument("--settings", help="Path to a settings JSON file.")
    parser.add_argument("--input-dir", help="Directory containing the photos.")
    parser.add_argument("--output-dir", help="Directory the watermarked images are written to.")
    parser.add_argument("--target-date", help="Target date as YYYY-MM-DD.")
    parser.add_argument("--font", help="TrueType font file (default: Pillow's bundled font).")
    parser.add_argument("--font-size", type=float, help="Watermark font size in points.")
    parser.add_argument("--color", help="Watermark color as R,G,B or R,G,B,A.")
    parser.add_argument("--offset-x", type=int, help="Inset from the left edge in pixels.")
    parser.add_argument("--offset-y", type=int, help="Inset from the bottom edge in pixels.")
    parser.add_argument("--workers", type=int, help="Number of images processed in parallel.")
    parser.add_argument("--log-dir", help="Also write rotating log files to this directory.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "input_dir": args.input_dir,
        "output_dir": args.output_dir,
        "target_date": args.target_date,
        "workers": args.workers,
        "watermark.font_path": args.font,
        "watermark.font_size": args.font_size,
        "watermark.color": args.color,
        "watermark.offset_x": args.offset_x,
        "watermark.offset_y": args.offset_y,
    }


def _settings(args: argparse.Namespace) -> JsonSettings | None:
    if args.settings:
        return load_settings(args.settings)
    bundled = BASE_DIR / "settings.json"
    if bundled.exists():
        return load_settings(bundled)
    return None


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_logging(args.log_dir, level="DEBUG" if args.verbose else "INFO")

    try:
        config = build_run_config(_settings(args), _overrides(args))
        images = ImageService.from_config(config)
        logger.info("Target date: {}", config.target_date.isoformat())
        logger.info(
            "Watermark font size: {:.1f}pt, position: left {}px, bottom {}px",
            config.font_size,
            config.offset_x,
            config.offset_y,
        )
        BatchPipeline(config, images, StatTimeResolver()).run()
    except SetupError as ex:
        logger.critical("Fatal: {}", ex)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
