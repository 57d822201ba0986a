"""Image decoding, watermark drawing and PNG encoding via Pillow.

The service owns the loaded font and the watermark style of a run. It is
shared read-only by every file: no method mutates service state, each call
works on the canvas passed in.
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont
from loguru import logger

from daystamp.core.errors import DecodeError, FontLoadError, WriteError
from daystamp.core.models import RunConfig

OUTPUT_FORMAT = "PNG"
# Left edge, text baseline.
TEXT_ANCHOR = "ls"


def load_font(size: float, font_path: Path | None = None) -> ImageFont.FreeTypeFont:
    """Load a TrueType font at `size` points (72 DPI, so points == pixels).

    Without `font_path` the font bundled with Pillow is used. Raises
    FontLoadError when the font cannot be parsed or FreeType is unavailable.
    """
    try:
        if font_path is not None:
            font = ImageFont.truetype(str(font_path), size)
        else:
            font = ImageFont.load_default(size=size)
    except (OSError, ValueError) as ex:
        raise FontLoadError(f"Cannot load font {font_path or '<bundled>'}: {ex}") from ex
    if not isinstance(font, ImageFont.FreeTypeFont):
        raise FontLoadError("FreeType support is required to render the bundled font")
    return font


def decode_canvas(path: Path) -> tuple[Image.Image, str | None]:
    """Decode `path` and return an independent RGBA canvas plus the detected format."""
    try:
        with Image.open(path) as im:
            im.load()
            fmt = im.format
            canvas = im.convert("RGBA")
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as ex:
        raise DecodeError(path, ex) from ex
    return canvas, fmt


def encode_png(canvas: Image.Image, path: Path) -> None:
    """Write `canvas` as PNG to `path`, creating or truncating it."""
    try:
        canvas.save(path, format=OUTPUT_FORMAT)
    except (OSError, ValueError) as ex:
        try:
            path.unlink(missing_ok=True)
        except OSError as cleanup_ex:
            logger.debug("Cleanup of partial output {} failed: {}", path, cleanup_ex)
        raise WriteError(path, ex) from ex


class ImageService:
    """Decode, watermark and encode images with a fixed style."""

    def __init__(
        self,
        font: ImageFont.FreeTypeFont,
        color: tuple[int, int, int, int],
        offset_x: int,
        offset_y: int,
    ) -> None:
        self._font = font
        self._color = color
        self._offset_x = offset_x
        self._offset_y = offset_y

    @classmethod
    def from_config(cls, config: RunConfig) -> ImageService:
        """Load the configured font and build a service; raises FontLoadError."""
        font = load_font(config.font_size, config.font_path)
        return cls(font, config.color, config.offset_x, config.offset_y)

    @property
    def font(self) -> ImageFont.FreeTypeFont:
        return self._font

    def decode(self, path: Path) -> tuple[Image.Image, str | None]:
        """Return a mutable RGBA canvas for `path`; raises DecodeError."""
        return decode_canvas(path)

    def text_origin(self, canvas_size: tuple[int, int]) -> tuple[int, int]:
        """Left/baseline point of the watermark for a canvas of `canvas_size`."""
        _, height = canvas_size
        return self._offset_x, height - self._offset_y

    def text_bbox(self, canvas_size: tuple[int, int], text: str) -> tuple[int, int, int, int]:
        """Bounding box the watermark text covers on a canvas of `canvas_size`."""
        left, top, right, bottom = self._font.getbbox(text, anchor=TEXT_ANCHOR)
        x, y = self.text_origin(canvas_size)
        return (int(x + left), int(y + top), int(x + right), int(y + bottom))

    def draw_watermark(self, canvas: Image.Image, text: str) -> None:
        """Composite `text` source-over onto `canvas` in place.

        Text is not wrapped or bounds checked; anything past the edges is clipped.
        """
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        draw.text(
            self.text_origin(canvas.size),
            text,
            font=self._font,
            fill=self._color,
            anchor=TEXT_ANCHOR,
        )
        canvas.alpha_composite(layer)

    def encode(self, canvas: Image.Image, path: Path) -> None:
        """Encode `canvas` as PNG at `path`; raises WriteError."""
        encode_png(canvas, path)
