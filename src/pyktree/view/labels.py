"""Text label rasterization.

Label text is drawn with Pillow into an RGBA buffer whose pixel size is
the logical canvas size multiplied by the display's pixel ratio, so the
texture stays crisp on high density displays.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Bold monospace first, then common fallbacks
FONT_CANDIDATES = (
    "DejaVuSansMono-Bold.ttf",
    "LiberationMono-Bold.ttf",
    "Menlo.ttc",
    "consolab.ttf",
    "DejaVuSans-Bold.ttf",
    "Arial Bold.ttf",
)

TEXT_COLOR = (255, 255, 255, 255)
STROKE_COLOR = (25, 118, 210, 102)  # Translucent blue outline


@dataclass
class LabelImage:
    """Rasterized label.

    Attributes:
        text: The label text
        pixels: RGBA pixel data, shape (height, width, 4), uint8
        logical_width: Canvas width before pixel ratio scaling
        logical_height: Canvas height before pixel ratio scaling
        pixel_ratio: Device pixel ratio the label was drawn for
    """

    text: str
    pixels: np.ndarray
    logical_width: int
    logical_height: int
    pixel_ratio: float

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


@lru_cache(maxsize=32)
def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load the first available label font at the given pixel size."""
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug(f"No TrueType label font found, using Pillow default at {size}px")
    return ImageFont.load_default(size=size)


def render_label(
    text: str,
    font_size: int = 24,
    pixel_ratio: float = 1.0,
    canvas_size: tuple[int, int] = (512, 128),
    stroke_width: int = 1,
) -> LabelImage:
    """Render label text centered on a transparent canvas.

    Args:
        text: Text to render
        font_size: Font size in logical pixels
        pixel_ratio: Device pixel ratio (physical / logical pixels)
        canvas_size: Logical (width, height) of the canvas
        stroke_width: Outline width in logical pixels

    Returns:
        LabelImage with pixels sized canvas_size * pixel_ratio
    """
    if pixel_ratio <= 0:
        pixel_ratio = 1.0

    logical_w, logical_h = canvas_size
    width = max(1, round(logical_w * pixel_ratio))
    height = max(1, round(logical_h * pixel_ratio))

    image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    font = _load_font(max(1, round(font_size * pixel_ratio)))

    draw.text(
        (width / 2, height / 2),
        text,
        font=font,
        fill=TEXT_COLOR,
        anchor="mm",
        stroke_width=max(0, round(stroke_width * pixel_ratio)),
        stroke_fill=STROKE_COLOR,
    )

    return LabelImage(
        text=text,
        pixels=np.asarray(image, dtype=np.uint8).copy(),
        logical_width=logical_w,
        logical_height=logical_h,
        pixel_ratio=pixel_ratio,
    )
