"""Pillow drawing helpers for badges and glyphs."""

import logging
import math
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from kanji_wallpaper.types import Color, Glyph
from kanji_wallpaper.utils.font import ITALIC_SHEAR

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]


def solid_background(size: Tuple[int, int], color: Color) -> Image.Image:
    """Plain background used when no wallpaper image is configured."""
    return Image.new("RGB", size, tuple(color))


def badge_radius(width: int, height: int) -> int:
    """Corner radius of a badge: three quarters of an eighth of its longer side."""
    return math.ceil(0.75 * (max(width, height) >> 3))


def draw_badge(draw: ImageDraw.ImageDraw, box: Box, color: Color) -> None:
    """Fill a rounded rectangle covering ``box`` (inclusive corners)."""
    x0, y0, x1, y1 = box
    radius = badge_radius(x1 - x0 + 1, y1 - y0 + 1)
    draw.rounded_rectangle((x0, y0, x1, y1), radius=radius, fill=tuple(color))


def draw_glyph(
    image: Image.Image,
    glyph: Glyph,
    box: Box,
    descent: int,
    font: ImageFont.FreeTypeFont,
    color: Color,
    stroke_width: int = 0,
    italic: bool = False,
) -> None:
    """Draw ``glyph`` horizontally centred in ``box`` on the cell's baseline.

    The baseline sits ``descent`` pixels above the bottom of the box so every
    row lines up regardless of individual glyph extents. ``image`` must be RGBA
    when ``italic`` is set, since the sheared glyph is alpha-composited.
    """
    x0, y0, x1, y1 = box
    width, height = x1 - x0 + 1, y1 - y0 + 1
    baseline = height - descent
    fill = tuple(color)

    if not italic:
        draw = ImageDraw.Draw(image)
        draw.text(
            (x0 + width / 2, y0 + baseline),
            glyph,
            fill=fill,
            font=font,
            anchor="ms",
            stroke_width=stroke_width,
            stroke_fill=fill,
        )
        return

    tile = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    ImageDraw.Draw(tile).text(
        (width / 2, baseline),
        glyph,
        fill=fill,
        font=font,
        anchor="ms",
        stroke_width=stroke_width,
        stroke_fill=fill,
    )
    # Samples x + k * (y - baseline): leans right above the baseline.
    sheared = tile.transform(
        tile.size,
        Image.Transform.AFFINE,
        (1, ITALIC_SHEAR, -ITALIC_SHEAR * baseline, 0, 1, 0),
        resample=Image.Resampling.BICUBIC,
    )
    image.alpha_composite(sheared, (x0, y0))


def load_background(
    path: Optional[Path], size: Tuple[int, int], color: Color
) -> Image.Image:
    """Open the configured wallpaper, or a solid fill if there is none or it fails."""
    if path is None:
        return solid_background(size, color)
    try:
        with Image.open(path) as img:
            return img.convert("RGB")
    except (OSError, ValueError) as exc:
        logger.warning("Could not load background %s: %s", path, exc)
        return solid_background(size, color)
