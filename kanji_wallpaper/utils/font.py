"""Font loading and glyph metrics.

The layout solver never touches Pillow directly; it is handed a
``pixel_size -> GlyphMetrics`` function built here. Bold and italic are
synthesized (stroke and shear) so any single-face CJK font can be used.
"""

import math
from dataclasses import dataclass
from functools import lru_cache

from PIL import ImageFont

from kanji_wallpaper.types import Glyph, MetricsFn


ITALIC_SHEAR = 0.2


@dataclass(frozen=True)
class FontSpec:
    """Font selection.

    Attributes:
        family: Font file name or path understood by ``ImageFont.truetype``.
            Empty string selects Pillow's bundled default font.
        bold: Synthesize a bold face with a glyph outline stroke.
        italic: Synthesize an oblique face by shearing each glyph.
    """

    family: str = ""
    bold: bool = False
    italic: bool = False

    def stroke_width(self, pixel_size: int) -> int:
        if not self.bold:
            return 0
        return max(1, pixel_size // 32)


@dataclass(frozen=True)
class GlyphMetrics:
    """Measured size of the reference glyph at one pixel size."""

    width: int
    height: int
    descent: int


@lru_cache(maxsize=512)
def load_font(family: str, pixel_size: int) -> ImageFont.FreeTypeFont:
    """Load ``family`` at ``pixel_size``; raises ``OSError`` if it cannot be opened."""
    if not family:
        font = ImageFont.load_default(size=pixel_size)
        if not isinstance(font, ImageFont.FreeTypeFont):
            raise OSError("Pillow was built without FreeType support")
        return font
    return ImageFont.truetype(family, pixel_size)


def measure(spec: FontSpec, reference: Glyph, pixel_size: int) -> GlyphMetrics:
    """Measure ``reference`` in ``spec`` at ``pixel_size``.

    Width is the advance of the reference glyph, height is the font's line
    height (ascent + descent); both include the synthetic bold stroke.
    """
    font = load_font(spec.family, pixel_size)
    stroke = spec.stroke_width(pixel_size)
    ascent, descent = font.getmetrics()
    width = math.ceil(font.getlength(reference)) + 2 * stroke
    height = ascent + descent + 2 * stroke
    return GlyphMetrics(width=width, height=height, descent=descent + stroke)


def make_metrics_fn(spec: FontSpec, reference: Glyph) -> MetricsFn:
    """Bind ``spec`` and ``reference`` into the solver's metrics callable."""

    def metrics_fn(pixel_size: int) -> GlyphMetrics:
        return measure(spec, reference, pixel_size)

    return metrics_fn
