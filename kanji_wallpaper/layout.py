"""Grid layout solver.

Finds the largest integer font pixel size for which ``glyph_count`` glyphs,
packed row-major with ``SPACING`` pixels between neighbouring cells, fit in a
``CanvasRegion``. The search is an upward linear scan starting at size 1: font
metrics are re-measured at every candidate size and are not guaranteed to be
strictly monotonic across backends, so bisection could skip the true answer.

The solver is pure. Metrics come from an injected ``pixel_size ->
GlyphMetrics`` callable (see :func:`kanji_wallpaper.utils.font.make_metrics_fn`),
which keeps it testable without any font installed.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from kanji_wallpaper.types import MetricsFn, VerticalAlign
from kanji_wallpaper.utils.font import GlyphMetrics


SPACING = 1
DEFAULT_CANVAS_LEFT = 1240
DEFAULT_CANVAS_MARGIN = 32


@dataclass(frozen=True)
class CanvasRegion:
    """Sub-rectangle of the background reserved for the mosaic."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_image(
        cls,
        width: int,
        height: int,
        left: int = DEFAULT_CANVAS_LEFT,
        margin: int = DEFAULT_CANVAS_MARGIN,
    ) -> "CanvasRegion":
        """Canvas right of ``left`` with ``margin`` pixels on every side."""
        return cls(
            x=left + margin,
            y=margin,
            width=max(0, width - left - 2 * margin),
            height=max(0, height - 2 * margin),
        )


@dataclass(frozen=True)
class GridLayout:
    """Solved glyph size and grid dimensions.

    Attributes:
        canvas: Region the grid was solved for.
        pixel_size: Font pixel size; 0 for a degenerate (empty) layout.
        glyph_width: Cell width in pixels.
        glyph_height: Cell height in pixels.
        descent: Font descent at ``pixel_size``; baselines sit this far above
            the bottom of each cell.
        columns: Cells per row.
        rows: Number of rows needed for the glyph count.
        spacing: Gap between neighbouring cells (never before the first).
        top: Y coordinate of the first row.
    """

    canvas: CanvasRegion
    pixel_size: int = 0
    glyph_width: int = 0
    glyph_height: int = 0
    descent: int = 0
    columns: int = 0
    rows: int = 0
    spacing: int = SPACING
    top: int = 0

    @property
    def is_degenerate(self) -> bool:
        return self.pixel_size == 0 or self.columns == 0 or self.rows == 0

    @property
    def capacity(self) -> int:
        return self.columns * self.rows

    @property
    def used_height(self) -> int:
        if self.rows == 0:
            return 0
        return self.rows * self.glyph_height + (self.rows - 1) * self.spacing

    def cell_origin(self, index: int) -> Tuple[int, int]:
        """Top-left pixel of the ``index``-th cell in row-major order."""
        if self.is_degenerate:
            raise ValueError("Degenerate layout has no cells")
        row, column = divmod(index, self.columns)
        x = self.canvas.x + column * (self.glyph_width + self.spacing)
        y = self.top + row * (self.glyph_height + self.spacing)
        return x, y


def degenerate_layout(canvas: CanvasRegion) -> GridLayout:
    return GridLayout(canvas=canvas, top=canvas.y)


def grid_shape(
    canvas: CanvasRegion, glyph_count: int, metrics: GlyphMetrics
) -> Optional[Tuple[int, int]]:
    """Return ``(columns, rows)`` if ``glyph_count`` glyphs fit, else ``None``."""
    if metrics.width <= 0 or metrics.height <= 0:
        return None
    columns = canvas.width // (metrics.width + SPACING)
    if columns < 1:
        return None
    rows = -(-glyph_count // columns)
    needed = rows * metrics.height + (rows - 1) * SPACING + metrics.descent
    if needed > canvas.height:
        return None
    return columns, rows


def solve(
    canvas: CanvasRegion,
    glyph_count: int,
    metrics_fn: MetricsFn,
    align: VerticalAlign = VerticalAlign.TOP,
) -> GridLayout:
    """Solve the largest grid layout fitting ``glyph_count`` glyphs in ``canvas``.

    Args:
        canvas (CanvasRegion): Target region.
        glyph_count (int): Number of glyphs to place; callers pass
            ``|snapshot ∩ catalog|``, not the raw snapshot size.
        metrics_fn (MetricsFn): ``pixel_size -> GlyphMetrics`` for the chosen font.
        align (VerticalAlign): Place the grid at the canvas top or centre it.

    Returns:
        GridLayout: Best layout, or a degenerate one when ``glyph_count`` is 0
        or even pixel size 1 does not fit.
    """
    if glyph_count <= 0 or canvas.width <= 0 or canvas.height <= 0:
        return degenerate_layout(canvas)

    best: Optional[GridLayout] = None
    # Metrics grow with size; the bound only guards fonts that stop growing.
    limit = max(canvas.width, canvas.height) + 1
    for pixel_size in range(1, limit + 1):
        metrics = metrics_fn(pixel_size)
        shape = grid_shape(canvas, glyph_count, metrics)
        if shape is None:
            break
        columns, rows = shape
        best = GridLayout(
            canvas=canvas,
            pixel_size=pixel_size,
            glyph_width=metrics.width,
            glyph_height=metrics.height,
            descent=metrics.descent,
            columns=columns,
            rows=rows,
        )

    if best is None:
        return degenerate_layout(canvas)

    top = canvas.y
    if align == VerticalAlign.CENTER:
        top += (canvas.height - best.used_height) // 2
    return replace(best, top=top)
