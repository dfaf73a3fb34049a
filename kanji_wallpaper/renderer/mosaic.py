from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple
from PIL import Image, ImageDraw
from pyrsistent import pmap
from pyrsistent.typing import PMap
from kanji_wallpaper.catalog import DEFAULT_CATALOG, GlyphCatalog
from kanji_wallpaper.layout import (
    DEFAULT_CANVAS_LEFT,
    DEFAULT_CANVAS_MARGIN,
    CanvasRegion,
    GridLayout,
    degenerate_layout,
    solve,
)
from kanji_wallpaper.types import (
    Color,
    Glyph,
    ProficiencyState,
    StateSnapshot,
    VerticalAlign,
)
from kanji_wallpaper.utils.font import FontSpec, load_font, make_metrics_fn
from kanji_wallpaper.utils.image import Box, draw_badge, draw_glyph


@dataclass(frozen=True)
class BadgeColors:
    foreground: Color
    background: Color


ColorTable = PMap[ProficiencyState, BadgeColors]

WHITE: Color = (255, 255, 255)

DEFAULT_COLOR_TABLE: ColorTable = pmap(
    {
        ProficiencyState.UNKNOWN: BadgeColors(WHITE, (85, 85, 85)),
        ProficiencyState.APPRENTICE: BadgeColors(WHITE, (221, 0, 147)),
        ProficiencyState.GURU: BadgeColors(WHITE, (136, 45, 158)),
        ProficiencyState.MASTER: BadgeColors(WHITE, (41, 77, 219)),
        ProficiencyState.ENLIGHTENED: BadgeColors(WHITE, (0, 147, 221)),
        ProficiencyState.BURNED: BadgeColors(WHITE, (67, 67, 67)),
    }
)


def colors_for(
    state: ProficiencyState, color_table: Mapping[ProficiencyState, BadgeColors]
) -> BadgeColors:
    """Look up a state's colours, falling back to the ``UNKNOWN`` entry."""
    colors = color_table.get(state)
    if colors is None:
        colors = color_table.get(
            ProficiencyState.UNKNOWN, DEFAULT_COLOR_TABLE[ProficiencyState.UNKNOWN]
        )
    return colors


@dataclass(frozen=True)
class Badge:
    glyph: Glyph
    state: ProficiencyState
    column: int
    row: int
    box: Box
    colors: BadgeColors


def plan_badges(
    layout: GridLayout,
    catalog: GlyphCatalog,
    snapshot: StateSnapshot,
    color_table: Mapping[ProficiencyState, BadgeColors] = DEFAULT_COLOR_TABLE,
) -> List[Badge]:
    """
    Assign grid cells to snapshot glyphs in catalog order.

    The catalog decides draw order, the snapshot decides membership: the cell
    cursor only advances on glyphs present in both. Snapshot glyphs missing
    from the catalog never get a cell.
    """
    if layout.is_degenerate:
        return []
    badges: List[Badge] = []
    for glyph in catalog.members(snapshot):
        index = len(badges)
        if index >= layout.capacity:
            break
        x, y = layout.cell_origin(index)
        state = snapshot[glyph]
        row, column = divmod(index, layout.columns)
        badges.append(
            Badge(
                glyph=glyph,
                state=state,
                column=column,
                row=row,
                box=(x, y, x + layout.glyph_width - 1, y + layout.glyph_height - 1),
                colors=colors_for(state, color_table),
            )
        )
    return badges


def render(
    background: Image.Image,
    layout: GridLayout,
    catalog: GlyphCatalog,
    snapshot: StateSnapshot,
    color_table: Mapping[ProficiencyState, BadgeColors] = DEFAULT_COLOR_TABLE,
    font_spec: Optional[FontSpec] = None,
) -> Image.Image:
    """
    Draws the mosaic for ``snapshot`` onto a copy of ``background``.
    """
    if layout.is_degenerate:
        return background.copy()

    badges = plan_badges(layout, catalog, snapshot, color_table)
    if not badges:
        return background.copy()

    font_spec = font_spec or FontSpec()
    font = load_font(font_spec.family, layout.pixel_size)
    stroke = font_spec.stroke_width(layout.pixel_size)

    img = background.convert("RGBA")
    draw = ImageDraw.Draw(img)
    for badge in badges:
        draw_badge(draw, badge.box, badge.colors.background)
        draw_glyph(
            img,
            badge.glyph,
            badge.box,
            layout.descent,
            font,
            badge.colors.foreground,
            stroke_width=stroke,
            italic=font_spec.italic,
        )

    if background.mode != "RGBA":
        return img.convert(background.mode)
    return img


def render_mosaic(
    background: Image.Image,
    snapshot: StateSnapshot,
    canvas: Optional[CanvasRegion] = None,
    catalog: GlyphCatalog = DEFAULT_CATALOG,
    color_table: Mapping[ProficiencyState, BadgeColors] = DEFAULT_COLOR_TABLE,
    font_spec: Optional[FontSpec] = None,
    align: VerticalAlign = VerticalAlign.TOP,
) -> Tuple[Image.Image, GridLayout]:
    """
    Solves the layout for ``snapshot`` on ``background`` and renders it.
    """
    if canvas is None:
        canvas = CanvasRegion.from_image(*background.size)
    font_spec = font_spec or FontSpec()
    glyph_count = catalog.count_members(snapshot)
    if glyph_count == 0 or len(catalog) == 0:
        return background.copy(), degenerate_layout(canvas)
    metrics_fn = make_metrics_fn(font_spec, catalog.glyphs[0])
    layout = solve(canvas, glyph_count, metrics_fn, align)
    return render(background, layout, catalog, snapshot, color_table, font_spec), layout


class MosaicRenderer:
    catalog: GlyphCatalog
    color_table: Mapping[ProficiencyState, BadgeColors]
    font_spec: FontSpec
    canvas_left: int
    canvas_margin: int
    align: VerticalAlign

    def __init__(
        self,
        catalog: GlyphCatalog = DEFAULT_CATALOG,
        color_table: Optional[Mapping[ProficiencyState, BadgeColors]] = None,
        font_spec: Optional[FontSpec] = None,
        canvas_left: int = DEFAULT_CANVAS_LEFT,
        canvas_margin: int = DEFAULT_CANVAS_MARGIN,
        align: VerticalAlign = VerticalAlign.TOP,
    ):
        self.catalog = catalog
        self.color_table = color_table or DEFAULT_COLOR_TABLE
        self.font_spec = font_spec or FontSpec()
        self.canvas_left = canvas_left
        self.canvas_margin = canvas_margin
        self.align = align

    def canvas_for(self, background: Image.Image) -> CanvasRegion:
        width, height = background.size
        return CanvasRegion.from_image(
            width, height, left=self.canvas_left, margin=self.canvas_margin
        )

    def render(
        self, background: Image.Image, snapshot: Optional[StateSnapshot]
    ) -> Tuple[Image.Image, GridLayout]:
        """Render ``snapshot``; ``None`` renders the plain fallback background."""
        return render_mosaic(
            background,
            snapshot if snapshot is not None else pmap(),
            canvas=self.canvas_for(background),
            catalog=self.catalog,
            color_table=self.color_table,
            font_spec=self.font_spec,
            align=self.align,
        )

