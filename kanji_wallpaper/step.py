"""Update cycle orchestration.

:func:`update` runs one cycle of the wallpaper pipeline given an already
fetched :class:`~kanji_wallpaper.fetch.FetchOutcome` and returns the next
:class:`~kanji_wallpaper.state.UpdaterState` plus a :class:`CycleReport`.
Fetching is left to the caller so the cycle can be driven by tests, the CLI
loop or the preview app alike.

Ordering:

1. A forced cycle forgets the remembered snapshot.
2. The differ decides whether anything needs drawing. A failed fetch always
   draws (the fallback is the plain background).
3. The layout is solved and the mosaic rendered.
4. The previous artifact is removed and the new one written.
5. The remembered snapshot advances only when the fetch succeeded *and* the
   publish succeeded; a failed publish clears it so the next cycle retries.

Nothing raises out of :func:`update`; failures are recorded on the report.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from kanji_wallpaper.fetch import FetchOutcome
from kanji_wallpaper.publisher import publish
from kanji_wallpaper.renderer.mosaic import MosaicRenderer
from kanji_wallpaper.snapshot import remember_snapshot, should_render
from kanji_wallpaper.state import UpdaterState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleReport:
    """What one cycle did.

    Attributes:
        rendered: A new wallpaper was drawn.
        published_path: File written this cycle, if any.
        glyphs_drawn: Number of badges on the new wallpaper.
        pixel_size: Solved font pixel size (0 when nothing was drawn).
        fetch_error: Fetch failure message, if the fallback was rendered.
        render_error: Rendering failure (for example an unloadable font).
        publish_error: Write failure; the previous wallpaper stays in effect.
    """

    rendered: bool
    published_path: Optional[Path] = None
    glyphs_drawn: int = 0
    pixel_size: int = 0
    fetch_error: Optional[str] = None
    render_error: Optional[str] = None
    publish_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.render_error is None and self.publish_error is None


def update(
    state: UpdaterState,
    outcome: FetchOutcome,
    renderer: MosaicRenderer,
    background: Image.Image,
    output_dir: Path,
    forced: bool = False,
    now: Optional[float] = None,
) -> Tuple[UpdaterState, CycleReport]:
    """Advance the updater by one cycle.

    Args:
        state (UpdaterState): State after the previous cycle.
        outcome (FetchOutcome): Result of this cycle's fetch.
        renderer (MosaicRenderer): Catalog, colours and font to draw with.
        background (Image.Image): Base wallpaper; never modified.
        output_dir (Path): Directory receiving the published file.
        forced (bool): Render even if the snapshot is unchanged.
        now (float | None): Epoch seconds for the artifact name.

    Returns:
        Tuple[UpdaterState, CycleReport]: Next state and what happened.
    """
    state = replace(state, cycles=state.cycles + 1)
    if forced:
        state = replace(state, previous_snapshot=None)

    fetch_failed = outcome.failed
    if not should_render(
        outcome.snapshot, state.previous_snapshot, fetch_failed, forced
    ):
        logger.debug("Snapshot unchanged, skipping render")
        return state, CycleReport(rendered=False)

    if fetch_failed:
        logger.info("Fetch failed (%s), rendering fallback wallpaper", outcome.error)

    try:
        image, layout = renderer.render(background, outcome.snapshot)
    except OSError as exc:
        logger.error("Could not render wallpaper: %s", exc)
        return state, CycleReport(
            rendered=False, fetch_error=outcome.error, render_error=str(exc)
        )

    glyphs_drawn = 0
    if outcome.snapshot is not None and not layout.is_degenerate:
        glyphs_drawn = min(
            renderer.catalog.count_members(outcome.snapshot), layout.capacity
        )
    if layout.is_degenerate and outcome.snapshot:
        logger.debug("No glyph size fits the canvas, drawing plain background")

    result = publish(image, output_dir, previous=state.artifact_path, now=now)
    if not result.ok:
        # Forget the snapshot so the next cycle renders again.
        return replace(state, previous_snapshot=None), CycleReport(
            rendered=True,
            glyphs_drawn=glyphs_drawn,
            pixel_size=layout.pixel_size,
            fetch_error=outcome.error,
            publish_error=result.error,
        )

    next_state = replace(
        state,
        previous_snapshot=remember_snapshot(
            state.previous_snapshot, outcome.snapshot, fetch_failed
        ),
        artifact_path=result.path,
    )
    return next_state, CycleReport(
        rendered=True,
        published_path=result.path,
        glyphs_drawn=glyphs_drawn,
        pixel_size=layout.pixel_size,
        fetch_error=outcome.error,
    )
