"""Periodic trigger for the update pipeline.

One cycle at a time: the next cycle is only armed (by sleeping) after the
previous one has returned, so the renderer is never re-entered.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Tuple

from kanji_wallpaper.config import Config
from kanji_wallpaper.fetch import FetchOutcome, fetch_snapshot
from kanji_wallpaper.renderer.mosaic import MosaicRenderer
from kanji_wallpaper.state import UpdaterState, load_state, save_state
from kanji_wallpaper.step import CycleReport, update
from kanji_wallpaper.utils.image import load_background

logger = logging.getLogger(__name__)

FetchFn = Callable[[Config], FetchOutcome]
PublishedFn = Callable[[Path], None]


def default_fetch(config: Config) -> FetchOutcome:
    return fetch_snapshot(
        config.api_key,
        current_levels_only=config.current_levels_only,
        base_url=config.api_base_url,
    )


def run_cycle(
    config: Config,
    state: UpdaterState,
    renderer: Optional[MosaicRenderer] = None,
    fetch_fn: FetchFn = default_fetch,
    forced: bool = False,
    on_published: Optional[PublishedFn] = None,
    now: Optional[float] = None,
) -> Tuple[UpdaterState, CycleReport]:
    """Fetch, render and publish once.

    ``on_published`` receives the new wallpaper path; it is the hook for the
    desktop-environment specific "set wallpaper" call.
    """
    renderer = renderer or config.make_renderer()
    outcome = fetch_fn(config)
    background = load_background(
        config.background_path, config.background_size, config.background_color
    )
    state, report = update(
        state,
        outcome,
        renderer,
        background,
        config.output_dir,
        forced=forced,
        now=now,
    )
    if report.published_path is not None and on_published is not None:
        try:
            on_published(report.published_path)
        except Exception:
            logger.exception("Wallpaper hook failed for %s", report.published_path)
    return state, report


def run(
    config: Config,
    state: Optional[UpdaterState] = None,
    iterations: Optional[int] = None,
    force_first: bool = False,
    fetch_fn: FetchFn = default_fetch,
    on_published: Optional[PublishedFn] = None,
    sleep: Callable[[float], None] = time.sleep,
    renderer: Optional[MosaicRenderer] = None,
) -> UpdaterState:
    """Run cycles every ``config.interval_minutes`` minutes.

    Args:
        config (Config): Settings.
        state (UpdaterState | None): Starting state; loaded from
            ``config.state_path`` when omitted.
        iterations (int | None): Stop after this many cycles (``None`` runs forever).
        force_first (bool): Force a render on the first cycle.
        fetch_fn (FetchFn): Snapshot source.
        on_published (PublishedFn | None): Called with each new wallpaper path.
        sleep (Callable[[float], None]): Delay function, injectable for tests.
        renderer (MosaicRenderer | None): Defaults to ``config.make_renderer()``.

    Returns:
        UpdaterState: State after the last cycle.
    """
    if state is None:
        state = load_state(config.state_path)
    renderer = renderer or config.make_renderer()
    count = 0
    while iterations is None or count < iterations:
        state, report = run_cycle(
            config,
            state,
            renderer=renderer,
            fetch_fn=fetch_fn,
            forced=force_first and count == 0,
            on_published=on_published,
        )
        save_state(state, config.state_path)
        if report.rendered:
            logger.info(
                "Cycle %d: %d glyphs at %dpx",
                state.cycles,
                report.glyphs_drawn,
                report.pixel_size,
            )
        count += 1
        if iterations is None or count < iterations:
            sleep(config.interval_minutes * 60)
    return state
