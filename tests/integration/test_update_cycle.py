# tests/integration/test_update_cycle.py

from pathlib import Path
from typing import List

import numpy as np
from PIL import Image

from kanji_wallpaper.catalog import GlyphCatalog
from kanji_wallpaper.renderer.mosaic import MosaicRenderer
from kanji_wallpaper.scheduler import run, run_cycle
from kanji_wallpaper.snapshot import make_snapshot
from kanji_wallpaper.state import UpdaterState, load_state
from kanji_wallpaper.step import update
from kanji_wallpaper.types import ProficiencyState
from kanji_wallpaper.utils.font import FontSpec
from tests.test_utils import (
    distinct_color_table,
    failed_outcome,
    make_background,
    make_config,
    ok_outcome,
    only_file,
    sequence_fetch,
)

LATIN = GlyphCatalog.from_string("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
FIRST = make_snapshot({"A": "apprentice", "B": "guru", "C": "master", "Z": "burned"})
SECOND = FIRST.set("D", ProficiencyState.ENLIGHTENED)


def make_renderer() -> MosaicRenderer:
    return MosaicRenderer(
        catalog=LATIN, color_table=distinct_color_table(), canvas_left=0, canvas_margin=10
    )


def step(state: UpdaterState, outcome, out: Path, now: float, forced: bool = False):
    return update(
        state, outcome, make_renderer(), make_background(), out, forced=forced, now=now
    )


def is_plain_black(path: Path) -> bool:
    with Image.open(path) as img:
        return int(np.asarray(img).max()) < 16


def test_first_cycle_renders_and_publishes(tmp_path: Path) -> None:
    state, report = step(UpdaterState(), ok_outcome(FIRST), tmp_path, now=1.0)
    assert report.ok and report.rendered
    assert report.published_path == tmp_path / "KanjiWallpaper1000.jpg"
    assert report.glyphs_drawn == 4
    assert report.pixel_size > 0
    assert state.previous_snapshot == FIRST
    assert state.artifact_path == report.published_path
    assert state.cycles == 1
    assert not is_plain_black(report.published_path)


def test_unchanged_snapshot_skips(tmp_path: Path) -> None:
    state, _ = step(UpdaterState(), ok_outcome(FIRST), tmp_path, now=1.0)
    # equal content built independently still counts as unchanged
    again = make_snapshot({"Z": "burned", "C": "master", "B": "guru", "A": "apprentice"})
    next_state, report = step(state, ok_outcome(again), tmp_path, now=2.0)
    assert not report.rendered
    assert report.published_path is None
    assert next_state.artifact_path == state.artifact_path
    assert next_state.cycles == 2
    assert only_file(tmp_path) == state.artifact_path


def test_forced_cycle_renders_unchanged_snapshot(tmp_path: Path) -> None:
    state, _ = step(UpdaterState(), ok_outcome(FIRST), tmp_path, now=1.0)
    state, report = step(state, ok_outcome(FIRST), tmp_path, now=2.0, forced=True)
    assert report.rendered
    assert only_file(tmp_path) == tmp_path / "KanjiWallpaper2000.jpg"
    assert state.previous_snapshot == FIRST


def test_changed_snapshot_renders(tmp_path: Path) -> None:
    state, _ = step(UpdaterState(), ok_outcome(FIRST), tmp_path, now=1.0)
    state, report = step(state, ok_outcome(SECOND), tmp_path, now=2.0)
    assert report.rendered
    assert report.glyphs_drawn == 5
    assert state.previous_snapshot == SECOND
    assert only_file(tmp_path) == report.published_path


def test_repeated_fetch_failures_keep_last_good_snapshot(tmp_path: Path) -> None:
    state, _ = step(UpdaterState(), ok_outcome(FIRST), tmp_path, now=1.0)

    for now in (2.0, 3.0):
        state, report = step(state, failed_outcome("offline"), tmp_path, now=now)
        assert report.rendered
        assert report.fetch_error == "offline"
        assert report.glyphs_drawn == 0
        assert state.previous_snapshot == FIRST
        assert only_file(tmp_path) == report.published_path
        assert is_plain_black(report.published_path)

    # the next good fetch is compared against the last good snapshot
    state, report = step(state, ok_outcome(FIRST), tmp_path, now=4.0)
    assert not report.rendered
    state, report = step(state, ok_outcome(SECOND), tmp_path, now=5.0)
    assert report.rendered


def test_empty_snapshot_renders_plain_background(tmp_path: Path) -> None:
    state, report = step(UpdaterState(), ok_outcome(make_snapshot({})), tmp_path, now=1.0)
    assert report.rendered
    assert report.glyphs_drawn == 0
    assert report.pixel_size == 0
    assert is_plain_black(report.published_path)
    assert state.previous_snapshot == make_snapshot({})


def test_publish_failure_retries_next_cycle(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    state, report = step(UpdaterState(), ok_outcome(FIRST), blocker / "out", now=1.0)
    assert report.rendered
    assert not report.ok
    assert report.publish_error
    assert state.previous_snapshot is None
    assert state.artifact_path is None

    out = tmp_path / "out"
    state, report = step(state, ok_outcome(FIRST), out, now=2.0)
    assert report.ok and report.rendered
    assert only_file(out) == report.published_path


def test_render_failure_is_reported(tmp_path: Path) -> None:
    renderer = MosaicRenderer(
        catalog=LATIN,
        font_spec=FontSpec(family="/nonexistent/font.ttf"),
        canvas_left=0,
        canvas_margin=10,
    )
    state, report = update(
        UpdaterState(), ok_outcome(FIRST), renderer, make_background(), tmp_path, now=1.0
    )
    assert not report.rendered
    assert report.render_error
    assert state.previous_snapshot is None
    assert only_file(tmp_path) is None


def test_run_cycle_calls_hook(tmp_path: Path) -> None:
    config = make_config(tmp_path)
    published: List[Path] = []
    state, report = run_cycle(
        config,
        UpdaterState(),
        renderer=make_renderer(),
        fetch_fn=sequence_fetch([ok_outcome(FIRST)]),
        on_published=published.append,
        now=1.0,
    )
    assert published == [report.published_path]


def test_run_cycle_survives_hook_error(tmp_path: Path) -> None:
    def broken_hook(path: Path) -> None:
        raise RuntimeError("no desktop")

    config = make_config(tmp_path)
    state, report = run_cycle(
        config,
        UpdaterState(),
        renderer=make_renderer(),
        fetch_fn=sequence_fetch([ok_outcome(FIRST)]),
        on_published=broken_hook,
    )
    assert report.ok
    assert state.artifact_path == report.published_path


def test_run_loops_and_persists_state(tmp_path: Path) -> None:
    config = make_config(tmp_path, interval_minutes=5)
    sleeps: List[float] = []
    published: List[Path] = []
    final = run(
        config,
        iterations=4,
        fetch_fn=sequence_fetch(
            [ok_outcome(FIRST), ok_outcome(FIRST), failed_outcome(), ok_outcome(SECOND)]
        ),
        on_published=published.append,
        sleep=sleeps.append,
        renderer=make_renderer(),
    )
    assert sleeps == [300, 300, 300]
    assert final.cycles == 4
    # first, fallback and changed snapshot render; the repeat is skipped
    assert len(published) == 3
    assert final.previous_snapshot == SECOND
    assert only_file(config.output_dir) == final.artifact_path
    assert load_state(config.state_path) == final


def test_run_resumes_from_saved_state(tmp_path: Path) -> None:
    config = make_config(tmp_path)
    run(
        config,
        iterations=1,
        fetch_fn=sequence_fetch([ok_outcome(FIRST)]),
        sleep=lambda seconds: None,
        renderer=make_renderer(),
    )
    published: List[Path] = []
    final = run(
        config,
        iterations=1,
        fetch_fn=sequence_fetch([ok_outcome(FIRST)]),
        on_published=published.append,
        sleep=lambda seconds: None,
        renderer=make_renderer(),
    )
    assert published == []
    assert final.cycles == 2

    forced = run(
        config,
        iterations=1,
        force_first=True,
        fetch_fn=sequence_fetch([ok_outcome(FIRST)]),
        on_published=published.append,
        sleep=lambda seconds: None,
        renderer=make_renderer(),
    )
    assert len(published) == 1
    assert only_file(config.output_dir) == forced.artifact_path
