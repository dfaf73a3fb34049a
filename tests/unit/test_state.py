# tests/unit/test_state.py

from pathlib import Path

import pytest

from kanji_wallpaper.snapshot import make_snapshot
from kanji_wallpaper.state import UpdaterState, load_state, save_state


def test_round_trip(tmp_path: Path) -> None:
    state = UpdaterState(
        previous_snapshot=make_snapshot({"一": "guru", "二": "enlighten"}),
        artifact_path=tmp_path / "KanjiWallpaper1.jpg",
        cycles=7,
    )
    path = tmp_path / "state.json"
    save_state(state, path)
    assert load_state(path) == state


def test_fresh_state_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    save_state(UpdaterState(), path)
    assert load_state(path) == UpdaterState()


def test_missing_file_gives_fresh_state(tmp_path: Path) -> None:
    assert load_state(tmp_path / "missing.json") == UpdaterState()


@pytest.mark.parametrize(
    "content",
    [
        "{oops",
        "[]",
        '{"cycles": "abc"}',
        '{"cycles": null}',
        '{"artifact_path": 5}',
        '{"previous_snapshot": {"一": "guru"}, "cycles": [1]}',
    ],
)
def test_corrupt_file_gives_fresh_state(tmp_path: Path, content: str) -> None:
    path = tmp_path / "state.json"
    path.write_text(content, encoding="utf-8")
    assert load_state(path) == UpdaterState()


def test_save_failure_is_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    save_state(UpdaterState(cycles=1), blocker / "state.json")
