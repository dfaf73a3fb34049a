# tests/unit/test_snapshot.py

from typing import Optional

import pytest
from pyrsistent import pmap

from kanji_wallpaper.snapshot import (
    EMPTY_SNAPSHOT,
    make_snapshot,
    remember_snapshot,
    should_render,
)
from kanji_wallpaper.types import ProficiencyState, StateSnapshot

A = make_snapshot({"一": "apprentice", "二": "guru"})
A_COPY = make_snapshot([("二", "guru"), ("一", "apprentice")])
B_STATE = make_snapshot({"一": "master", "二": "guru"})
B_KEYS = make_snapshot({"一": "apprentice", "三": "guru"})


def test_make_snapshot_normalises_states() -> None:
    snapshot = make_snapshot({"一": "burned", "二": "weird", "三": None, "四": ""})
    assert snapshot == pmap(
        {
            "一": ProficiencyState.BURNED,
            "二": ProficiencyState.UNKNOWN,
            "三": ProficiencyState.UNKNOWN,
            "四": ProficiencyState.UNKNOWN,
        }
    )


def test_make_snapshot_keeps_enum_values() -> None:
    snapshot = make_snapshot({"一": ProficiencyState.ENLIGHTENED})
    assert snapshot["一"] is ProficiencyState.ENLIGHTENED


def test_snapshot_equality_ignores_insertion_order() -> None:
    assert A == A_COPY


@pytest.mark.parametrize(
    "new, previous, fetch_failed, forced, expected",
    [
        (A, A_COPY, False, False, False),  # unchanged
        (EMPTY_SNAPSHOT, EMPTY_SNAPSHOT, False, False, False),
        (A, A, False, True, True),  # forced
        (None, A, True, False, True),  # fetch failure always renders
        (A, A, True, False, True),
        (B_STATE, A, False, False, True),  # state changed
        (B_KEYS, A, False, False, True),  # key set changed
        (A, None, False, False, True),  # nothing rendered yet
        (EMPTY_SNAPSHOT, None, False, False, True),
    ],
)
def test_should_render(
    new: Optional[StateSnapshot],
    previous: Optional[StateSnapshot],
    fetch_failed: bool,
    forced: bool,
    expected: bool,
) -> None:
    assert should_render(new, previous, fetch_failed, forced) is expected


def test_remember_snapshot_advances_on_success() -> None:
    assert remember_snapshot(A, B_STATE, fetch_failed=False) == B_STATE


def test_remember_snapshot_keeps_last_good_on_failure() -> None:
    assert remember_snapshot(A, None, fetch_failed=True) == A
    assert remember_snapshot(None, None, fetch_failed=True) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("apprentice", ProficiencyState.APPRENTICE),
        ("guru", ProficiencyState.GURU),
        ("master", ProficiencyState.MASTER),
        ("enlighten", ProficiencyState.ENLIGHTENED),
        ("burned", ProficiencyState.BURNED),
        (" Guru ", ProficiencyState.GURU),
        ("enlightened", ProficiencyState.UNKNOWN),
        ("", ProficiencyState.UNKNOWN),
        (None, ProficiencyState.UNKNOWN),
    ],
)
def test_state_parse(raw: Optional[str], expected: ProficiencyState) -> None:
    assert ProficiencyState.parse(raw) is expected
