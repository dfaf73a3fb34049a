"""State snapshots and the render/skip decision.

A snapshot is a persistent map ``glyph -> ProficiencyState``. Two snapshots are
equal iff they hold the same glyphs with the same states, which is exactly
``PMap`` equality, so the differ is a plain comparison plus the two override
flags.
"""

from typing import Iterable, Mapping, Optional, Tuple, Union

from pyrsistent import pmap

from kanji_wallpaper.types import Glyph, ProficiencyState, StateSnapshot


def make_snapshot(
    items: Union[Mapping[Glyph, object], Iterable[Tuple[Glyph, object]]],
) -> StateSnapshot:
    """Build a snapshot, normalising raw state values with ``ProficiencyState.parse``."""
    pairs = items.items() if isinstance(items, Mapping) else items
    return pmap(
        {
            glyph: (
                value
                if isinstance(value, ProficiencyState)
                else ProficiencyState.parse(None if value is None else str(value))
            )
            for glyph, value in pairs
        }
    )


EMPTY_SNAPSHOT: StateSnapshot = pmap()


def should_render(
    new_snapshot: Optional[StateSnapshot],
    previous_snapshot: Optional[StateSnapshot],
    fetch_failed: bool,
    forced: bool,
) -> bool:
    """Decide whether a render cycle must draw and publish a new wallpaper.

    Args:
        new_snapshot (StateSnapshot | None): Snapshot just fetched (``None`` on failure).
        previous_snapshot (StateSnapshot | None): Last snapshot that was rendered
            successfully, or ``None`` if nothing has been rendered yet.
        fetch_failed (bool): The fetch collaborator signalled failure. The fallback
            mosaic is always re-rendered in that case.
        forced (bool): Caller explicitly requested a render.

    Returns:
        bool: ``True`` if a render is required.
    """
    if forced or fetch_failed:
        return True
    return new_snapshot != previous_snapshot


def remember_snapshot(
    previous_snapshot: Optional[StateSnapshot],
    new_snapshot: Optional[StateSnapshot],
    fetch_failed: bool,
) -> Optional[StateSnapshot]:
    """Return the snapshot to compare the next cycle against.

    A failed fetch keeps the last known-good snapshot.
    """
    if fetch_failed or new_snapshot is None:
        return previous_snapshot
    return new_snapshot
