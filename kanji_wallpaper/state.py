"""Immutable pipeline driver state.

:class:`UpdaterState` holds the only data that survives between update
cycles: the last snapshot that was rendered from a successful fetch and the
path of the wallpaper currently on disk. Like every other value in the
package it is replaced, never mutated; :func:`kanji_wallpaper.step.update`
returns the next state.

The state can be persisted as JSON so a restarted process still deletes the
wallpaper its predecessor wrote and does not re-render an unchanged mosaic.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from pyrsistent import thaw

from kanji_wallpaper.snapshot import make_snapshot
from kanji_wallpaper.types import StateSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdaterState:
    """State owned by the update loop.

    Attributes:
        previous_snapshot (StateSnapshot | None): Snapshot of the last render that
            followed a successful fetch. ``None`` until the first one.
        artifact_path (Path | None): Wallpaper file currently published.
        cycles (int): Number of cycles run (0-based counter).
    """

    previous_snapshot: Optional[StateSnapshot] = None
    artifact_path: Optional[Path] = None
    cycles: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "previous_snapshot": (
                None
                if self.previous_snapshot is None
                else {k: str(v) for k, v in thaw(self.previous_snapshot).items()}
            ),
            "artifact_path": (
                None if self.artifact_path is None else str(self.artifact_path)
            ),
            "cycles": self.cycles,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UpdaterState":
        snapshot = data.get("previous_snapshot")
        artifact = data.get("artifact_path")
        return cls(
            previous_snapshot=(
                make_snapshot(snapshot) if isinstance(snapshot, dict) else None
            ),
            artifact_path=None if not artifact else Path(artifact),
            cycles=int(data.get("cycles", 0)),
        )


def load_state(path: Path) -> UpdaterState:
    """Load persisted state; a missing or unreadable file yields a fresh state."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return UpdaterState()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable state file %s: %s", path, exc)
        return UpdaterState()
    if not isinstance(data, dict):
        logger.warning("Ignoring malformed state file %s", path)
        return UpdaterState()
    try:
        return UpdaterState.from_dict(data)
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed state file %s: %s", path, exc)
        return UpdaterState()


def save_state(state: UpdaterState, path: Path) -> None:
    """Persist ``state``; failures are logged and otherwise ignored."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, ensure_ascii=False, indent=2)
    except OSError as exc:
        logger.warning("Could not save state to %s: %s", path, exc)
