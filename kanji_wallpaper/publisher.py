"""Wallpaper artifact publishing.

At most one rendered wallpaper lives on disk: the previous file is removed
before the new one is written. New files get a millisecond timestamp in their
name so desktop environments that cache by path always notice the change.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "KanjiWallpaper"
ARTIFACT_SUFFIX = ".jpg"


@dataclass(frozen=True)
class PublishOutcome:
    path: Optional[Path]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.path is not None


def artifact_path(directory: Path, now: Optional[float] = None) -> Path:
    """Timestamped artifact path inside ``directory``."""
    millis = int((time.time() if now is None else now) * 1000)
    return directory / f"{ARTIFACT_PREFIX}{millis}{ARTIFACT_SUFFIX}"


def remove_artifact(path: Optional[Path]) -> bool:
    """Delete a stale artifact. Failures are logged, never raised."""
    if path is None:
        return True
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove previous wallpaper %s: %s", path, exc)
        return False
    return True


def publish(
    image: Image.Image,
    directory: Path,
    previous: Optional[Path] = None,
    now: Optional[float] = None,
) -> PublishOutcome:
    """Replace the previous artifact with ``image``.

    Args:
        image (Image.Image): Rendered wallpaper.
        directory (Path): Output directory, created if missing.
        previous (Path | None): Artifact from the last successful publish.
        now (float | None): Epoch seconds used for the file name (defaults to now).

    Returns:
        PublishOutcome: New path on success, or the write error.
    """
    remove_artifact(previous)

    path = artifact_path(directory, now)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        image.convert("RGB").save(path, quality=95)
    except (OSError, ValueError) as exc:
        logger.error("Could not write wallpaper %s: %s", path, exc)
        return PublishOutcome(None, str(exc))

    logger.info("Published wallpaper %s", path)
    return PublishOutcome(path)
