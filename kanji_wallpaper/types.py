"""Common type aliases and enumerations.

``ProficiencyState`` is the closed set of study levels reported by the remote
service. Any value the service sends that is not one of the known levels is
folded into ``ProficiencyState.UNKNOWN`` so colour lookups are always total.
"""

from enum import StrEnum
from typing import Callable, Optional, Tuple, TYPE_CHECKING

from pyrsistent.typing import PMap

if TYPE_CHECKING:
    from kanji_wallpaper.utils.font import GlyphMetrics

Glyph = str
Color = Tuple[int, ...]


class ProficiencyState(StrEnum):
    """Study level of a glyph, ordered from least to most proficient."""

    UNKNOWN = "unknown"
    APPRENTICE = "apprentice"
    GURU = "guru"
    MASTER = "master"
    ENLIGHTENED = "enlighten"
    BURNED = "burned"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProficiencyState":
        """Map a raw srs string onto a state, defaulting to ``UNKNOWN``."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class VerticalAlign(StrEnum):
    """Where the solved grid sits inside the canvas height."""

    TOP = "top"
    CENTER = "center"


StateSnapshot = PMap[Glyph, ProficiencyState]

MetricsFn = Callable[[int], "GlyphMetrics"]
