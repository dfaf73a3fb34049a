"""Configuration for the wallpaper updater.

``Config`` is a frozen dataclass read from a JSON file. Every key is optional;
unknown keys are rejected so typos do not silently fall back to defaults.
Colours accept anything ``PIL.ImageColor.getrgb`` understands (``"#dd0093"``,
``"rgb(221,0,147)"``, ``"white"``...).
"""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from PIL import ImageColor

from kanji_wallpaper.fetch import DEFAULT_API_BASE_URL
from kanji_wallpaper.layout import DEFAULT_CANVAS_LEFT, DEFAULT_CANVAS_MARGIN
from kanji_wallpaper.renderer.mosaic import (
    DEFAULT_COLOR_TABLE,
    BadgeColors,
    ColorTable,
    MosaicRenderer,
)
from kanji_wallpaper.catalog import DEFAULT_CATALOG, GlyphCatalog
from kanji_wallpaper.types import Color, ProficiencyState, VerticalAlign
from kanji_wallpaper.utils.font import FontSpec

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".kanji_wallpaper" / "config.json"
DEFAULT_STATE_PATH = Path.home() / ".kanji_wallpaper" / "state.json"
DEFAULT_OUTPUT_DIR = Path.home() / "Pictures"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


def _default_colors() -> Dict[str, Tuple[Color, Color]]:
    return {
        str(state): (colors.foreground, colors.background)
        for state, colors in DEFAULT_COLOR_TABLE.items()
    }


@dataclass(frozen=True)
class Config:
    """Updater settings.

    Attributes:
        api_key: WaniKani v1 API key.
        interval_minutes: Minutes between update cycles.
        current_levels_only: Fetch only the current level instead of levels 1-60.
        font_family: Font file for Pillow; empty uses Pillow's bundled font.
        bold: Synthesize a bold face.
        italic: Synthesize an oblique face.
        colors: State name -> (foreground, background) RGB colours.
        background_path: Wallpaper image to draw on; ``None`` uses a solid fill.
        background_size: Size of the solid fill background.
        background_color: Colour of the solid fill background.
        canvas_left: Pixels left of the mosaic area reserved for the wallpaper art.
        canvas_margin: Margin around the mosaic area.
        vertical_align: ``top`` or ``center`` placement of the grid.
        output_dir: Where rendered wallpapers are written.
        state_path: Where the updater state is persisted.
        api_base_url: API root.
    """

    api_key: str = ""
    interval_minutes: int = 60
    current_levels_only: bool = True
    font_family: str = ""
    bold: bool = False
    italic: bool = False
    colors: Dict[str, Tuple[Color, Color]] = field(default_factory=_default_colors)
    background_path: Optional[Path] = None
    background_size: Tuple[int, int] = (2560, 1440)
    background_color: Color = (0, 0, 0)
    canvas_left: int = DEFAULT_CANVAS_LEFT
    canvas_margin: int = DEFAULT_CANVAS_MARGIN
    vertical_align: VerticalAlign = VerticalAlign.TOP
    output_dir: Path = DEFAULT_OUTPUT_DIR
    state_path: Path = DEFAULT_STATE_PATH
    api_base_url: str = DEFAULT_API_BASE_URL

    @property
    def font_spec(self) -> FontSpec:
        return FontSpec(family=self.font_family, bold=self.bold, italic=self.italic)

    @property
    def color_table(self) -> ColorTable:
        table = DEFAULT_COLOR_TABLE
        for name, (foreground, background) in self.colors.items():
            table = table.set(
                ProficiencyState.parse(name), BadgeColors(foreground, background)
            )
        return table

    def make_renderer(self, catalog: GlyphCatalog = DEFAULT_CATALOG) -> MosaicRenderer:
        return MosaicRenderer(
            catalog=catalog,
            color_table=self.color_table,
            font_spec=self.font_spec,
            canvas_left=self.canvas_left,
            canvas_margin=self.canvas_margin,
            align=self.vertical_align,
        )


def parse_color(value: Any) -> Color:
    """Parse a colour string or RGB(A) sequence."""
    if isinstance(value, str):
        try:
            return ImageColor.getrgb(value)
        except ValueError as exc:
            raise ConfigError(f"Invalid colour {value!r}") from exc
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        if all(isinstance(c, int) and 0 <= c <= 255 for c in value):
            return tuple(value)
    raise ConfigError(f"Invalid colour {value!r}")


def _parse_colors(value: Any) -> Dict[str, Tuple[Color, Color]]:
    if not isinstance(value, Mapping):
        raise ConfigError("'colors' must be an object")
    colors = _default_colors()
    for name, pair in value.items():
        state = ProficiencyState.parse(name)
        known_name = name.lower() in ("unknown", "default")
        if state == ProficiencyState.UNKNOWN and not known_name:
            raise ConfigError(f"Unknown proficiency state {name!r}")
        if not isinstance(pair, Mapping):
            raise ConfigError(f"Colours for {name!r} must be an object")
        foreground, background = colors[str(state)]
        colors[str(state)] = (
            parse_color(pair.get("foreground", foreground)),
            parse_color(pair.get("background", background)),
        )
    return colors


_BOOL_KEYS = ("current_levels_only", "bold", "italic")
_STR_KEYS = ("api_key", "font_family", "api_base_url")


def config_from_dict(data: Mapping[str, Any]) -> Config:
    """Build a ``Config`` from decoded JSON, validating every known key."""
    known = {f.name for f in dataclasses.fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    for key in _BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            raise ConfigError(f"'{key}' must be true or false")
    for key in _STR_KEYS:
        if key in data and not isinstance(data[key], str):
            raise ConfigError(f"'{key}' must be a string")

    values: Dict[str, Any] = dict(data)
    try:
        if "colors" in values:
            values["colors"] = _parse_colors(values["colors"])
        if "background_color" in values:
            values["background_color"] = parse_color(values["background_color"])
        if "background_size" in values:
            width, height = values["background_size"]
            values["background_size"] = (int(width), int(height))
        if "vertical_align" in values:
            values["vertical_align"] = VerticalAlign(values["vertical_align"])
        for key in ("background_path", "output_dir", "state_path"):
            if values.get(key) is not None:
                values[key] = Path(values[key]).expanduser()
        for key in ("interval_minutes", "canvas_left", "canvas_margin"):
            if key in values:
                values[key] = int(values[key])
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc

    config = Config(**values)
    if config.interval_minutes < 1:
        raise ConfigError("'interval_minutes' must be at least 1")
    if min(config.background_size) < 1:
        raise ConfigError("'background_size' must be positive")
    if config.canvas_left < 0 or config.canvas_margin < 0:
        raise ConfigError("'canvas_left' and 'canvas_margin' must not be negative")
    return config


def config_to_dict(config: Config) -> Dict[str, Any]:
    def hex_color(color: Color) -> str:
        return "#" + "".join(f"{c:02x}" for c in color)

    return {
        "api_key": config.api_key,
        "interval_minutes": config.interval_minutes,
        "current_levels_only": config.current_levels_only,
        "font_family": config.font_family,
        "bold": config.bold,
        "italic": config.italic,
        "colors": {
            name: {"foreground": hex_color(fg), "background": hex_color(bg)}
            for name, (fg, bg) in config.colors.items()
        },
        "background_path": (
            None if config.background_path is None else str(config.background_path)
        ),
        "background_size": list(config.background_size),
        "background_color": hex_color(config.background_color),
        "canvas_left": config.canvas_left,
        "canvas_margin": config.canvas_margin,
        "vertical_align": str(config.vertical_align),
        "output_dir": str(config.output_dir),
        "state_path": str(config.state_path),
        "api_base_url": config.api_base_url,
    }


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> Config:
    """Read ``path``; a missing file gives the defaults.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("No configuration at %s, using defaults", path)
        return Config()
    except ValueError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path}: top level must be an object")
    return config_from_dict(data)


def save_config(config: Config, path: Path = DEFAULT_CONFIG_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_to_dict(config), f, indent=2)

