import random
from dataclasses import replace
from pathlib import Path
from typing import List

import streamlit as st

from kanji_wallpaper.catalog import DEFAULT_CATALOG
from kanji_wallpaper.config import DEFAULT_CONFIG_PATH, Config, ConfigError, load_config
from kanji_wallpaper.fetch import fetch_snapshot
from kanji_wallpaper.snapshot import make_snapshot
from kanji_wallpaper.types import ProficiencyState, StateSnapshot, VerticalAlign
from kanji_wallpaper.utils.image import load_background

st.set_page_config(layout="wide", page_title="Kanji Wallpaper")
st.markdown(
    """
    <style>
        header, footer, #MainMenu { visibility: hidden; }
        .stMainBlockContainer {
            padding-top: 0;
            padding-bottom: 0;
        }
    </style>
""",
    unsafe_allow_html=True,
)

STATES: List[ProficiencyState] = [
    state for state in ProficiencyState if state != ProficiencyState.UNKNOWN
]


def demo_snapshot(count: int, seed: int) -> StateSnapshot:
    """First ``count`` catalog glyphs with random states, like a learner's progress."""
    rng = random.Random(seed)
    glyphs = list(DEFAULT_CATALOG)[:count]
    return make_snapshot({glyph: rng.choice(STATES) for glyph in glyphs})


def set_default_config() -> None:
    if "config" not in st.session_state:
        try:
            st.session_state["config"] = load_config(DEFAULT_CONFIG_PATH)
        except ConfigError as exc:
            st.warning(f"Ignoring invalid configuration: {exc}")
            st.session_state["config"] = Config()


def get_config_from_widgets(config: Config) -> Config:
    st.subheader("Font")
    font_family: str = st.text_input("Font file", config.font_family)
    bold: bool = st.checkbox("Bold", config.bold)
    italic: bool = st.checkbox("Italic", config.italic)

    st.subheader("Canvas")
    background_path: str = st.text_input(
        "Background image",
        "" if config.background_path is None else str(config.background_path),
    )
    canvas_left: int = st.number_input(
        "Left offset", min_value=0, value=config.canvas_left
    )
    canvas_margin: int = st.number_input(
        "Margin", min_value=0, value=config.canvas_margin
    )
    vertical_align = VerticalAlign(
        st.selectbox(
            "Vertical alignment",
            [str(a) for a in VerticalAlign],
            index=list(VerticalAlign).index(config.vertical_align),
        )
    )
    return replace(
        config,
        font_family=font_family,
        bold=bold,
        italic=italic,
        background_path=Path(background_path) if background_path else None,
        canvas_left=int(canvas_left),
        canvas_margin=int(canvas_margin),
        vertical_align=vertical_align,
    )


# --------- Main App ---------

set_default_config()
left_col, right_col = st.columns([0.25, 0.75])

with left_col:
    config: Config = get_config_from_widgets(st.session_state["config"])
    st.session_state["config"] = config

    st.subheader("Data")
    source = st.radio("Source", ["Demo", "WaniKani"], horizontal=True)
    if source == "Demo":
        count: int = st.slider("Known kanji", 0, len(DEFAULT_CATALOG), 600)
        seed: int = st.number_input("Seed", value=0)
        snapshot = demo_snapshot(count, int(seed))
    else:
        api_key: str = st.text_input("API key", config.api_key, type="password")
        if st.button("Fetch progress", key="fetch_btn", width="stretch"):
            st.session_state["outcome"] = fetch_snapshot(
                api_key,
                current_levels_only=config.current_levels_only,
                base_url=config.api_base_url,
            )
        outcome = st.session_state.get("outcome")
        if outcome is not None and outcome.failed:
            st.error(outcome.error)
        snapshot = None if outcome is None else outcome.snapshot

with right_col:
    background = load_background(
        config.background_path, config.background_size, config.background_color
    )
    try:
        image, layout = config.make_renderer().render(background, snapshot)
    except OSError as exc:
        st.error(f"Could not load font: {exc}")
    else:
        st.image(image, width="stretch")
        st.caption(
            f"{layout.columns} x {layout.rows} grid at {layout.pixel_size}px"
            if not layout.is_degenerate
            else "Nothing to draw"
        )
