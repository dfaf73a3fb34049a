# tests/unit/test_font.py

import pytest

from kanji_wallpaper.utils.font import FontSpec, load_font, make_metrics_fn, measure


def test_stroke_width_only_for_bold() -> None:
    assert FontSpec().stroke_width(64) == 0
    assert FontSpec(bold=True).stroke_width(10) == 1
    assert FontSpec(bold=True).stroke_width(64) == 2


def test_bundled_font_metrics_are_positive() -> None:
    metrics = measure(FontSpec(), "A", 24)
    assert metrics.width > 0
    assert metrics.height > metrics.descent >= 0


def test_bold_is_wider_and_taller() -> None:
    regular = measure(FontSpec(), "A", 32)
    bold = measure(FontSpec(bold=True), "A", 32)
    assert bold.width == regular.width + 2
    assert bold.height == regular.height + 2
    assert bold.descent == regular.descent + 1


def test_italic_does_not_change_cell_size() -> None:
    assert measure(FontSpec(italic=True), "A", 20) == measure(FontSpec(), "A", 20)


def test_metrics_grow_with_size() -> None:
    metrics_fn = make_metrics_fn(FontSpec(), "W")
    assert metrics_fn(40).height > metrics_fn(10).height
    assert metrics_fn(40).width > metrics_fn(10).width


def test_fonts_are_cached() -> None:
    assert load_font("", 18) is load_font("", 18)


def test_missing_font_file_raises() -> None:
    with pytest.raises(OSError):
        load_font("/nonexistent/font-file.ttf", 12)
