"""Rendering subpackage.

Turns an immutable snapshot of glyph proficiency states into a wallpaper
image. The renderer focuses on:

* Deterministic placement: glyphs fill a row-major grid in catalog order.
* State colouring: every glyph sits on a rounded badge coloured by its state.
* Plain Pillow drawing, so the same code previews in a notebook or Streamlit.

See :mod:`kanji_wallpaper.renderer.mosaic` for the colour table, badge planning
and composition routines.
"""
