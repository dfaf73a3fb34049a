"""kanji_wallpaper
=================

Render a learner's kanji progress as a colour-coded mosaic wallpaper.

Each update cycle fetches a snapshot of ``glyph -> ProficiencyState`` pairs,
decides whether anything changed (:mod:`kanji_wallpaper.snapshot`), solves the
largest glyph grid that fits the canvas (:mod:`kanji_wallpaper.layout`), draws
the badges (:mod:`kanji_wallpaper.renderer`) and publishes the image file
(:mod:`kanji_wallpaper.publisher`). :func:`kanji_wallpaper.step.update` wires
those together as a single reducer over :class:`kanji_wallpaper.state.UpdaterState`.
"""
