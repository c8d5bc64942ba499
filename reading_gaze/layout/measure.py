"""Text measurement.

The layout engine needs the rendered width of a string at a given font,
size and DPI. The host rendering stack supplies that capability; any
callable with the :class:`TextMeasurer` signature works. It must be
deterministic and safe to call from the calling thread.

Two deterministic measurers ship with the package. They make layouts
reproducible in tests and batch runs where no font renderer exists.
"""
from __future__ import annotations

from typing import Mapping, Protocol

from ..config.constants import PhysicalConstants


class TextMeasurer(Protocol):
    def __call__(self, text: str, font_name: str, font_size_px: float, dpi: float) -> float:
        """Rendered width of ``text`` in pixels."""
        ...


class MonospaceMeasurer:
    """Every character advances ``advance_em`` times the font size.

    ``width = len(text) * font_size_px * advance_em * dpi / 96``; the font
    name is ignored.
    """

    def __init__(self, advance_em: float = 0.5) -> None:
        self.advance_em = float(advance_em)

    def __call__(self, text: str, font_name: str, font_size_px: float, dpi: float) -> float:
        if not text:
            return 0.0
        scale = dpi / PhysicalConstants.DEFAULT_DPI
        return len(text) * font_size_px * self.advance_em * scale

    def __repr__(self) -> str:
        return f"MonospaceMeasurer(advance_em={self.advance_em})"


class CharWidthMeasurer:
    """Per-character advance table in em units, e.g. from font metrics.

    Characters missing from ``widths_em`` advance by ``default_em``.
    """

    def __init__(self, widths_em: Mapping[str, float], default_em: float = 0.5) -> None:
        self.widths_em = dict(widths_em)
        self.default_em = float(default_em)

    def __call__(self, text: str, font_name: str, font_size_px: float, dpi: float) -> float:
        if not text:
            return 0.0
        em = sum(self.widths_em.get(ch, self.default_em) for ch in text)
        return em * font_size_px * dpi / PhysicalConstants.DEFAULT_DPI
