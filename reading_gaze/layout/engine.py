# reading_gaze/layout/engine.py
"""Text layout for reading analysis.

Lays a text stimulus out into lines and words with pixel coordinates,
using a host supplied :class:`~reading_gaze.layout.measure.TextMeasurer`
for word widths. Layout is independent of gaze data; it provides the
spatial reference for drift correction and word binding.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Dict, List, NamedTuple, Optional

from ..config import TextLayoutConfig
from ..config.constants import PhysicalConstants
from ..domain.text import TextAlignment, TextLayoutResult, TextLine, TextWord
from .measure import MonospaceMeasurer, TextMeasurer

logger = logging.getLogger(__name__)


class WordToken(NamedTuple):
    text: str
    char_start: int
    char_end: int
    # Explicit newlines between the previous word (or text start) and this one
    line_breaks_before: int = 0


def split_into_words(text: str) -> List[WordToken]:
    """
    Split ``text`` on whitespace runs, keeping source offsets.

    ``"\\n"`` is consumed as a separator like any other whitespace; the
    next word records how many newlines preceded it. Newlines after the
    last word are dropped.
    """
    tokens: List[WordToken] = []
    if not text:
        return tokens

    i = 0
    n = len(text)
    pending_breaks = 0
    while i < n:
        while i < n and text[i].isspace():
            if text[i] == "\n":
                pending_breaks += 1
            i += 1
        if i >= n:
            break

        start = i
        while i < n and not text[i].isspace():
            i += 1
        tokens.append(WordToken(text[start:i], start, i, pending_breaks))
        pending_breaks = 0
    return tokens


def _line_shift(alignment: TextAlignment, max_width: float, line_width: float) -> float:
    if alignment == TextAlignment.CENTER:
        return (max_width - line_width) / 2
    if alignment == TextAlignment.RIGHT:
        return max_width - line_width
    return 0.0


def compute_layout(
    config: TextLayoutConfig,
    dpi: float = PhysicalConstants.DEFAULT_DPI,
    measurer: Optional[TextMeasurer] = None,
) -> TextLayoutResult:
    """
    Lay ``config.text`` out into lines and words.

    Wrapping: the cursor starts at ``(padding_left, padding_top)``. A word
    moves to a new line when ``x + width > padding_left + max_width`` and
    the current line already holds a word, so an over-wide word alone on
    a line stays there. Every explicit newline is a hard break that
    advances ``y`` by one line height whether or not the current line
    holds a word, so blank lines stay in the layout as empty
    :class:`TextLine` entries. After every word the
    cursor advances by the word width plus one space width, including
    after the last word of a line; that trailing gap never reaches a
    word's ``x`` or any line width.

    Alignment is a post-pass per line, applied only with a finite
    ``max_width`` and a strictly positive shift.

    Raises:
        InvalidConfigurationError: for an invalid ``config``.
    """
    config.validate()
    measure = measurer or MonospaceMeasurer()

    if config.text is None or not config.text.strip():
        return TextLayoutResult(config=config)

    font_size = float(config.font_size_px)
    line_height = config.line_height
    max_width = config.effective_max_width
    space_width = measure(" ", config.font_name, font_size, dpi)

    x = config.padding_left
    y = config.padding_top
    line_index = 0

    # Mutable word records per line until alignment is settled
    lines: List[List[Dict]] = [[]]
    line_ys: List[float] = [y]

    for token in split_into_words(config.text):
        width = measure(token.text, config.font_name, font_size, dpi)
        current = lines[-1]

        breaks = token.line_breaks_before
        if breaks == 0 and current and x + width > config.padding_left + max_width:
            breaks = 1
        for _ in range(breaks):
            line_index += 1
            y += line_height
            x = config.padding_left
            lines.append([])
            line_ys.append(y)
            current = lines[-1]

        current.append(
            {
                "line_index": line_index,
                "text": token.text,
                "x": x,
                "y": y,
                "width": width,
                "height": font_size,
                "char_start": token.char_start,
                "char_end": token.char_end,
            }
        )
        x += width + space_width

    if config.alignment != TextAlignment.LEFT and math.isfinite(max_width):
        for records in lines:
            if not records:
                continue
            line_width = records[-1]["x"] + records[-1]["width"] - records[0]["x"]
            shift = _line_shift(config.alignment, max_width, line_width)
            if shift > 0:
                for rec in records:
                    rec["x"] += shift

    words: List[TextWord] = []
    text_lines: List[TextLine] = []
    for idx, records in enumerate(lines):
        word_start = len(words)
        for rec in records:
            words.append(TextWord(index=len(words), **rec))
        line_words = words[word_start:]
        if line_words:
            line_x = line_words[0].x
            line_width = line_words[-1].right - line_words[0].x
        else:
            line_x = line_width = 0.0
        text_lines.append(
            TextLine(
                index=idx,
                y=line_ys[idx],
                height=line_height,
                text=" ".join(w.text for w in line_words),
                word_start=word_start,
                word_stop=len(words),
                x=line_x,
                width=line_width,
            )
        )

    content_width = max((w.right for w in words), default=0.0)
    result = TextLayoutResult(
        config=config,
        lines=tuple(text_lines),
        words=tuple(words),
        content_width=content_width,
        content_height=y + line_height,
        line_height=line_height,
    )
    logger.debug("Layout: %s words on %s lines", len(words), len(text_lines))
    return result


def recalculate_for_size(
    layout: TextLayoutResult,
    new_max_width: float,
    dpi: float = PhysicalConstants.DEFAULT_DPI,
    measurer: Optional[TextMeasurer] = None,
) -> TextLayoutResult:
    """Full re-layout with only ``max_width_px`` changed.

    Returns a new result; the caller decides whether to replace the one it
    holds. Empty layouts are returned as they are.
    """
    if layout.is_empty:
        return layout
    return compute_layout(replace(layout.config, max_width_px=new_max_width), dpi, measurer)


def distance_to_word(x: float, y: float, word: TextWord) -> float:
    """Euclidean distance from a point to the word box (0 inside)."""
    dx = 0.0
    dy = 0.0
    if x < word.x:
        dx = word.x - x
    elif x > word.right:
        dx = x - word.right
    if y < word.y:
        dy = word.y - y
    elif y > word.bottom:
        dy = y - word.bottom
    return math.hypot(dx, dy)


def is_point_in_word(x: float, y: float, word: TextWord) -> bool:
    return word.x <= x <= word.right and word.y <= y <= word.bottom


def find_word_at(
    layout: TextLayoutResult,
    x: float,
    y: float,
    tolerance: float = 0.0,
) -> Optional[TextWord]:
    """
    Word whose box, expanded by ``tolerance`` on every side, contains the
    point. Among several candidates the one nearest to the point wins;
    ties go to the lower word index.
    """
    if layout.is_empty:
        return None

    pad = tolerance if tolerance > 0 else 0.0
    nearest: Optional[TextWord] = None
    min_dist = math.inf
    for word in layout.words:
        inside = (word.x - pad <= x <= word.right + pad) and (word.y - pad <= y <= word.bottom + pad)
        if not inside:
            continue
        dist = distance_to_word(x, y, word)
        if dist < min_dist:
            min_dist = dist
            nearest = word
    return nearest


def find_line_at(layout: TextLayoutResult, y: float) -> Optional[TextLine]:
    """Line whose ``[y, y + height)`` band holds ``y``, else the line with
    the nearest vertical centre."""
    if layout.is_empty:
        return None

    for line in layout.lines:
        if line.y <= y < line.y + line.height:
            return line
    return min(layout.lines, key=lambda line: abs(line.center_y - y))
