"""Text layout geometry.

A :class:`TextLayoutResult` owns a single flat tuple of words (the word
arena). Lines do not hold their own word lists; they reference a
contiguous ``[word_start, word_stop)`` range of the arena, so every word
has exactly one owner.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from ..config.config import TextLayoutConfig


class TextAlignment(Enum):
    """Horizontal alignment of each laid out line."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class TextWord:
    """Word with its position in stimulus pixels."""

    index: int
    line_index: int
    text: str
    x: float
    y: float
    width: float
    height: float
    char_start: int
    char_end: int

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """``(x, y, width, height)``"""
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class TextLine:
    """One laid out line; ``x`` and ``width`` span first to last word."""

    index: int
    y: float
    height: float
    text: str
    word_start: int
    word_stop: int
    x: float = 0.0
    width: float = 0.0

    @property
    def word_range(self) -> range:
        return range(self.word_start, self.word_stop)

    @property
    def word_count(self) -> int:
        return self.word_stop - self.word_start

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class TextLayoutResult:
    """Complete layout of one text stimulus."""

    config: "TextLayoutConfig"
    lines: Tuple[TextLine, ...] = field(default_factory=tuple)
    words: Tuple[TextWord, ...] = field(default_factory=tuple)
    content_width: float = 0.0
    content_height: float = 0.0
    line_height: float = 0.0

    @property
    def is_empty(self) -> bool:
        return len(self.words) == 0

    def line_words(self, line: TextLine | int) -> Tuple[TextWord, ...]:
        """Words of one line, in reading order."""
        if isinstance(line, int):
            line = self.lines[line]
        return self.words[line.word_start:line.word_stop]
