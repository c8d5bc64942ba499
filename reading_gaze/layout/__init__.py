"""Text layout engine and text measurement."""

from .engine import (
    WordToken,
    compute_layout,
    distance_to_word,
    find_line_at,
    find_word_at,
    is_point_in_word,
    recalculate_for_size,
    split_into_words,
)
from .measure import CharWidthMeasurer, MonospaceMeasurer, TextMeasurer

__all__ = [
    "WordToken",
    "compute_layout",
    "distance_to_word",
    "find_line_at",
    "find_word_at",
    "is_point_in_word",
    "recalculate_for_size",
    "split_into_words",
    "CharWidthMeasurer",
    "MonospaceMeasurer",
    "TextMeasurer",
]
