"""Text binding and reading metrics."""

from .binding import bind_fixations_to_text, nearest_word
from .reading import (
    classify_saccade,
    compute_line_metrics,
    compute_reading_metrics,
    compute_saccade_metrics,
    compute_word_metrics,
)

__all__ = [
    "bind_fixations_to_text",
    "nearest_word",
    "classify_saccade",
    "compute_line_metrics",
    "compute_reading_metrics",
    "compute_saccade_metrics",
    "compute_word_metrics",
]
