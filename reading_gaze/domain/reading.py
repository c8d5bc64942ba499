"""Drift correction and reading metric results.

All results are frozen snapshots built once per analysis run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple

from .gaze import Fixation


class DriftCorrectionMethod(Enum):
    """Strategy used to correct vertical drift."""

    NONE = "none"
    SLICE = "slice"
    CLUSTER = "cluster"
    WARP = "warp"


class SaccadeType(Enum):
    """Classification of the movement between two consecutive fixations."""

    PROGRESSIVE = auto()
    REGRESSIVE = auto()
    SWEEP = auto()
    UNCLASSIFIED = auto()


@dataclass(frozen=True)
class DriftCorrectionResult:
    corrected_fixations: Tuple[Fixation, ...]
    delta: float = 0.0
    kappa: float = 0.0
    method: DriftCorrectionMethod = DriftCorrectionMethod.NONE


@dataclass(frozen=True)
class FixationTextBinding:
    """Assignment of one fixation to a word and/or line.

    ``word_index is None`` means the fixation lies outside every word
    (beyond the distance cutoff); ``line_index is None`` only happens for
    an empty layout.
    """

    fixation: Fixation
    sequence_index: int
    word_index: Optional[int] = None
    line_index: Optional[int] = None
    distance_to_word: float = float("inf")
    corrected_y_px: float = 0.0


@dataclass(frozen=True)
class WordReadingMetrics:
    word_index: int
    word_text: str
    line_index: int

    fixation_count: int = 0
    total_fixation_duration: float = 0.0

    # First pass
    first_fixation_duration: float = 0.0
    gaze_duration: float = 0.0
    first_of_many_duration: float = 0.0

    # Later passes
    second_pass_duration: float = 0.0
    go_past_duration: float = 0.0

    # Landing position, 0..1 relative to the word and in characters
    initial_landing_position: float = 0.0
    initial_landing_position_char: float = 0.0

    number_of_regressions_in: int = 0
    number_of_regressions_out: int = 0

    was_skipped: bool = False
    was_refixated: bool = False
    first_pass_fixated: bool = False


@dataclass(frozen=True)
class LineReadingMetrics:
    line_index: int
    word_count: int = 0
    fixation_count: int = 0
    total_fixation_duration: float = 0.0
    skipped_word_count: int = 0
    first_fixation_time: float = 0.0
    last_fixation_time: float = 0.0
    # 1.0 = strictly left-to-right
    reading_order_score: float = 1.0


@dataclass(frozen=True)
class TextSaccadeMetrics:
    total_saccades: int = 0
    progressive_saccades: int = 0
    regressive_saccades: int = 0
    sweep_saccades: int = 0
    mean_saccade_amplitude_px: float = 0.0
    mean_saccade_amplitude_deg: float = 0.0
    mean_saccade_velocity_deg_s: float = 0.0
    saccade_types: Tuple[SaccadeType, ...] = ()


@dataclass(frozen=True)
class ReadingAnalysisResult:
    word_metrics: Tuple[WordReadingMetrics, ...] = ()
    line_metrics: Tuple[LineReadingMetrics, ...] = ()
    saccade_metrics: TextSaccadeMetrics = field(default_factory=TextSaccadeMetrics)
    bindings: Tuple[FixationTextBinding, ...] = ()
    drift_correction: Optional[DriftCorrectionResult] = None
    total_fixations: int = 0
    fixations_on_words: int = 0

    @property
    def fixations_on_words_percent(self) -> float:
        if self.total_fixations <= 0:
            return 0.0
        return self.fixations_on_words / self.total_fixations * 100.0
