"""Domain models for gaze samples, text geometry and reading metrics."""

from .gaze import GazeSample, RawGazeSample, Fixation
from .text import TextAlignment, TextWord, TextLine, TextLayoutResult
from .reading import (
    DriftCorrectionMethod,
    DriftCorrectionResult,
    FixationTextBinding,
    LineReadingMetrics,
    ReadingAnalysisResult,
    SaccadeType,
    TextSaccadeMetrics,
    WordReadingMetrics,
)

__all__ = [
    "GazeSample",
    "RawGazeSample",
    "Fixation",
    "TextAlignment",
    "TextWord",
    "TextLine",
    "TextLayoutResult",
    "DriftCorrectionMethod",
    "DriftCorrectionResult",
    "FixationTextBinding",
    "LineReadingMetrics",
    "ReadingAnalysisResult",
    "SaccadeType",
    "TextSaccadeMetrics",
    "WordReadingMetrics",
]
