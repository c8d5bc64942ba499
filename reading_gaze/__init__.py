# reading_gaze/__init__.py
"""
Reading gaze analysis package.

Contains:
- Gap filling and noise reduction of raw gaze samples
- I-DT and I-VT fixation detection with fixation merging
- Text layout of reading stimuli
- Vertical drift correction (slice, cluster, warp, automatic)
- Word, line and saccade reading metrics
- pandas interchange and joblib batch analysis
"""

from .batch import AnalysisSession, analyze_sessions
from .config import FixationDetectionConfig, ScreenGeometry, TextAnalysisConfig, TextLayoutConfig
from .detection import detect_fixations, detect_idt, detect_ivt
from .domain import (
    DriftCorrectionMethod,
    DriftCorrectionResult,
    Fixation,
    FixationTextBinding,
    GazeSample,
    RawGazeSample,
    ReadingAnalysisResult,
    SaccadeType,
    TextAlignment,
    TextLayoutResult,
    TextLine,
    TextWord,
)
from .drift import auto_correct, correct_drift
from .engine import AnalysisRun, ReadingAnalysisEngine
from .errors import InvalidConfigurationError
from .layout import CharWidthMeasurer, MonospaceMeasurer, TextMeasurer, compute_layout, recalculate_for_size
from .metrics import bind_fixations_to_text, compute_reading_metrics

__version__ = "0.1.0"

__all__ = [
    "AnalysisRun",
    "AnalysisSession",
    "CharWidthMeasurer",
    "DriftCorrectionMethod",
    "DriftCorrectionResult",
    "Fixation",
    "FixationDetectionConfig",
    "FixationTextBinding",
    "GazeSample",
    "InvalidConfigurationError",
    "MonospaceMeasurer",
    "RawGazeSample",
    "ReadingAnalysisEngine",
    "ReadingAnalysisResult",
    "SaccadeType",
    "ScreenGeometry",
    "TextAlignment",
    "TextAnalysisConfig",
    "TextLayoutConfig",
    "TextLayoutResult",
    "TextLine",
    "TextMeasurer",
    "TextWord",
    "analyze_sessions",
    "auto_correct",
    "bind_fixations_to_text",
    "compute_layout",
    "compute_reading_metrics",
    "correct_drift",
    "detect_fixations",
    "detect_idt",
    "detect_ivt",
    "recalculate_for_size",
]
