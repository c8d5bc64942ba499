"""High level reading analysis orchestration."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .config import FixationDetectionConfig, ScreenGeometry, TextAnalysisConfig, TextLayoutConfig
from .config.constants import PhysicalConstants, ValidationMessages
from .detection import detect_fixations
from .domain.gaze import Fixation, RawGazeSample
from .domain.reading import DriftCorrectionResult, ReadingAnalysisResult
from .domain.text import TextLayoutResult
from .drift import auto_correct, correct_drift
from .errors import InvalidConfigurationError
from .layout import TextMeasurer, compute_layout
from .metrics import compute_reading_metrics
from .preprocessing import preprocess_samples

logger = logging.getLogger(__name__)


class IReadingAnalyzer(Protocol):
    """Protocol for running the full reading pipeline on one trial."""

    def run(
        self,
        raw_samples: Sequence[RawGazeSample],
        screen: ScreenGeometry,
        layout_config: TextLayoutConfig,
    ) -> "AnalysisRun":
        ...


@dataclass(frozen=True)
class AnalysisRun:
    """Everything derived from one trial: fixations, layout and metrics."""

    fixations: List[Fixation]
    layout: TextLayoutResult
    reading: ReadingAnalysisResult


class ReadingAnalysisEngine(IReadingAnalyzer):
    """
    Pipeline of preprocessing, fixation detection, text layout, drift
    correction and reading metrics.

    The engine keeps only its configuration. Every call works on its own
    inputs, so one engine may serve several threads as long as the
    measurer is thread safe.
    """

    def __init__(
        self,
        detection_config: Optional[FixationDetectionConfig] = None,
        analysis_config: Optional[TextAnalysisConfig] = None,
        measurer: Optional[TextMeasurer] = None,
        dpi: float = PhysicalConstants.DEFAULT_DPI,
    ) -> None:
        self.detection_config = detection_config or FixationDetectionConfig()
        self.analysis_config = analysis_config or TextAnalysisConfig()
        self.measurer = measurer
        self.dpi = dpi
        self.detection_config.validate()
        self.analysis_config.validate()
        if not dpi > 0:
            raise InvalidConfigurationError("dpi", dpi, ValidationMessages.MUST_BE_POSITIVE)

    def detect(self, raw_samples: Sequence[RawGazeSample], screen: ScreenGeometry) -> List[Fixation]:
        screen.validate()
        samples = preprocess_samples(raw_samples, self.detection_config)
        fixations = detect_fixations(samples, screen, self.detection_config)
        logger.debug("Preprocessed %s raw samples into %s", len(raw_samples), len(samples))
        return fixations

    def layout(self, layout_config: TextLayoutConfig) -> TextLayoutResult:
        return compute_layout(layout_config, dpi=self.dpi, measurer=self.measurer)

    def correct(self, fixations: Sequence[Fixation], layout: TextLayoutResult) -> DriftCorrectionResult:
        """Drift correction as configured: automatic choice or a fixed method."""
        if self.analysis_config.auto_drift_correction:
            return auto_correct(fixations, layout)
        return correct_drift(fixations, layout, self.analysis_config.drift_correction)

    def analyze(
        self,
        fixations: Sequence[Fixation],
        layout: TextLayoutResult,
        screen: Optional[ScreenGeometry] = None,
    ) -> ReadingAnalysisResult:
        """
        Drift correct ``fixations`` against ``layout`` and compute the
        reading metrics. Bindings use the corrected positions; metric
        fixations keep their measured coordinates.
        """
        if screen is not None:
            screen.validate()
        drift = self.correct(fixations, layout)
        logger.info(
            "Drift correction %s: delta=%.2f px, kappa=%.3f",
            drift.method.value,
            drift.delta,
            drift.kappa,
        )
        return compute_reading_metrics(
            fixations,
            layout,
            self.analysis_config,
            screen=screen,
            drift_correction=drift,
        )

    def run(
        self,
        raw_samples: Sequence[RawGazeSample],
        screen: ScreenGeometry,
        layout_config: TextLayoutConfig,
    ) -> AnalysisRun:
        # fail on bad configuration before any work is done
        screen.validate()
        layout_config.validate()
        fixations = self.detect(raw_samples, screen)
        layout = self.layout(layout_config)
        reading = self.analyze(fixations, layout, screen)
        return AnalysisRun(fixations=fixations, layout=layout, reading=reading)
