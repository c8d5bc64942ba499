# reading_gaze/config/config.py
"""
Configuration classes for the reading analysis pipeline.

This module defines every parameter used by:
  - Preprocessing (gap filling, noise reduction)
  - Fixation detection (I-DT dispersion, I-VT velocity, merging)
  - Text layout (font, spacing, wrapping, alignment)
  - Reading analysis (drift correction, word binding, duration filter)

Every class has a ``validate()`` method that raises
:class:`~reading_gaze.errors.InvalidConfigurationError` for settings that
would produce meaningless geometry. The pipeline validates once at its
boundary, before any work starts.

Example:
    >>> from reading_gaze.config import FixationDetectionConfig, TextLayoutConfig
    >>>
    >>> # Default I-DT detection
    >>> det_cfg = FixationDetectionConfig()
    >>>
    >>> # I-VT with median smoothing and time+angle joining
    >>> det_cfg = FixationDetectionConfig(
    ...     algorithm="ivt",
    ...     noise_reduction="median",
    ...     ivt_join="time_angle",
    ... )
    >>>
    >>> layout_cfg = TextLayoutConfig(text="The quick brown fox", max_width_px=600)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from ..domain.reading import DriftCorrectionMethod
from ..domain.text import TextAlignment
from ..errors import InvalidConfigurationError
from .constants import ComputationalConstants, PhysicalConstants, ValidationMessages


def _require_finite(name: str, value: float) -> None:
    try:
        finite = math.isfinite(value)
    except TypeError:
        finite = False
    if not finite:
        raise InvalidConfigurationError(name, value, ValidationMessages.MUST_BE_FINITE)


def _require_positive(name: str, value: float) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise InvalidConfigurationError(name, value, ValidationMessages.MUST_BE_POSITIVE)


def _require_non_negative(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise InvalidConfigurationError(name, value, ValidationMessages.MUST_BE_NON_NEGATIVE)


def _require_choice(name: str, value: str, choices: tuple) -> None:
    if value not in choices:
        raise InvalidConfigurationError(name, value, f"must be one of {choices}")


@dataclass(frozen=True)
class FixationDetectionConfig:
    """
    Configuration for preprocessing and fixation detection.
    """

    # Detection algorithm
    # - "idt": dispersion threshold (bounding box X range + Y range)
    # - "ivt": angular velocity threshold, needs physical screen size
    algorithm: Literal["idt", "ivt"] = "idt"

    # Spatial smoothing on normalised coordinates
    # - "none": no smoothing
    # - "moving_average": mean of the valid samples in the window
    # - "median": median of the valid samples in the window
    noise_reduction: Literal["none", "moving_average", "median"] = "none"
    noise_window_samples: int = 5

    # Longest run of invalid samples that is linearly interpolated (0 = off)
    gap_window_samples: int = 3

    # I-DT
    idt_dispersion_threshold_px: float = ComputationalConstants.DEFAULT_DISPERSION_THRESHOLD_PX
    idt_min_duration_ms: float = 80.0
    # Span of the starting window, usually equal to the minimum duration
    idt_window_ms: float = 80.0
    # Merge fixations separated by at most this gap (0 = off)
    idt_merge_time_ms: float = 0.0

    # I-VT
    ivt_velocity_threshold_deg_per_sec: float = ComputationalConstants.DEFAULT_VELOCITY_THRESHOLD
    ivt_min_duration_ms: float = 80.0
    # Joining of neighbouring fixations
    # - "none": keep fixations as detected
    # - "time": join when the gap is <= ivt_merge_time_ms
    # - "time_angle": additionally require the centre distance <= ivt_merge_angle_deg
    ivt_join: Literal["none", "time", "time_angle"] = "time"
    ivt_merge_time_ms: float = 75.0
    ivt_merge_angle_deg: float = 30.0

    def validate(self) -> None:
        _require_choice("algorithm", self.algorithm, ("idt", "ivt"))
        _require_choice("noise_reduction", self.noise_reduction, ("none", "moving_average", "median"))
        _require_choice("ivt_join", self.ivt_join, ("none", "time", "time_angle"))
        if self.noise_window_samples < 1:
            raise InvalidConfigurationError(
                "noise_window_samples", self.noise_window_samples, "must be >= 1"
            )
        if self.gap_window_samples < 0:
            raise InvalidConfigurationError(
                "gap_window_samples", self.gap_window_samples, ValidationMessages.MUST_BE_NON_NEGATIVE
            )
        _require_positive("idt_dispersion_threshold_px", self.idt_dispersion_threshold_px)
        _require_positive("idt_min_duration_ms", self.idt_min_duration_ms)
        _require_positive("idt_window_ms", self.idt_window_ms)
        _require_non_negative("idt_merge_time_ms", self.idt_merge_time_ms)
        _require_positive("ivt_velocity_threshold_deg_per_sec", self.ivt_velocity_threshold_deg_per_sec)
        _require_positive("ivt_min_duration_ms", self.ivt_min_duration_ms)
        _require_non_negative("ivt_merge_time_ms", self.ivt_merge_time_ms)
        _require_non_negative("ivt_merge_angle_deg", self.ivt_merge_angle_deg)


@dataclass(frozen=True)
class ScreenGeometry:
    """
    Pixel size of the stimulus screen plus optional physical dimensions.

    Physical size (mm) and viewing distance are only needed for angular
    quantities (I-VT, saccade amplitude in degrees); 0 means unknown.
    """

    width_px: int
    height_px: int
    width_mm: float = 0.0
    height_mm: float = 0.0
    distance_m: float = PhysicalConstants.DEFAULT_VIEWING_DISTANCE_M

    @property
    def has_physical_size(self) -> bool:
        return self.width_mm > 0 and self.height_mm > 0

    @property
    def mm_per_px_x(self) -> float:
        return self.width_mm / self.width_px if self.width_mm > 0 else 0.0

    @property
    def mm_per_px_y(self) -> float:
        return self.height_mm / self.height_px if self.height_mm > 0 else 0.0

    def validate(self) -> None:
        _require_positive("width_px", self.width_px)
        _require_positive("height_px", self.height_px)
        _require_non_negative("width_mm", self.width_mm)
        _require_non_negative("height_mm", self.height_mm)
        _require_non_negative("distance_m", self.distance_m)


@dataclass(frozen=True)
class TextLayoutConfig:
    """
    Layout settings for a text stimulus.
    """

    text: str = ""
    font_name: str = "Segoe UI"
    font_size_px: float = 24.0

    # Line spacing multiplier; values below 1 behave like 1
    line_spacing: float = 1.5

    # Wrapping width; 0 means unconstrained
    max_width_px: float = 800.0

    padding_left: float = 50.0
    padding_top: float = 50.0
    alignment: TextAlignment = TextAlignment.LEFT

    @property
    def line_height(self) -> float:
        return self.font_size_px * max(1.0, self.line_spacing)

    @property
    def effective_max_width(self) -> float:
        return self.max_width_px if self.max_width_px > 0 else math.inf

    def validate(self) -> None:
        _require_positive("font_size_px", self.font_size_px)
        _require_positive("line_spacing", self.line_spacing)
        _require_non_negative("max_width_px", self.max_width_px)
        _require_finite("padding_left", self.padding_left)
        _require_finite("padding_top", self.padding_top)
        if not isinstance(self.alignment, TextAlignment):
            raise InvalidConfigurationError("alignment", self.alignment, "must be a TextAlignment")


@dataclass(frozen=True)
class TextAnalysisConfig:
    """
    Settings for drift correction and reading metrics of one stimulus.
    """

    drift_correction: DriftCorrectionMethod = DriftCorrectionMethod.SLICE

    # When True: try slice and cluster, keep the more reliable one
    auto_drift_correction: bool = False

    # Fixations further than this from every word bind to a line only
    max_fixation_distance_px: float = ComputationalConstants.DEFAULT_MAX_FIXATION_DISTANCE_PX

    # Fixations outside [min, max] duration are ignored by the metrics
    min_fixation_duration_sec: float = 0.05
    max_fixation_duration_sec: float = 1.5

    def validate(self) -> None:
        if not isinstance(self.drift_correction, DriftCorrectionMethod):
            raise InvalidConfigurationError(
                "drift_correction", self.drift_correction, "must be a DriftCorrectionMethod"
            )
        _require_non_negative("max_fixation_distance_px", self.max_fixation_distance_px)
        _require_non_negative("min_fixation_duration_sec", self.min_fixation_duration_sec)
        _require_non_negative("max_fixation_duration_sec", self.max_fixation_duration_sec)
        if self.min_fixation_duration_sec > self.max_fixation_duration_sec:
            raise InvalidConfigurationError(
                "min_fixation_duration_sec",
                self.min_fixation_duration_sec,
                "must not exceed max_fixation_duration_sec",
            )
