# reading_gaze/config/constants.py
"""Physical and computational constants for gaze and reading analysis."""

from __future__ import annotations


class PhysicalConstants:
    """Physical constants for eye tracking calculations."""

    # Default eye-to-screen distance when the tracker reports none (m)
    DEFAULT_VIEWING_DISTANCE_M: float = 0.6

    # Reference DPI at which font pixel sizes are specified
    DEFAULT_DPI: float = 96.0


class ComputationalConstants:
    """Computational constants and defaults."""

    # I-DT defaults
    DEFAULT_MIN_FIXATION_DURATION_SEC: float = 0.08
    DEFAULT_DISPERSION_THRESHOLD_PX: float = 60.0

    # I-VT defaults
    DEFAULT_VELOCITY_THRESHOLD: float = 30.0

    # Velocities above this cap are treated as tracker noise (deg/s)
    MAX_SPEED_DEG_PER_SEC: float = 800.0

    # Consecutive samples further apart than this do not yield a velocity (s)
    MAX_SAMPLE_DT_SEC: float = 0.25

    # Gaps spanning more than this are never interpolated (s)
    MAX_GAP_FILL_SEC: float = 0.25

    # Weight floor for duration-weighted fixation merging (s)
    MIN_MERGE_WEIGHT_SEC: float = 0.0001

    # Drift correction
    KAPPA_MAX_EXPECTED_STD_PX: float = 50.0
    KMEANS_MAX_ITERATIONS: int = 20

    # Warp: a return sweep jumps further left than this (px)
    WARP_SWEEP_MIN_DX_PX: float = 100.0
    # Warp: vertical moves beyond this share of a line height change line
    WARP_LINE_CHANGE_FRACTION: float = 0.5
    # Warp: cost per line of distance from the expected line, in line heights
    WARP_LINE_PENALTY_FRACTION: float = 0.3

    # Fixation to word binding
    DEFAULT_MAX_FIXATION_DISTANCE_PX: float = 50.0

    # Saccades shorter than this gap do not yield a velocity (s)
    MIN_SACCADE_DT_SEC: float = 0.001


class ValidationMessages:
    """Standard validation and error messages."""

    MUST_BE_POSITIVE = "must be > 0"
    MUST_BE_NON_NEGATIVE = "must be >= 0"
    MUST_BE_FINITE = "must be a finite number"
    MISSING_COLUMNS = "DataFrame is missing required columns: {}"
