"""Gaze samples and fixations.

Samples carry normalised screen coordinates (0..1) exactly as the tracker
reports them; fixations live in screen pixels. Both are immutable values
created fresh for every analysis run.
"""
from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class GazeSample:
    """Single gaze observation at ``time_sec``."""

    time_sec: float
    x_norm: float
    y_norm: float


@dataclass(frozen=True)
class RawGazeSample:
    """Gaze observation as delivered by the tracker, before preprocessing.

    ``valid`` marks a usable gaze point, ``open_valid`` marks open eyes
    (a closed-eye sample inside a gap indicates a blink).
    """

    time_sec: float
    x_norm: float
    y_norm: float
    distance_m: float = 0.0
    valid: bool = True
    open_valid: bool = True

    def with_position(self, x_norm: float, y_norm: float) -> "RawGazeSample":
        return replace(self, x_norm=x_norm, y_norm=y_norm)

    def to_gaze_sample(self) -> GazeSample:
        return GazeSample(self.time_sec, self.x_norm, self.y_norm)


@dataclass(frozen=True)
class Fixation:
    """Stable gaze period detected from a run of samples."""

    start_sec: float
    dur_sec: float
    x_px: float
    y_px: float

    @property
    def end_sec(self) -> float:
        return self.start_sec + self.dur_sec

    def with_y(self, y_px: float) -> "Fixation":
        return replace(self, y_px=y_px)
