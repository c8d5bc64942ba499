# reading_gaze/preprocessing/noise_reduction.py
"""Noise reduction: smooths normalised gaze coordinates."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np

from ..domain.gaze import RawGazeSample

logger = logging.getLogger(__name__)


class SmoothingStrategy(ABC):
    """Abstract base class for gaze coordinate smoothing."""

    def __init__(self, window_samples: int = 5):
        self.window_samples = max(1, int(window_samples))

    @abstractmethod
    def smooth(self, samples: Sequence[RawGazeSample]) -> List[RawGazeSample]:
        """Return a new list; the input samples are left untouched."""

    @abstractmethod
    def get_description(self) -> str:
        pass


class WindowSmoothing(SmoothingStrategy):
    """Centred sample window over the valid, in-range neighbours."""

    @abstractmethod
    def aggregate(self, values: np.ndarray) -> float:
        """Collapse the window values of one axis into a single value."""

    def smooth(self, samples: Sequence[RawGazeSample]) -> List[RawGazeSample]:
        out = list(samples)
        n = len(out)
        half = self.window_samples // 2
        if n == 0 or half == 0:
            return out

        xs = np.array([s.x_norm for s in samples], dtype=float)
        ys = np.array([s.y_norm for s in samples], dtype=float)
        usable = np.array([s.valid for s in samples], dtype=bool)
        usable &= np.isfinite(xs) & np.isfinite(ys)
        usable &= (xs >= 0) & (xs <= 1) & (ys >= 0) & (ys <= 1)

        for i in range(n):
            if not samples[i].valid:
                continue
            lo = max(0, i - half)
            hi = min(n, i + half + 1)
            mask = usable[lo:hi]
            if not mask.any():
                continue
            nx = self.aggregate(xs[lo:hi][mask])
            ny = self.aggregate(ys[lo:hi][mask])
            # A filter result outside the screen is worse than the raw point
            if not (np.isfinite(nx) and np.isfinite(ny) and 0 <= nx <= 1 and 0 <= ny <= 1):
                continue
            out[i] = samples[i].with_position(float(nx), float(ny))
        return out


class NoSmoothing(SmoothingStrategy):
    def smooth(self, samples: Sequence[RawGazeSample]) -> List[RawGazeSample]:
        return list(samples)

    def get_description(self) -> str:
        return "NoSmoothing"


class MedianSmoothing(WindowSmoothing):
    def aggregate(self, values: np.ndarray) -> float:
        return float(np.median(values))

    def get_description(self) -> str:
        return f"MedianSmoothing(window={self.window_samples})"


class MovingAverageSmoothing(WindowSmoothing):
    def aggregate(self, values: np.ndarray) -> float:
        return float(np.mean(values))

    def get_description(self) -> str:
        return f"MovingAverageSmoothing(window={self.window_samples})"


def get_smoothing_strategy(mode: str, window_samples: int) -> SmoothingStrategy:
    """Factory for smoothing strategies."""
    if mode == "none":
        return NoSmoothing(window_samples)
    elif mode == "median":
        return MedianSmoothing(window_samples)
    elif mode == "moving_average":
        return MovingAverageSmoothing(window_samples)
    else:
        raise ValueError(f"Unknown smoothing mode: {mode}")


def reduce_noise(
    samples: Sequence[RawGazeSample],
    mode: str,
    window_samples: int,
) -> List[RawGazeSample]:
    """
    Optional smoothing of the normalised gaze position.

    - Only valid samples are rewritten; invalid ones pass through.
    - The window is counted in samples, not time.
    """
    strategy = get_smoothing_strategy(mode, window_samples)
    logger.debug("Noise reduction: %s", strategy.get_description())
    return strategy.smooth(samples)
