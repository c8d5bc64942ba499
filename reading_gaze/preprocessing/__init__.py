"""Preprocessing stage: gap filling and noise reduction of raw samples."""

from __future__ import annotations

from typing import List, Sequence

from ..config import FixationDetectionConfig
from ..domain.gaze import RawGazeSample
from .gap_fill import gap_fill_samples
from .noise_reduction import reduce_noise


def preprocess_samples(
    samples: Sequence[RawGazeSample],
    cfg: FixationDetectionConfig,
) -> List[RawGazeSample]:
    """Gap filling followed by noise reduction, as configured."""
    out = list(samples)
    if not out:
        return out
    if cfg.gap_window_samples > 0:
        out = gap_fill_samples(out, cfg.gap_window_samples)
    if cfg.noise_reduction != "none" and cfg.noise_window_samples > 1:
        out = reduce_noise(out, cfg.noise_reduction, cfg.noise_window_samples)
    return out


__all__ = [
    "gap_fill_samples",
    "reduce_noise",
    "preprocess_samples",
]
