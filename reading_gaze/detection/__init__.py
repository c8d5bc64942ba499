"""Fixation detection: I-DT, I-VT and fixation merging."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

from ..config import FixationDetectionConfig, ScreenGeometry
from ..domain.gaze import Fixation, RawGazeSample
from .idt import detect_idt, dispersion, samples_to_pixels
from .ivt import compute_angular_velocities, detect_ivt
from .merge import join_fixations, merge_by_time

logger = logging.getLogger(__name__)


def _is_usable(sample: RawGazeSample) -> bool:
    if not sample.valid:
        return False
    if not all(math.isfinite(v) for v in (sample.time_sec, sample.x_norm, sample.y_norm)):
        return False
    return 0.0 <= sample.x_norm <= 1.0 and 0.0 <= sample.y_norm <= 1.0


def detect_fixations(
    samples: Sequence[RawGazeSample],
    screen: ScreenGeometry,
    cfg: FixationDetectionConfig,
) -> List[Fixation]:
    """
    Run the configured detector on (preprocessed) raw samples.

    Only valid samples with finite coordinates inside the screen take
    part. The result is sorted by start time.
    """
    usable = [s for s in samples if _is_usable(s)]
    if not usable:
        return []

    if cfg.algorithm == "ivt":
        fixations = detect_ivt(
            usable,
            screen,
            velocity_threshold_deg_per_sec=cfg.ivt_velocity_threshold_deg_per_sec,
            min_fix_dur_sec=cfg.ivt_min_duration_ms / 1000.0,
        )
        fixations = join_fixations(
            fixations,
            usable,
            screen,
            cfg.ivt_join,
            cfg.ivt_merge_time_ms / 1000.0,
            cfg.ivt_merge_angle_deg,
        )
    else:
        fixations = detect_idt(
            [s.to_gaze_sample() for s in usable],
            screen.width_px,
            screen.height_px,
            min_fix_dur_sec=cfg.idt_min_duration_ms / 1000.0,
            dispersion_threshold_px=cfg.idt_dispersion_threshold_px,
            min_window_sec=cfg.idt_window_ms / 1000.0,
        )
        if cfg.idt_merge_time_ms > 0 and len(fixations) > 1:
            fixations = merge_by_time(fixations, cfg.idt_merge_time_ms / 1000.0)

    fixations = sorted(fixations, key=lambda f: f.start_sec)
    logger.info("Detected %s fixations (%s) from %s usable samples", len(fixations), cfg.algorithm, len(usable))
    return fixations


__all__ = [
    "detect_idt",
    "detect_ivt",
    "detect_fixations",
    "dispersion",
    "samples_to_pixels",
    "compute_angular_velocities",
    "merge_by_time",
    "join_fixations",
]
