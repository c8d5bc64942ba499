# reading_gaze/detection/ivt.py
"""I-VT: velocity-threshold fixation identification on raw samples."""

from __future__ import annotations

import logging
import math
from typing import List, Sequence

import numpy as np

from ..config import ScreenGeometry
from ..config.constants import ComputationalConstants
from ..domain.gaze import Fixation, RawGazeSample
from .geometry import VisualAngleCalculator

logger = logging.getLogger(__name__)


def compute_angular_velocities(
    samples: Sequence[RawGazeSample],
    screen: ScreenGeometry,
) -> np.ndarray:
    """
    Angular velocity (deg/s) between each sample and its predecessor.

    ``v[0]`` is always ``inf``. A velocity is ``inf`` as well when the
    time step is not in (0, MAX_SAMPLE_DT_SEC], no viewing distance is
    known, or the value exceeds MAX_SPEED_DEG_PER_SEC.
    """
    n = len(samples)
    vel = np.full(n, np.inf, dtype=float)
    calc = VisualAngleCalculator(screen)

    for i in range(1, n):
        prev, cur = samples[i - 1], samples[i]
        dt = cur.time_sec - prev.time_sec
        if not math.isfinite(dt) or dt <= 0 or dt > ComputationalConstants.MAX_SAMPLE_DT_SEC:
            continue

        distance_m = cur.distance_m if cur.distance_m > 0 else prev.distance_m
        dx_px = (cur.x_norm - prev.x_norm) * screen.width_px
        dy_px = (cur.y_norm - prev.y_norm) * screen.height_px
        angle = calc.visual_angle_deg(dx_px, dy_px, distance_m)

        v = angle / dt
        if math.isfinite(v) and v <= ComputationalConstants.MAX_SPEED_DEG_PER_SEC:
            vel[i] = v
    return vel


def _fixation_from_run(
    samples: Sequence[RawGazeSample],
    a: int,
    b: int,
    min_fix_dur_sec: float,
    screen: ScreenGeometry,
) -> Fixation | None:
    start = samples[a].time_sec
    dur = samples[b].time_sec - start
    if dur < min_fix_dur_sec:
        return None
    xs = np.array([s.x_norm for s in samples[a:b + 1]], dtype=float) * screen.width_px
    ys = np.array([s.y_norm for s in samples[a:b + 1]], dtype=float) * screen.height_px
    return Fixation(start, dur, float(xs.mean()), float(ys.mean()))


def detect_ivt(
    samples: Sequence[RawGazeSample],
    screen: ScreenGeometry,
    velocity_threshold_deg_per_sec: float = ComputationalConstants.DEFAULT_VELOCITY_THRESHOLD,
    min_fix_dur_sec: float = ComputationalConstants.DEFAULT_MIN_FIXATION_DURATION_SEC,
) -> List[Fixation]:
    """
    Classify inter-sample velocities and collapse slow runs into fixations.

    A run of velocities ``<= threshold`` starting at sample ``i`` begins
    with sample ``i - 1`` (the velocity is measured between the two).
    Angular velocity needs the physical screen size; without it the
    result is empty.
    """
    if not screen.has_physical_size or screen.width_px <= 0 or screen.height_px <= 0:
        return []

    usable = [s for s in samples if math.isfinite(s.distance_m)]
    if len(usable) < 2:
        return []

    vel = compute_angular_velocities(usable, screen)
    fixations: List[Fixation] = []

    start = -1
    for i in range(1, len(usable)):
        if vel[i] <= velocity_threshold_deg_per_sec:
            if start < 0:
                start = i - 1
        elif start >= 0:
            fix = _fixation_from_run(usable, start, i - 1, min_fix_dur_sec, screen)
            if fix is not None:
                fixations.append(fix)
            start = -1

    if start >= 0:
        fix = _fixation_from_run(usable, start, len(usable) - 1, min_fix_dur_sec, screen)
        if fix is not None:
            fixations.append(fix)

    logger.debug("I-VT: %s fixations from %s samples", len(fixations), len(usable))
    return fixations
