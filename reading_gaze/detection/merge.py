# reading_gaze/detection/merge.py
"""Merge adjacent fixations: combines neighbours close in time (and angle)."""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from ..config import ScreenGeometry
from ..config.constants import ComputationalConstants
from ..domain.gaze import Fixation, RawGazeSample
from .geometry import VisualAngleCalculator

logger = logging.getLogger(__name__)


def _merge_pair(cur: Fixation, nxt: Fixation) -> Fixation:
    """Span both fixations; the centre is weighted by duration."""
    new_end = max(cur.end_sec, nxt.end_sec)
    w1 = max(ComputationalConstants.MIN_MERGE_WEIGHT_SEC, cur.dur_sec)
    w2 = max(ComputationalConstants.MIN_MERGE_WEIGHT_SEC, nxt.dur_sec)
    cx = (cur.x_px * w1 + nxt.x_px * w2) / (w1 + w2)
    cy = (cur.y_px * w1 + nxt.y_px * w2) / (w1 + w2)
    return Fixation(cur.start_sec, new_end - cur.start_sec, cx, cy)


def mean_distance_for_fixation(samples: Sequence[RawGazeSample], fixation: Fixation) -> float:
    """Mean viewing distance (m) of the valid samples inside a fixation, 0 if none."""
    distances = [
        s.distance_m
        for s in samples
        if s.valid and s.distance_m > 0 and fixation.start_sec <= s.time_sec <= fixation.end_sec
    ]
    if not distances:
        return 0.0
    return float(np.mean(distances))


def angle_between_fixations_deg(
    a: Fixation,
    b: Fixation,
    samples: Sequence[RawGazeSample],
    screen: ScreenGeometry,
) -> float:
    """Visual angle between two fixation centres."""
    calc = VisualAngleCalculator(screen)
    if not calc.available:
        return float("inf")
    dist_a = mean_distance_for_fixation(samples, a)
    dist_b = mean_distance_for_fixation(samples, b)
    distance_m = dist_a if dist_a > 0 else dist_b
    return calc.visual_angle_deg(b.x_px - a.x_px, b.y_px - a.y_px, distance_m)


def merge_by_time(fixations: Sequence[Fixation], merge_sec: float) -> List[Fixation]:
    """Merge fixations whose gap to the previous (merged) one is <= ``merge_sec``."""
    if not fixations:
        return []
    ordered = sorted(fixations, key=lambda f: f.start_sec)
    merged: List[Fixation] = []
    cur = ordered[0]
    for nxt in ordered[1:]:
        if nxt.start_sec - cur.end_sec <= merge_sec:
            cur = _merge_pair(cur, nxt)
        else:
            merged.append(cur)
            cur = nxt
    merged.append(cur)
    logger.debug("Merged %s fixations into %s", len(ordered), len(merged))
    return merged


def join_fixations(
    fixations: Sequence[Fixation],
    samples: Sequence[RawGazeSample],
    screen: ScreenGeometry,
    join: str,
    merge_sec: float,
    merge_angle_deg: float,
) -> List[Fixation]:
    """
    Join neighbouring I-VT fixations.

    - ``"none"``: fixations are returned sorted, unchanged
    - ``"time"``: join when the gap between them is <= ``merge_sec``
    - ``"time_angle"``: additionally require the angle between the
      centres to be <= ``merge_angle_deg``
    """
    ordered = sorted(fixations, key=lambda f: f.start_sec)
    if join == "none" or len(ordered) < 2:
        return ordered
    if join == "time":
        return merge_by_time(ordered, merge_sec)
    if join != "time_angle":
        raise ValueError(f"Unknown join type: {join}")

    joined: List[Fixation] = []
    cur = ordered[0]
    for nxt in ordered[1:]:
        can_join = nxt.start_sec - cur.end_sec <= merge_sec
        if can_join:
            can_join = angle_between_fixations_deg(cur, nxt, samples, screen) <= merge_angle_deg
        if can_join:
            cur = _merge_pair(cur, nxt)
        else:
            joined.append(cur)
            cur = nxt
    joined.append(cur)
    logger.debug("Joined %s fixations into %s (time+angle)", len(ordered), len(joined))
    return joined
