# reading_gaze/preprocessing/gap_fill.py
"""Gap fill-in interpolation: fills short runs of invalid samples."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import List, Sequence

from ..config.constants import ComputationalConstants
from ..domain.gaze import RawGazeSample

logger = logging.getLogger(__name__)


def gap_fill_samples(
    samples: Sequence[RawGazeSample],
    max_gap_samples: int,
    max_gap_sec: float = ComputationalConstants.MAX_GAP_FILL_SEC,
) -> List[RawGazeSample]:
    """
    Linearly interpolate short gaps in the gaze signal.

    A gap is a run of invalid samples. It is filled only when:
      - it holds at most ``max_gap_samples`` samples,
      - it is bordered by valid samples on both sides (edges stay open),
      - both borders and every sample inside have open eyes
        (a closed eye inside the gap is a blink, not tracker loss),
      - the bordering samples are at most ``max_gap_sec`` apart.

    Interpolation is index-proportional between the bordering samples.
    Points that would land outside the normalised [0, 1] range are left
    as they were. The input sequence is not modified.
    """
    out = list(samples)
    n = len(out)
    if max_gap_samples <= 0 or n < 3:
        return out

    filled = 0
    i = 0
    while i < n:
        while i < n and out[i].valid:
            i += 1
        if i >= n:
            break

        gap_start = i
        while i < n and not out[i].valid:
            i += 1
        gap_end = i  # first valid sample after the gap, or n

        gap_len = gap_end - gap_start
        if gap_len <= 0 or gap_len > max_gap_samples:
            continue

        left = gap_start - 1
        right = gap_end
        if left < 0 or right >= n:
            continue

        prev, nxt = out[left], out[right]
        if not prev.open_valid or not nxt.open_valid:
            continue
        if any(not out[j].open_valid for j in range(gap_start, gap_end)):
            continue

        dt_gap = nxt.time_sec - prev.time_sec
        if not math.isfinite(dt_gap) or dt_gap <= 0 or dt_gap > max_gap_sec:
            continue

        x0, y0, x1, y1 = prev.x_norm, prev.y_norm, nxt.x_norm, nxt.y_norm
        if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
            continue

        for k in range(1, gap_len + 1):
            alpha = k / (gap_len + 1)
            x = x0 + (x1 - x0) * alpha
            y = y0 + (y1 - y0) * alpha
            if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
                continue
            idx = gap_start + k - 1
            out[idx] = replace(out[idx], x_norm=x, y_norm=y, valid=True, open_valid=True)
            filled += 1

    logger.debug("Gap filling interpolated %s of %s samples", filled, n)
    return out
