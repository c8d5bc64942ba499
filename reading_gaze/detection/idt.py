# reading_gaze/detection/idt.py
"""I-DT: dispersion-threshold fixation identification."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config.constants import ComputationalConstants
from ..domain.gaze import Fixation, GazeSample

logger = logging.getLogger(__name__)


def samples_to_pixels(
    samples: Sequence[GazeSample],
    screen_width_px: float,
    screen_height_px: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(times, x_px, y_px)`` arrays for normalised samples."""
    times = np.array([s.time_sec for s in samples], dtype=float)
    xs = np.array([s.x_norm for s in samples], dtype=float) * float(screen_width_px)
    ys = np.array([s.y_norm for s in samples], dtype=float) * float(screen_height_px)
    return times, xs, ys


def dispersion(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Bounding-box dispersion: X range plus Y range (not Euclidean)."""
    if len(xs) == 0:
        return 0.0
    return float((np.max(xs) - np.min(xs)) + (np.max(ys) - np.min(ys)))


def detect_idt(
    samples: Sequence[GazeSample],
    screen_width_px: float,
    screen_height_px: float,
    min_fix_dur_sec: float = ComputationalConstants.DEFAULT_MIN_FIXATION_DURATION_SEC,
    dispersion_threshold_px: float = ComputationalConstants.DEFAULT_DISPERSION_THRESHOLD_PX,
    min_window_sec: Optional[float] = None,
) -> List[Fixation]:
    """
    Detect fixations with the classic window-growing I-DT algorithm.

    Steps:
      1) The window ``[i, j]`` grows until it spans ``min_window_sec``
         (defaults to ``min_fix_dur_sec``).
      2) If its dispersion is <= threshold, it is extended one sample at
         a time while the dispersion stays <= threshold. The fixation is
         the mean pixel position of the final window ``[i, k]``; it is
         kept only if ``t[k] - t[i] >= min_fix_dur_sec``. Next start is
         ``k + 1``.
      3) Otherwise the window start slides by one sample.

    Fewer than two samples or a non-positive screen size yield an empty
    list; the function never raises for well-formed input.
    """
    n = len(samples)
    if n < 2 or screen_width_px <= 0 or screen_height_px <= 0:
        return []

    window_sec = min_fix_dur_sec if min_window_sec is None else min_window_sec
    times_arr, xs_arr, ys_arr = samples_to_pixels(samples, screen_width_px, screen_height_px)
    times = times_arr.tolist()
    xs = xs_arr.tolist()
    ys = ys_arr.tolist()

    fixations: List[Fixation] = []
    i = 0
    while i < n:
        j = i
        while j < n and (times[j] - times[i]) < window_sec:
            j += 1
        if j >= n:
            break

        min_x = min(xs[i:j + 1])
        max_x = max(xs[i:j + 1])
        min_y = min(ys[i:j + 1])
        max_y = max(ys[i:j + 1])

        if (max_x - min_x) + (max_y - min_y) <= dispersion_threshold_px:
            k = j
            while k + 1 < n:
                nx, ny = xs[k + 1], ys[k + 1]
                n_min_x = min(min_x, nx)
                n_max_x = max(max_x, nx)
                n_min_y = min(min_y, ny)
                n_max_y = max(max_y, ny)
                if (n_max_x - n_min_x) + (n_max_y - n_min_y) > dispersion_threshold_px:
                    break
                min_x, max_x, min_y, max_y = n_min_x, n_max_x, n_min_y, n_max_y
                k += 1

            start = times[i]
            dur = max(0.0, times[k] - start)
            if dur >= min_fix_dur_sec:
                fixations.append(
                    Fixation(
                        start_sec=start,
                        dur_sec=dur,
                        x_px=float(np.mean(xs_arr[i:k + 1])),
                        y_px=float(np.mean(ys_arr[i:k + 1])),
                    )
                )
            i = k + 1
        else:
            i += 1

    logger.debug("I-DT: %s fixations from %s samples", len(fixations), n)
    return fixations
