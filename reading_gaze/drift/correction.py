# reading_gaze/drift/correction.py
"""Vertical drift correction of reading fixations.

Eye trackers often drift vertically during a reading trial, so fixations
on one line creep towards the line above or below. Every strategy here
snap every fixation's Y to the centre of a text line and keep X as is:

- Slice: each fixation independently goes to the nearest line centre.
- Cluster: 1-D k-means on fixation Y (k = number of lines), clusters are
  paired with lines by rank order of their Y.
- Warp: the fixation sequence is cut into reading passes at return
  sweeps and upward regressions; each pass moves as a whole to one line,
  chosen by its median Y with a penalty for straying from the line the
  pass order predicts.

Only lines holding words take part; blank lines left by explicit
newlines never receive fixations.

Each method reports ``kappa``, a local 0..1 reliability score computed
from the spread of the per-fixation Y shifts (not Cohen's kappa).
"""
from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Sequence, Tuple

import numpy as np

from ..config.constants import ComputationalConstants
from ..domain.gaze import Fixation
from ..domain.reading import DriftCorrectionMethod, DriftCorrectionResult
from ..domain.text import TextLayoutResult

logger = logging.getLogger(__name__)


class ReadingPass(NamedTuple):
    """Consecutive fixations read as one line."""

    # Line the pass order predicts, counted over lines that hold words
    estimated_line: int
    indices: Tuple[int, ...]


def calculate_kappa(deltas: Sequence[float]) -> float:
    """``max(0, 1 - std(deltas) / 50)``; fewer than two deltas give 1.0."""
    if len(deltas) < 2:
        return 1.0
    std = float(np.std(np.asarray(deltas, dtype=float)))
    normalized = std / ComputationalConstants.KAPPA_MAX_EXPECTED_STD_PX
    return float(min(1.0, max(0.0, 1.0 - normalized)))


def _line_centers(layout: TextLayoutResult) -> np.ndarray:
    return np.array([line.center_y for line in layout.lines if line.word_count > 0], dtype=float)


def _result(
    fixations: Sequence[Fixation],
    new_ys: Sequence[float | None],
    method: DriftCorrectionMethod,
) -> DriftCorrectionResult:
    corrected: List[Fixation] = []
    deltas: List[float] = []
    for fix, new_y in zip(fixations, new_ys):
        if new_y is None:
            corrected.append(fix)
            continue
        deltas.append(new_y - fix.y_px)
        corrected.append(fix.with_y(new_y))
    return DriftCorrectionResult(
        corrected_fixations=tuple(corrected),
        delta=float(np.mean(deltas)) if deltas else 0.0,
        kappa=calculate_kappa(deltas),
        method=method,
    )


def _passthrough(fixations: Sequence[Fixation], method: DriftCorrectionMethod) -> DriftCorrectionResult:
    return DriftCorrectionResult(corrected_fixations=tuple(fixations), method=method)


def apply_slice(fixations: Sequence[Fixation], layout: TextLayoutResult) -> DriftCorrectionResult:
    """Snap each fixation to the line whose centre is vertically nearest."""
    centers = _line_centers(layout)
    if len(centers) == 0:
        return _passthrough(fixations, DriftCorrectionMethod.SLICE)

    new_ys: List[float | None] = []
    for fix in fixations:
        # argmin keeps the first line on equal distances
        nearest = int(np.argmin(np.abs(centers - fix.y_px)))
        new_ys.append(float(centers[nearest]))
    return _result(fixations, new_ys, DriftCorrectionMethod.SLICE)


def kmeans_1d(
    values: Sequence[float],
    k: int,
    max_iterations: int = ComputationalConstants.KMEANS_MAX_ITERATIONS,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Plain 1-D k-means.

    Centres start evenly spaced strictly inside ``[min, max]``:
    ``center[i] = min + step * (i + 1)`` with ``step = (max - min) / (k + 1)``.
    Each round assigns every value to its nearest centre (first centre on
    ties) and recomputes centre means; empty clusters keep their centre.
    Stops early when no assignment changes. All assignments start at 0.

    Returns:
        ``(assignments, centers)``
    """
    vals = np.asarray(values, dtype=float)
    n = len(vals)
    assignments = np.zeros(n, dtype=int)
    min_v = float(vals.min())
    max_v = float(vals.max())
    step = (max_v - min_v) / (k + 1)
    centers = np.array([min_v + step * (i + 1) for i in range(k)], dtype=float)

    for _ in range(max_iterations):
        best = np.abs(vals[:, None] - centers[None, :]).argmin(axis=1)
        changed = bool(np.any(best != assignments))
        assignments = best
        if not changed:
            break
        for c in range(k):
            members = vals[assignments == c]
            if len(members) > 0:
                centers[c] = members.mean()

    return assignments, centers


def match_clusters_to_lines(cluster_centers: Sequence[float], line_centers: Sequence[float]) -> Dict[int, int]:
    """Pair the cluster with the k-th smallest centre with the line with the
    k-th smallest centre. Clusters beyond the line count stay unmatched."""
    cluster_order = np.argsort(np.asarray(cluster_centers, dtype=float), kind="stable")
    line_order = np.argsort(np.asarray(line_centers, dtype=float), kind="stable")
    return {int(c): int(line) for c, line in zip(cluster_order, line_order)}


def apply_cluster(fixations: Sequence[Fixation], layout: TextLayoutResult) -> DriftCorrectionResult:
    """Cluster fixation Y into one group per line; falls back to slice when
    there are fewer fixations than lines."""
    line_centers = _line_centers(layout)
    k = len(line_centers)
    if k == 0 or len(fixations) < k:
        logger.debug("Cluster needs >= %s fixations, got %s; using slice", k, len(fixations))
        return apply_slice(fixations, layout)

    assignments, centers = kmeans_1d([f.y_px for f in fixations], k)
    cluster_to_line = match_clusters_to_lines(centers, line_centers)

    new_ys: List[float | None] = []
    for cluster in assignments:
        line_idx = cluster_to_line.get(int(cluster))
        new_ys.append(float(line_centers[line_idx]) if line_idx is not None else None)
    return _result(fixations, new_ys, DriftCorrectionMethod.CLUSTER)


def detect_reading_passes(fixations: Sequence[Fixation], line_height: float) -> List[ReadingPass]:
    """
    Split fixations, in sequence order, into reading passes.

    A new pass starts at a return sweep (a jump left by more than
    ``WARP_SWEEP_MIN_DX_PX`` that also moves down by more than half a line
    height), which raises the expected line by one, and at an upward move
    of more than half a line height, which lowers it by one (never below 0).
    """
    passes: List[ReadingPass] = []
    if len(fixations) == 0:
        return passes

    threshold = line_height * ComputationalConstants.WARP_LINE_CHANGE_FRACTION
    estimated_line = 0
    current = [0]
    for i in range(1, len(fixations)):
        prev = fixations[i - 1]
        fix = fixations[i]
        dy = fix.y_px - prev.y_px
        sweep = fix.x_px < prev.x_px - ComputationalConstants.WARP_SWEEP_MIN_DX_PX and dy > threshold
        if sweep or dy < -threshold:
            passes.append(ReadingPass(estimated_line, tuple(current)))
            estimated_line = estimated_line + 1 if sweep else max(0, estimated_line - 1)
            current = [i]
        else:
            current.append(i)
    passes.append(ReadingPass(estimated_line, tuple(current)))
    return passes


def estimate_line_for_pass(
    ys: Sequence[float],
    line_centers: Sequence[float],
    line_height: float,
    estimated_line: int,
) -> int:
    """
    Line whose centre is nearest to the median Y of a pass, plus
    ``WARP_LINE_PENALTY_FRACTION`` line heights per line of distance from
    ``estimated_line``. The median of an even count is the upper middle
    value; the first line wins equal costs.
    """
    centers = np.asarray(line_centers, dtype=float)
    if len(ys) == 0:
        return estimated_line
    median_y = float(np.sort(np.asarray(ys, dtype=float))[len(ys) // 2])
    penalty = (
        np.abs(np.arange(len(centers)) - estimated_line)
        * line_height
        * ComputationalConstants.WARP_LINE_PENALTY_FRACTION
    )
    return int(np.argmin(np.abs(centers - median_y) + penalty))


def apply_warp(fixations: Sequence[Fixation], layout: TextLayoutResult) -> DriftCorrectionResult:
    """Move each reading pass as a whole onto its estimated line."""
    line_centers = _line_centers(layout)
    if len(line_centers) == 0:
        return apply_slice(fixations, layout)

    new_ys: List[float | None] = [None] * len(fixations)
    passes = detect_reading_passes(fixations, layout.line_height)
    for reading_pass in passes:
        line_idx = estimate_line_for_pass(
            [fixations[i].y_px for i in reading_pass.indices],
            line_centers,
            layout.line_height,
            reading_pass.estimated_line,
        )
        for i in reading_pass.indices:
            new_ys[i] = float(line_centers[line_idx])
    logger.debug("Warp: %s reading passes over %s lines", len(passes), len(line_centers))
    return _result(fixations, new_ys, DriftCorrectionMethod.WARP)


def correct_drift(
    fixations: Sequence[Fixation],
    layout: TextLayoutResult,
    method: DriftCorrectionMethod,
) -> DriftCorrectionResult:
    """
    Correct vertical drift with the requested method.

    No fixations or an empty layout give an uncorrected pass-through
    result tagged with the requested method.
    """
    if len(fixations) == 0 or layout.is_empty:
        return _passthrough(fixations, method)
    if method == DriftCorrectionMethod.SLICE:
        return apply_slice(fixations, layout)
    if method == DriftCorrectionMethod.CLUSTER:
        return apply_cluster(fixations, layout)
    if method == DriftCorrectionMethod.WARP:
        return apply_warp(fixations, layout)
    return _passthrough(fixations, DriftCorrectionMethod.NONE)


def auto_correct(fixations: Sequence[Fixation], layout: TextLayoutResult) -> DriftCorrectionResult:
    """
    Run slice and cluster and keep the more reliable result.

    Cluster wins only with a strictly higher kappa; slice wins ties.
    """
    if len(fixations) == 0 or layout.is_empty:
        return _passthrough(fixations, DriftCorrectionMethod.NONE)

    sliced = apply_slice(fixations, layout)
    clustered = apply_cluster(fixations, layout)
    best = clustered if clustered.kappa > sliced.kappa else sliced
    logger.info(
        "Auto drift correction: slice kappa=%.3f, cluster kappa=%.3f -> %s",
        sliced.kappa,
        clustered.kappa,
        best.method.value,
    )
    return best
