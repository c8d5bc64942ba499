"""Vertical drift correction for reading trials."""

from .correction import (
    ReadingPass,
    apply_cluster,
    apply_slice,
    apply_warp,
    auto_correct,
    calculate_kappa,
    correct_drift,
    detect_reading_passes,
    estimate_line_for_pass,
    kmeans_1d,
    match_clusters_to_lines,
)

__all__ = [
    "ReadingPass",
    "apply_cluster",
    "apply_slice",
    "apply_warp",
    "auto_correct",
    "calculate_kappa",
    "correct_drift",
    "detect_reading_passes",
    "estimate_line_for_pass",
    "kmeans_1d",
    "match_clusters_to_lines",
]
