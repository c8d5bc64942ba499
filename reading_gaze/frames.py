# reading_gaze/frames.py
"""
pandas interchange for samples, fixations and metrics.

Column names follow the dataclass field names, so a frame produced here
reads back with the matching ``*_from_frame`` helper. Nothing in this
module touches files; reading and writing frames is left to the caller.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from .config.constants import ValidationMessages
from .domain.gaze import Fixation, GazeSample, RawGazeSample
from .domain.reading import FixationTextBinding, LineReadingMetrics, WordReadingMetrics

SAMPLE_COLUMNS = ["time_sec", "x_norm", "y_norm"]
RAW_SAMPLE_COLUMNS = SAMPLE_COLUMNS + ["distance_m", "valid", "open_valid"]
FIXATION_COLUMNS = ["start_sec", "dur_sec", "x_px", "y_px"]
BINDING_COLUMNS = [
    "sequence_index",
    "start_sec",
    "dur_sec",
    "x_px",
    "y_px",
    "corrected_y_px",
    "word_index",
    "line_index",
    "distance_to_word",
]


def _require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(ValidationMessages.MISSING_COLUMNS.format(", ".join(missing)))


def samples_from_frame(df: pd.DataFrame) -> List[GazeSample]:
    """Read ``time_sec``, ``x_norm`` and ``y_norm`` into gaze samples."""
    _require_columns(df, SAMPLE_COLUMNS)
    values = df[SAMPLE_COLUMNS].to_numpy(dtype=float)
    return [GazeSample(float(t), float(x), float(y)) for t, x, y in values]


def raw_samples_from_frame(df: pd.DataFrame) -> List[RawGazeSample]:
    """
    Read raw samples for the preprocessing pipeline.

    Only ``time_sec``, ``x_norm`` and ``y_norm`` are required. Missing
    ``distance_m`` defaults to 0 (unknown). Missing ``valid`` is derived
    from finite coordinates, missing ``open_valid`` defaults to True.
    """
    _require_columns(df, SAMPLE_COLUMNS)
    n = len(df)
    times = df["time_sec"].to_numpy(dtype=float)
    xs = df["x_norm"].to_numpy(dtype=float)
    ys = df["y_norm"].to_numpy(dtype=float)

    if "distance_m" in df.columns:
        distances = df["distance_m"].fillna(0.0).to_numpy(dtype=float)
    else:
        distances = np.zeros(n, dtype=float)

    if "valid" in df.columns:
        valid = df["valid"].fillna(False).astype(bool).to_numpy()
    else:
        valid = np.isfinite(xs) & np.isfinite(ys)

    if "open_valid" in df.columns:
        open_valid = df["open_valid"].fillna(True).astype(bool).to_numpy()
    else:
        open_valid = np.ones(n, dtype=bool)

    return [
        RawGazeSample(
            time_sec=float(times[i]),
            x_norm=float(xs[i]),
            y_norm=float(ys[i]),
            distance_m=float(distances[i]),
            valid=bool(valid[i]),
            open_valid=bool(open_valid[i]),
        )
        for i in range(n)
    ]


def fixations_to_frame(fixations: Sequence[Fixation]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(f) for f in fixations], columns=FIXATION_COLUMNS)
    df["end_sec"] = df["start_sec"] + df["dur_sec"]
    return df


def fixations_from_frame(df: pd.DataFrame) -> List[Fixation]:
    _require_columns(df, FIXATION_COLUMNS)
    values = df[FIXATION_COLUMNS].to_numpy(dtype=float)
    return [Fixation(float(s), float(d), float(x), float(y)) for s, d, x, y in values]


def bindings_to_frame(bindings: Sequence[FixationTextBinding]) -> pd.DataFrame:
    """One row per binding; unbound word or line indices become ``<NA>``."""
    rows = [
        {
            "sequence_index": b.sequence_index,
            "start_sec": b.fixation.start_sec,
            "dur_sec": b.fixation.dur_sec,
            "x_px": b.fixation.x_px,
            "y_px": b.fixation.y_px,
            "corrected_y_px": b.corrected_y_px,
            "word_index": b.word_index,
            "line_index": b.line_index,
            "distance_to_word": b.distance_to_word,
        }
        for b in bindings
    ]
    df = pd.DataFrame(rows, columns=BINDING_COLUMNS)
    df["word_index"] = df["word_index"].astype("Int64")
    df["line_index"] = df["line_index"].astype("Int64")
    return df


def word_metrics_to_frame(metrics: Sequence[WordReadingMetrics]) -> pd.DataFrame:
    columns = list(WordReadingMetrics.__dataclass_fields__)
    return pd.DataFrame([asdict(m) for m in metrics], columns=columns)


def line_metrics_to_frame(metrics: Sequence[LineReadingMetrics]) -> pd.DataFrame:
    columns = list(LineReadingMetrics.__dataclass_fields__)
    return pd.DataFrame([asdict(m) for m in metrics], columns=columns)
