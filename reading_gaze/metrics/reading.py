# reading_gaze/metrics/reading.py
"""
Word, line and saccade level reading metrics.

All functions work on the bindings produced by
:func:`~reading_gaze.metrics.binding.bind_fixations_to_text`, in sequence
order. Terminology follows the usual eye-movement reading measures:

- First pass: the first contiguous run of fixations on a word, counted
  only if the word was entered before any word to its right was fixated.
- First fixation duration (FFD): duration of the first first-pass fixation.
- Gaze duration: summed duration of the first-pass run.
- Go-past duration: everything fixated from first-pass entry until the
  gaze first moves to a word further right (regressions included).
- Second-pass duration: total duration minus gaze duration.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import ScreenGeometry, TextAnalysisConfig
from ..config.constants import ComputationalConstants
from ..detection.geometry import VisualAngleCalculator
from ..domain.gaze import Fixation
from ..domain.reading import (
    DriftCorrectionResult,
    FixationTextBinding,
    LineReadingMetrics,
    ReadingAnalysisResult,
    SaccadeType,
    TextSaccadeMetrics,
    WordReadingMetrics,
)
from ..domain.text import TextLayoutResult
from .binding import bind_fixations_to_text

logger = logging.getLogger(__name__)


def _first_pass_entry(word_seq: Sequence[Optional[int]], word_idx: int) -> Optional[int]:
    """Position of the first fixation on ``word_idx`` if no word to its
    right was fixated before it, else ``None``."""
    for pos, w in enumerate(word_seq):
        if w is None:
            continue
        if w == word_idx:
            return pos
        if w > word_idx:
            return None
    return None


def compute_word_metrics(
    bindings: Sequence[FixationTextBinding],
    layout: TextLayoutResult,
) -> List[WordReadingMetrics]:
    """One :class:`WordReadingMetrics` per layout word, in word order."""
    ordered = sorted(bindings, key=lambda b: b.sequence_index)
    word_seq = [b.word_index for b in ordered]
    durations = [b.fixation.dur_sec for b in ordered]

    positions: Dict[int, List[int]] = {}
    for pos, w in enumerate(word_seq):
        if w is not None and 0 <= w < len(layout.words):
            positions.setdefault(w, []).append(pos)

    regressions_in, regressions_out = _count_regressions(word_seq, len(layout.words))

    metrics: List[WordReadingMetrics] = []
    for word in layout.words:
        word_positions = positions.get(word.index)
        if not word_positions:
            metrics.append(
                WordReadingMetrics(
                    word_index=word.index,
                    word_text=word.text,
                    line_index=word.line_index,
                    number_of_regressions_in=regressions_in[word.index],
                    number_of_regressions_out=regressions_out[word.index],
                    was_skipped=True,
                )
            )
            continue

        total = float(sum(durations[p] for p in word_positions))
        first_fixation = gaze = first_of_many = go_past = 0.0

        entry = _first_pass_entry(word_seq, word.index)
        if entry is not None:
            run_end = entry
            while run_end < len(word_seq) and word_seq[run_end] == word.index:
                run_end += 1
            run = durations[entry:run_end]

            first_fixation = run[0]
            gaze = float(sum(run))
            if len(run) > 1:
                first_of_many = run[0]

            exit_right = next(
                (p for p in range(entry, len(word_seq)) if word_seq[p] is not None and word_seq[p] > word.index),
                len(word_seq),
            )
            go_past = float(sum(durations[entry:exit_right]))
            landing = ordered[entry].fixation
        else:
            landing = ordered[word_positions[0]].fixation

        landing_position = 0.0
        if word.width > 0:
            landing_position = float(np.clip((landing.x_px - word.x) / word.width, 0.0, 1.0))

        metrics.append(
            WordReadingMetrics(
                word_index=word.index,
                word_text=word.text,
                line_index=word.line_index,
                fixation_count=len(word_positions),
                total_fixation_duration=total,
                first_fixation_duration=first_fixation,
                gaze_duration=gaze,
                first_of_many_duration=first_of_many,
                second_pass_duration=max(0.0, total - gaze),
                go_past_duration=go_past,
                initial_landing_position=landing_position,
                initial_landing_position_char=landing_position * len(word.text),
                number_of_regressions_in=regressions_in[word.index],
                number_of_regressions_out=regressions_out[word.index],
                was_skipped=False,
                was_refixated=len(word_positions) > 1,
                first_pass_fixated=entry is not None,
            )
        )
    return metrics


def _count_regressions(word_seq: Sequence[Optional[int]], word_count: int) -> Tuple[List[int], List[int]]:
    """Regressions into and out of each word, as ``(into, out_of)``."""
    into = [0] * word_count
    out_of = [0] * word_count
    # consecutive fixations on words; unbound fixations are ignored
    on_words = [w for w in word_seq if w is not None]
    for prev_word, curr_word in zip(on_words, on_words[1:]):
        if curr_word < prev_word:
            if prev_word < word_count:
                out_of[prev_word] += 1
            if curr_word < word_count:
                into[curr_word] += 1
    return into, out_of


def _reading_order_score(word_indices: Sequence[int]) -> float:
    """Share of consecutive word pairs read left to right (1.0 = in order)."""
    if len(word_indices) < 2:
        return 1.0
    in_order = sum(1 for a, b in zip(word_indices, word_indices[1:]) if b >= a)
    return in_order / (len(word_indices) - 1)


def compute_line_metrics(
    bindings: Sequence[FixationTextBinding],
    layout: TextLayoutResult,
    word_metrics: Sequence[WordReadingMetrics],
) -> List[LineReadingMetrics]:
    """One :class:`LineReadingMetrics` per layout line, in line order."""
    by_line: Dict[int, List[FixationTextBinding]] = {}
    for b in bindings:
        if b.line_index is not None and 0 <= b.line_index < len(layout.lines):
            by_line.setdefault(b.line_index, []).append(b)

    skipped = [0] * len(layout.lines)
    for wm in word_metrics:
        if wm.was_skipped and 0 <= wm.line_index < len(skipped):
            skipped[wm.line_index] += 1

    metrics: List[LineReadingMetrics] = []
    for line in layout.lines:
        fixes = sorted(by_line.get(line.index, []), key=lambda b: b.fixation.start_sec)
        if not fixes:
            metrics.append(
                LineReadingMetrics(
                    line_index=line.index,
                    word_count=line.word_count,
                    skipped_word_count=skipped[line.index],
                )
            )
            continue
        metrics.append(
            LineReadingMetrics(
                line_index=line.index,
                word_count=line.word_count,
                fixation_count=len(fixes),
                total_fixation_duration=float(sum(b.fixation.dur_sec for b in fixes)),
                skipped_word_count=skipped[line.index],
                first_fixation_time=fixes[0].fixation.start_sec,
                last_fixation_time=fixes[-1].fixation.end_sec,
                reading_order_score=_reading_order_score(
                    [b.word_index for b in fixes if b.word_index is not None]
                ),
            )
        )
    return metrics


def classify_saccade(prev: FixationTextBinding, curr: FixationTextBinding) -> SaccadeType:
    """
    Classify the movement from ``prev`` to ``curr``.

    A move to a later line is a return sweep, to an earlier line a
    regression. Within a line the word index decides, or the horizontal
    displacement when either fixation is off the words. Without line
    information only the displacement is used.
    """
    dx = curr.fixation.x_px - prev.fixation.x_px

    if prev.line_index is not None and curr.line_index is not None:
        line_diff = curr.line_index - prev.line_index
        if line_diff > 0:
            return SaccadeType.SWEEP
        if line_diff < 0:
            return SaccadeType.REGRESSIVE
        if prev.word_index is not None and curr.word_index is not None:
            word_diff = curr.word_index - prev.word_index
            if word_diff > 0:
                return SaccadeType.PROGRESSIVE
            if word_diff < 0:
                return SaccadeType.REGRESSIVE
            return SaccadeType.UNCLASSIFIED

    if dx > 0:
        return SaccadeType.PROGRESSIVE
    if dx < 0:
        return SaccadeType.REGRESSIVE
    return SaccadeType.UNCLASSIFIED


def compute_saccade_metrics(
    bindings: Sequence[FixationTextBinding],
    screen: Optional[ScreenGeometry] = None,
) -> TextSaccadeMetrics:
    """
    Count and measure the saccades between consecutive fixations.

    Amplitudes in degrees and velocities (amplitude over the inter-fixation
    gap, gaps under 1 ms skipped) need a screen with a physical size;
    otherwise they stay 0.
    """
    if len(bindings) < 2:
        return TextSaccadeMetrics()

    ordered = sorted(bindings, key=lambda b: b.fixation.start_sec)
    angles = VisualAngleCalculator(screen) if screen is not None and screen.has_physical_size else None

    types: List[SaccadeType] = []
    amplitudes_px: List[float] = []
    amplitudes_deg: List[float] = []
    velocities: List[float] = []

    for prev, curr in zip(ordered, ordered[1:]):
        saccade = classify_saccade(prev, curr)
        types.append(saccade)

        dx = curr.fixation.x_px - prev.fixation.x_px
        dy = curr.fixation.y_px - prev.fixation.y_px
        amplitudes_px.append(float(np.hypot(dx, dy)))

        if angles is not None:
            amp_deg = angles.visual_angle_deg(dx, dy)
            if np.isfinite(amp_deg):
                amplitudes_deg.append(amp_deg)
                gap = curr.fixation.start_sec - prev.fixation.end_sec
                if gap > ComputationalConstants.MIN_SACCADE_DT_SEC:
                    velocities.append(amp_deg / gap)

    return TextSaccadeMetrics(
        total_saccades=len(types),
        progressive_saccades=types.count(SaccadeType.PROGRESSIVE),
        regressive_saccades=types.count(SaccadeType.REGRESSIVE),
        sweep_saccades=types.count(SaccadeType.SWEEP),
        mean_saccade_amplitude_px=float(np.mean(amplitudes_px)),
        mean_saccade_amplitude_deg=float(np.mean(amplitudes_deg)) if amplitudes_deg else 0.0,
        mean_saccade_velocity_deg_s=float(np.mean(velocities)) if velocities else 0.0,
        saccade_types=tuple(types),
    )


def _in_duration_range(fix: Fixation, config: TextAnalysisConfig) -> bool:
    # both bounds inclusive
    return config.min_fixation_duration_sec <= fix.dur_sec <= config.max_fixation_duration_sec


def compute_reading_metrics(
    fixations: Sequence[Fixation],
    layout: TextLayoutResult,
    config: TextAnalysisConfig,
    screen: Optional[ScreenGeometry] = None,
    corrected: Optional[Sequence[Fixation]] = None,
    drift_correction: Optional[DriftCorrectionResult] = None,
) -> ReadingAnalysisResult:
    """
    Full reading analysis of one trial.

    Fixations outside the configured duration range are dropped first,
    together with their drift corrected copies. Those come from
    ``corrected`` or, when it is not given, from ``drift_correction``,
    which is also recorded on the result. An empty layout or no fixations
    give an empty result.

    Raises:
        InvalidConfigurationError: for an invalid ``config``.
    """
    config.validate()
    if corrected is None and drift_correction is not None:
        corrected = drift_correction.corrected_fixations
    if corrected is not None and len(corrected) != len(fixations):
        raise ValueError(
            f"corrected has {len(corrected)} fixations, expected {len(fixations)}"
        )
    if layout.is_empty or len(fixations) == 0:
        return ReadingAnalysisResult(drift_correction=drift_correction)

    keep = [i for i, f in enumerate(fixations) if _in_duration_range(f, config)]
    filtered = [fixations[i] for i in keep]
    filtered_corrected = [corrected[i] for i in keep] if corrected is not None else None

    bindings = bind_fixations_to_text(filtered, layout, config.max_fixation_distance_px, filtered_corrected)
    word_metrics = compute_word_metrics(bindings, layout)
    line_metrics = compute_line_metrics(bindings, layout, word_metrics)
    saccade_metrics = compute_saccade_metrics(bindings, screen)

    result = ReadingAnalysisResult(
        word_metrics=tuple(word_metrics),
        line_metrics=tuple(line_metrics),
        saccade_metrics=saccade_metrics,
        bindings=tuple(bindings),
        drift_correction=drift_correction,
        total_fixations=len(filtered),
        fixations_on_words=sum(1 for b in bindings if b.word_index is not None),
    )
    logger.debug(
        "Reading metrics: %s fixations kept of %s, %s on words",
        result.total_fixations,
        len(fixations),
        result.fixations_on_words,
    )
    return result
