"""
Tests for text binding and word, line and saccade reading metrics.

Layout used throughout (``one_line_layout``): "aa bb cc dd" with
aa [50, 70], bb [80, 100], cc [110, 130], dd [140, 160], y 50..70.
"""
import dataclasses
import math

import pytest

from reading_gaze.config import TextAnalysisConfig, TextLayoutConfig
from reading_gaze.domain.reading import DriftCorrectionMethod, FixationTextBinding, SaccadeType
from reading_gaze.drift import apply_slice
from reading_gaze.errors import InvalidConfigurationError
from reading_gaze.layout import compute_layout
from reading_gaze.metrics import (
    bind_fixations_to_text,
    classify_saccade,
    compute_line_metrics,
    compute_reading_metrics,
    compute_saccade_metrics,
    compute_word_metrics,
)


@pytest.fixture
def reading_sequence(fixation):
    """aa, bb, bb, dd, cc (regression), dd."""
    return [
        fixation(0.0, 0.2, 60),
        fixation(0.25, 0.1, 85),
        fixation(0.4, 0.15, 95),
        fixation(0.6, 0.2, 150),
        fixation(0.85, 0.25, 120),
        fixation(1.15, 0.3, 155),
    ]


class TestBinding:
    def test_binds_inside_word(self, one_line_layout, reading_sequence):
        bindings = bind_fixations_to_text(reading_sequence, one_line_layout)

        assert [b.word_index for b in bindings] == [0, 1, 1, 3, 2, 3]
        assert all(b.line_index == 0 for b in bindings)
        assert [b.sequence_index for b in bindings] == list(range(6))
        assert all(b.distance_to_word == 0.0 for b in bindings)

    def test_beyond_cutoff_binds_line_only(self, one_line_layout, fixation):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 300), fixation(0.3, 0.2, 100, 500)], one_line_layout)

        assert [b.word_index for b in bindings] == [None, None]
        assert [b.line_index for b in bindings] == [0, 0]
        assert bindings[0].distance_to_word == pytest.approx(140.0)

    def test_cutoff_is_inclusive(self, one_line_layout, fixation):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 210)], one_line_layout, max_distance_px=50)
        assert bindings[0].word_index == 3

    def test_box_distance_beats_centre_distance(self, measurer, fixation):
        # "a" spans x 50..60 (centre 55), "verylongword" 70..190 (centre 130)
        layout = compute_layout(TextLayoutConfig(text="a verylongword", font_size_px=20), measurer=measurer)
        binding = bind_fixations_to_text([fixation(0.0, 0.2, 66)], layout)[0]

        assert binding.word_index == 1
        assert binding.distance_to_word == pytest.approx(4.0)

    def test_tie_goes_to_lower_index(self, one_line_layout, fixation):
        # 5 px from both aa and bb, 15 px from both centres
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 75)], one_line_layout)
        assert bindings[0].word_index == 0

    def test_uses_corrected_positions(self, one_line_layout, fixation):
        original = [fixation(0.0, 0.2, 60, 300)]
        corrected = [fixation(0.0, 0.2, 60, 60)]
        binding = bind_fixations_to_text(original, one_line_layout, corrected=corrected)[0]

        assert binding.word_index == 0
        assert binding.fixation.y_px == 300
        assert binding.corrected_y_px == 60

    def test_corrected_length_mismatch_raises(self, one_line_layout, fixation):
        with pytest.raises(ValueError):
            bind_fixations_to_text([fixation(0.0, 0.2, 60)], one_line_layout, corrected=[])

    def test_empty_layout(self, fixation):
        empty = compute_layout(TextLayoutConfig(text=""))
        binding = bind_fixations_to_text([fixation(0.0, 0.2, 60)], empty)[0]
        assert binding.word_index is None
        assert binding.line_index is None
        assert math.isinf(binding.distance_to_word)


class TestWordMetrics:
    """First pass, go-past and regressions on a reading sequence with one regression."""

    @pytest.fixture
    def metrics(self, one_line_layout, reading_sequence):
        bindings = bind_fixations_to_text(reading_sequence, one_line_layout)
        return compute_word_metrics(bindings, one_line_layout)

    def test_one_entry_per_word(self, metrics):
        assert [m.word_text for m in metrics] == ["aa", "bb", "cc", "dd"]
        assert [m.fixation_count for m in metrics] == [1, 2, 1, 2]

    def test_single_fixation_word(self, metrics):
        aa = metrics[0]
        assert aa.first_fixation_duration == pytest.approx(0.2)
        assert aa.gaze_duration == pytest.approx(0.2)
        assert aa.go_past_duration == pytest.approx(0.2)
        assert aa.second_pass_duration == pytest.approx(0.0)
        assert aa.first_of_many_duration == 0.0
        assert aa.initial_landing_position == pytest.approx(0.5)
        assert aa.initial_landing_position_char == pytest.approx(1.0)

    def test_refixated_word(self, metrics):
        bb = metrics[1]
        assert bb.first_fixation_duration == pytest.approx(0.1)
        assert bb.gaze_duration == pytest.approx(0.25)
        assert bb.first_of_many_duration == pytest.approx(0.1)
        assert bb.go_past_duration == pytest.approx(0.25)
        assert bb.was_refixated
        assert bb.initial_landing_position == pytest.approx(0.25)

    def test_word_first_fixated_after_skipping_it(self, metrics):
        cc = metrics[2]
        assert not cc.first_pass_fixated
        assert cc.first_fixation_duration == 0.0
        assert cc.gaze_duration == 0.0
        assert cc.go_past_duration == 0.0
        assert cc.second_pass_duration == pytest.approx(0.25)
        assert not cc.was_skipped
        assert cc.number_of_regressions_in == 1

    def test_go_past_includes_regression(self, metrics):
        dd = metrics[3]
        assert dd.first_pass_fixated
        assert dd.gaze_duration == pytest.approx(0.2)
        assert dd.go_past_duration == pytest.approx(0.75)
        assert dd.second_pass_duration == pytest.approx(0.3)
        assert dd.number_of_regressions_out == 1
        assert dd.number_of_regressions_in == 0

    def test_total_duration_splits_into_passes(self, metrics):
        for m in metrics:
            assert m.gaze_duration + m.second_pass_duration == pytest.approx(m.total_fixation_duration)

    def test_skipped_words(self, one_line_layout, fixation):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 60), fixation(0.3, 0.2, 150)], one_line_layout)
        metrics = compute_word_metrics(bindings, one_line_layout)
        assert [m.was_skipped for m in metrics] == [False, True, True, False]

    def test_no_bindings(self, one_line_layout):
        metrics = compute_word_metrics([], one_line_layout)
        assert all(m.was_skipped for m in metrics)

    def test_unbound_fixation_ends_first_pass(self, one_line_layout, fixation):
        sequence = [fixation(0.0, 0.2, 60), fixation(0.3, 0.1, 60, 400), fixation(0.5, 0.2, 60)]
        bindings = bind_fixations_to_text(sequence, one_line_layout)
        aa = compute_word_metrics(bindings, one_line_layout)[0]

        assert aa.gaze_duration == pytest.approx(0.2)
        assert aa.second_pass_duration == pytest.approx(0.2)
        # nothing to the right was fixated: go-past runs to the end
        assert aa.go_past_duration == pytest.approx(0.5)


class TestLineMetrics:
    def test_reading_sequence(self, one_line_layout, reading_sequence):
        bindings = bind_fixations_to_text(reading_sequence, one_line_layout)
        words = compute_word_metrics(bindings, one_line_layout)
        line = compute_line_metrics(bindings, one_line_layout, words)[0]

        assert line.word_count == 4
        assert line.fixation_count == 6
        assert line.total_fixation_duration == pytest.approx(1.2)
        assert line.first_fixation_time == 0.0
        assert line.last_fixation_time == pytest.approx(1.45)
        assert line.skipped_word_count == 0
        assert line.reading_order_score == pytest.approx(0.8)

    def test_unread_line(self, two_line_layout, fixation):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 60, 60)], two_line_layout)
        words = compute_word_metrics(bindings, two_line_layout)
        lines = compute_line_metrics(bindings, two_line_layout, words)

        assert lines[0].skipped_word_count == 1
        assert lines[1].fixation_count == 0
        assert lines[1].skipped_word_count == 2
        assert lines[1].reading_order_score == 1.0


class TestSaccades:
    @staticmethod
    def bind(fix, word=None, line=None, seq=0):
        return FixationTextBinding(fixation=fix, sequence_index=seq, word_index=word, line_index=line)

    def test_classification(self, fixation):
        a = fixation(0.0, 0.2, 100)
        b = fixation(0.3, 0.2, 50)
        assert classify_saccade(self.bind(a, 3, 0), self.bind(b, 0, 1)) == SaccadeType.SWEEP
        assert classify_saccade(self.bind(a, 3, 1), self.bind(b, 5, 0)) == SaccadeType.REGRESSIVE
        assert classify_saccade(self.bind(a, 3, 0), self.bind(b, 5, 0)) == SaccadeType.PROGRESSIVE
        assert classify_saccade(self.bind(a, 3, 0), self.bind(b, None, 0)) == SaccadeType.REGRESSIVE
        assert classify_saccade(self.bind(b), self.bind(a)) == SaccadeType.PROGRESSIVE
        assert classify_saccade(self.bind(a, 3, 0), self.bind(b, 3, 0)) == SaccadeType.UNCLASSIFIED

    def test_counts(self, one_line_layout, reading_sequence):
        bindings = bind_fixations_to_text(reading_sequence, one_line_layout)
        metrics = compute_saccade_metrics(bindings)

        assert metrics.total_saccades == 5
        assert metrics.progressive_saccades == 3
        assert metrics.regressive_saccades == 1
        assert metrics.sweep_saccades == 0
        assert metrics.saccade_types[1] == SaccadeType.UNCLASSIFIED
        assert metrics.mean_saccade_amplitude_px == pytest.approx(31.0)
        assert metrics.mean_saccade_amplitude_deg == 0.0

    def test_degrees_need_physical_screen(self, one_line_layout, fixation, physical_screen, screen):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 100), fixation(0.25, 0.2, 200)], one_line_layout)
        expected_deg = math.degrees(math.atan2(50.0, 600.0))

        metrics = compute_saccade_metrics(bindings, physical_screen)
        assert metrics.mean_saccade_amplitude_deg == pytest.approx(expected_deg)
        assert metrics.mean_saccade_velocity_deg_s == pytest.approx(expected_deg / 0.05)

        assert compute_saccade_metrics(bindings, screen).mean_saccade_amplitude_deg == 0.0

    def test_tiny_gap_has_no_velocity(self, one_line_layout, fixation, physical_screen):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 100), fixation(0.2005, 0.2, 200)], one_line_layout)
        metrics = compute_saccade_metrics(bindings, physical_screen)
        assert metrics.mean_saccade_amplitude_deg > 0
        assert metrics.mean_saccade_velocity_deg_s == 0.0

    def test_single_fixation(self, one_line_layout, fixation):
        bindings = bind_fixations_to_text([fixation(0.0, 0.2, 60)], one_line_layout)
        assert compute_saccade_metrics(bindings).total_saccades == 0


class TestComputeReadingMetrics:
    def test_duration_filter(self, one_line_layout, reading_sequence, fixation):
        fixations = reading_sequence + [fixation(2.0, 0.01, 60), fixation(3.0, 2.0, 60)]
        result = compute_reading_metrics(fixations, one_line_layout, TextAnalysisConfig())

        assert result.total_fixations == 6
        assert result.fixations_on_words == 6
        assert result.fixations_on_words_percent == pytest.approx(100.0)
        assert len(result.word_metrics) == 4
        assert len(result.line_metrics) == 1
        assert result.saccade_metrics.total_saccades == 5

    def test_corrected_positions_follow_the_filter(self, one_line_layout, fixation):
        fixations = [fixation(0.0, 0.01, 60, 400), fixation(0.1, 0.2, 150, 400)]
        corrected = [fixation(0.0, 0.01, 60, 60), fixation(0.1, 0.2, 150, 60)]
        result = compute_reading_metrics(fixations, one_line_layout, TextAnalysisConfig(), corrected=corrected)

        assert result.total_fixations == 1
        assert result.bindings[0].word_index == 3

    def test_off_text_fixations_lower_percentage(self, one_line_layout, fixation):
        fixations = [fixation(0.0, 0.2, 60), fixation(0.3, 0.2, 60, 600)]
        result = compute_reading_metrics(fixations, one_line_layout, TextAnalysisConfig())
        assert result.fixations_on_words_percent == pytest.approx(50.0)

    def test_empty_inputs(self, one_line_layout):
        result = compute_reading_metrics([], one_line_layout, TextAnalysisConfig())
        assert result.total_fixations == 0
        assert result.word_metrics == ()
        assert result.fixations_on_words_percent == 0.0

    def test_invalid_config_raises(self, one_line_layout, reading_sequence):
        cfg = TextAnalysisConfig(min_fixation_duration_sec=1.0, max_fixation_duration_sec=0.5)
        with pytest.raises(InvalidConfigurationError):
            compute_reading_metrics(reading_sequence, one_line_layout, cfg)

    def test_drift_correction_is_recorded_and_used(self, one_line_layout, fixation):
        fixations = [fixation(0.0, 0.2, 60, 100), fixation(0.3, 0.2, 150, 100)]
        drift = apply_slice(fixations, one_line_layout)
        result = compute_reading_metrics(fixations, one_line_layout, TextAnalysisConfig(), drift_correction=drift)

        assert result.drift_correction is drift
        assert result.drift_correction.method == DriftCorrectionMethod.SLICE
        assert [b.word_index for b in result.bindings] == [0, 3]
        # line centre of the 30 px line starting at y=50
        assert [b.corrected_y_px for b in result.bindings] == [65.0, 65.0]

    def test_empty_result_keeps_drift_correction(self, one_line_layout):
        drift = apply_slice([], one_line_layout)
        result = compute_reading_metrics([], one_line_layout, TextAnalysisConfig(), drift_correction=drift)
        assert result.drift_correction is drift

    def test_results_are_frozen(self, one_line_layout, reading_sequence):
        result = compute_reading_metrics(reading_sequence, one_line_layout, TextAnalysisConfig())

        with pytest.raises(dataclasses.FrozenInstanceError):
            result.drift_correction = None
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.word_metrics[0].fixation_count = 99
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.line_metrics[0].fixation_count = 99
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.saccade_metrics.total_saccades = 0
