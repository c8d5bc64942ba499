"""
Tests for I-VT detection, angular velocities and fixation merging.
"""
import math

import numpy as np
import pytest

from reading_gaze.config import FixationDetectionConfig, ScreenGeometry
from reading_gaze.detection import (
    compute_angular_velocities,
    detect_fixations,
    detect_ivt,
    join_fixations,
    merge_by_time,
)
from reading_gaze.detection.geometry import VisualAngleCalculator
from reading_gaze.domain.gaze import Fixation, RawGazeSample

from conftest import make_raw_track


class TestAngularVelocity:
    def test_first_sample_is_infinite(self, physical_screen):
        samples = make_raw_track([(0.5, 0.5)], repeat=3)
        vel = compute_angular_velocities(samples, physical_screen)
        assert math.isinf(vel[0])
        assert vel[1] == pytest.approx(0.0)
        assert vel[2] == pytest.approx(0.0)

    def test_known_velocity(self, physical_screen):
        # 20 px at 0.5 mm/px = 10 mm seen from 600 mm, over 10 ms
        samples = [RawGazeSample(0.0, 0.5, 0.5, 0.6), RawGazeSample(0.01, 0.52, 0.5, 0.6)]
        vel = compute_angular_velocities(samples, physical_screen)
        expected = math.degrees(math.atan2(10.0, 600.0)) / 0.01
        assert vel[1] == pytest.approx(expected)

    def test_large_time_step_is_infinite(self, physical_screen):
        samples = [RawGazeSample(0.0, 0.5, 0.5, 0.6), RawGazeSample(0.5, 0.5, 0.5, 0.6)]
        assert math.isinf(compute_angular_velocities(samples, physical_screen)[1])

    def test_velocity_above_cap_is_infinite(self, physical_screen):
        samples = [RawGazeSample(0.0, 0.2, 0.5, 0.6), RawGazeSample(0.01, 0.5, 0.5, 0.6)]
        assert math.isinf(compute_angular_velocities(samples, physical_screen)[1])

    def test_missing_distance_uses_screen_distance(self, physical_screen):
        samples = [RawGazeSample(0.0, 0.5, 0.5, 0.0), RawGazeSample(0.01, 0.52, 0.5, 0.0)]
        vel = compute_angular_velocities(samples, physical_screen)
        assert np.isfinite(vel[1])


class TestVisualAngleCalculator:
    def test_angle(self, physical_screen):
        calc = VisualAngleCalculator(physical_screen)
        assert calc.available
        assert calc.visual_angle_deg(100, 0) == pytest.approx(math.degrees(math.atan2(50.0, 600.0)))

    def test_not_available_without_physical_size(self, screen):
        assert not VisualAngleCalculator(screen).available


class TestDetectIvt:
    def test_two_stable_periods(self, physical_screen):
        samples = make_raw_track([(0.2, 0.5), (0.5, 0.5)], repeat=21)
        fixations = detect_ivt(samples, physical_screen, velocity_threshold_deg_per_sec=30, min_fix_dur_sec=0.08)

        assert len(fixations) == 2
        assert fixations[0].start_sec == 0.0
        assert fixations[0].dur_sec == pytest.approx(0.2)
        assert fixations[0].x_px == pytest.approx(200.0)
        assert fixations[1].start_sec == pytest.approx(0.21)
        assert fixations[1].x_px == pytest.approx(500.0)

    def test_requires_physical_screen_size(self, screen):
        samples = make_raw_track([(0.2, 0.5)], repeat=21)
        assert detect_ivt(samples, screen) == []

    def test_short_runs_are_dropped(self, physical_screen):
        samples = make_raw_track([(0.2, 0.5)], repeat=5)
        assert detect_ivt(samples, physical_screen, min_fix_dur_sec=0.08) == []

    def test_detect_fixations_dispatches_to_ivt(self, physical_screen):
        samples = make_raw_track([(0.2, 0.5), (0.5, 0.5)], repeat=21)
        cfg = FixationDetectionConfig(algorithm="ivt", ivt_join="none")
        assert len(detect_fixations(samples, physical_screen, cfg)) == 2


class TestMerge:
    def test_merge_by_time_weights_by_duration(self):
        fixations = [
            Fixation(0.0, 0.1, 100.0, 100.0),
            Fixation(0.15, 0.3, 200.0, 100.0),
            Fixation(1.0, 0.1, 500.0, 100.0),
        ]
        merged = merge_by_time(fixations, 0.075)

        assert len(merged) == 2
        assert merged[0].start_sec == 0.0
        assert merged[0].dur_sec == pytest.approx(0.45)
        assert merged[0].x_px == pytest.approx(175.0)
        assert merged[1] == fixations[2]

    def test_merge_by_time_empty(self):
        assert merge_by_time([], 0.075) == []

    def test_join_none_sorts_only(self, physical_screen):
        fixations = [Fixation(1.0, 0.1, 0.0, 0.0), Fixation(0.0, 0.1, 0.0, 0.0)]
        joined = join_fixations(fixations, [], physical_screen, "none", 0.075, 30)
        assert [f.start_sec for f in joined] == [0.0, 1.0]

    def test_join_time_angle(self, physical_screen):
        near = [Fixation(0.0, 0.1, 100.0, 100.0), Fixation(0.15, 0.1, 200.0, 100.0)]
        far = [Fixation(0.0, 0.1, 0.0, 100.0), Fixation(0.15, 0.1, 1000.0, 100.0)]

        # 100 px -> 50 mm -> ~4.8 deg; 1000 px -> 500 mm -> ~39.8 deg
        assert len(join_fixations(near, [], physical_screen, "time_angle", 0.075, 30)) == 1
        assert len(join_fixations(far, [], physical_screen, "time_angle", 0.075, 30)) == 2
        assert len(join_fixations(far, [], physical_screen, "time", 0.075, 30)) == 1

    def test_join_time_angle_without_physical_size(self, screen):
        near = [Fixation(0.0, 0.1, 100.0, 100.0), Fixation(0.15, 0.1, 101.0, 100.0)]
        assert len(join_fixations(near, [], screen, "time_angle", 0.075, 30)) == 2

    def test_unknown_join_raises(self, physical_screen):
        fixations = [Fixation(0.0, 0.1, 0.0, 0.0), Fixation(0.2, 0.1, 0.0, 0.0)]
        with pytest.raises(ValueError):
            join_fixations(fixations, [], physical_screen, "space", 0.075, 30)

    def test_default_ivt_join_merges_across_short_gap(self):
        screen = ScreenGeometry(1000, 1000, 500.0, 500.0)
        samples = make_raw_track([(0.2, 0.5)], repeat=12)
        # one sample far off to the right, then back
        samples += [RawGazeSample(0.12, 0.9, 0.5, 0.6)]
        samples += make_raw_track([(0.21, 0.5)], start=0.13, repeat=12)

        split = detect_fixations(samples, screen, FixationDetectionConfig(algorithm="ivt", ivt_join="none"))
        joined = detect_fixations(samples, screen, FixationDetectionConfig(algorithm="ivt"))

        assert len(split) == 2
        assert len(joined) == 1
