from typing import List

import pytest

from reading_gaze.config import ScreenGeometry, TextLayoutConfig
from reading_gaze.domain.gaze import Fixation, GazeSample, RawGazeSample
from reading_gaze.layout import MonospaceMeasurer, compute_layout


def make_raw_track(points, start=0.0, step=0.01, repeat=15, distance_m=0.6) -> List[RawGazeSample]:
    """Stationary gaze at each normalised point for ``repeat`` samples, back to back."""
    samples: List[RawGazeSample] = []
    idx = 0
    for x, y in points:
        for _ in range(repeat):
            samples.append(RawGazeSample(start + idx * step, x, y, distance_m=distance_m))
            idx += 1
    return samples


@pytest.fixture
def screen() -> ScreenGeometry:
    return ScreenGeometry(width_px=1000, height_px=1000)


@pytest.fixture
def physical_screen() -> ScreenGeometry:
    # 0.5 mm per pixel on both axes
    return ScreenGeometry(width_px=1000, height_px=1000, width_mm=500.0, height_mm=500.0, distance_m=0.6)


@pytest.fixture
def scenario_samples() -> List[GazeSample]:
    return [
        GazeSample(0.0, 0.1, 0.1),
        GazeSample(0.05, 0.1, 0.1),
        GazeSample(0.1, 0.1, 0.1),
        GazeSample(0.2, 0.5, 0.5),
    ]


@pytest.fixture
def measurer() -> MonospaceMeasurer:
    # 0.5 em per character: font 20 -> 10 px per character
    return MonospaceMeasurer()


@pytest.fixture
def two_line_layout(measurer):
    """
    "alpha beta" on line 0 (y=50, centre 65) and "gamma delta" on line 1
    (y=80, centre 95). Words are 20 px high, characters 10 px wide.
    """
    cfg = TextLayoutConfig(
        text="alpha beta gamma delta",
        font_size_px=20,
        line_spacing=1.5,
        max_width_px=120,
        padding_left=50,
        padding_top=50,
    )
    return compute_layout(cfg, measurer=measurer)


@pytest.fixture
def one_line_layout(measurer):
    """
    "aa bb cc dd" on a single line: aa [50, 70], bb [80, 100],
    cc [110, 130], dd [140, 160]; words span y 50..70.
    """
    cfg = TextLayoutConfig(text="aa bb cc dd", font_size_px=20, max_width_px=800)
    return compute_layout(cfg, measurer=measurer)


@pytest.fixture
def fixation():
    def _make(start, dur, x, y=60.0) -> Fixation:
        return Fixation(start_sec=start, dur_sec=dur, x_px=x, y_px=y)

    return _make
