"""Geometry helpers for gaze calculations."""
from __future__ import annotations

import math

from ..config import ScreenGeometry


class VisualAngleCalculator:
    """Convert on-screen pixel displacement to visual angles."""

    def __init__(self, screen: ScreenGeometry) -> None:
        self.screen = screen

    @property
    def available(self) -> bool:
        return self.screen.has_physical_size

    def displacement_mm(self, dx_px: float, dy_px: float) -> float:
        dx_mm = float(dx_px) * self.screen.mm_per_px_x
        dy_mm = float(dy_px) * self.screen.mm_per_px_y
        return math.hypot(dx_mm, dy_mm)

    def visual_angle_deg(self, dx_px: float, dy_px: float, distance_m: float | None = None) -> float:
        """Visual angle of a displacement seen from ``distance_m``.

        Falls back to the screen's viewing distance when ``distance_m`` is
        missing or not positive. Returns ``inf`` when no distance is known.
        """
        if distance_m is None or not math.isfinite(distance_m) or distance_m <= 0:
            distance_m = self.screen.distance_m
        if not math.isfinite(distance_m) or distance_m <= 0:
            return math.inf

        s_mm = self.displacement_mm(dx_px, dy_px)
        theta_rad = math.atan2(s_mm, distance_m * 1000.0)
        return math.degrees(theta_rad)
