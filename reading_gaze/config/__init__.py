"""Configuration and constants for reading analysis."""

from .config import (
    FixationDetectionConfig,
    ScreenGeometry,
    TextAnalysisConfig,
    TextLayoutConfig,
)
from .constants import ComputationalConstants, PhysicalConstants

__all__ = [
    "FixationDetectionConfig",
    "ScreenGeometry",
    "TextAnalysisConfig",
    "TextLayoutConfig",
    "ComputationalConstants",
    "PhysicalConstants",
]
