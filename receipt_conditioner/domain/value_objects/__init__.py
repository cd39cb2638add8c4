"""Value objects - immutable data with validation."""

from .geometry import BoundingBox, CoordinateOrigin, Point, Quadrilateral
from .config import (
    ENHANCEMENT_PRESETS,
    ConditioningConfig,
    EnhancementConfig,
    EnhancementPreset,
)

__all__ = [
    'Point',
    'BoundingBox',
    'Quadrilateral',
    'CoordinateOrigin',
    'ConditioningConfig',
    'EnhancementConfig',
    'EnhancementPreset',
    'ENHANCEMENT_PRESETS',
]
