"""Domain layer - value objects, entities and pure scoring rules."""

from .entities import (
    MultiPartResult,
    ProcessingResult,
    QualityAnalysis,
    RawImage,
    ReceiptPartAnalysis,
    StitchingPlan,
)
from .value_objects import (
    ConditioningConfig,
    CoordinateOrigin,
    EnhancementConfig,
    EnhancementPreset,
    Point,
    Quadrilateral,
)

__all__ = [
    # Entities
    'RawImage',
    'QualityAnalysis',
    'ReceiptPartAnalysis',
    'StitchingPlan',
    'MultiPartResult',
    'ProcessingResult',
    # Value Objects
    'ConditioningConfig',
    'CoordinateOrigin',
    'EnhancementConfig',
    'EnhancementPreset',
    'Point',
    'Quadrilateral',
]
