"""Domain services - pure business logic, no pixel access."""

from .quality_scoring import rectangle_quality, score_quality
from .stitching_rules import (
    matched_keywords,
    plan_stitching,
    stitching_confidence,
)

__all__ = [
    'rectangle_quality',
    'score_quality',
    'matched_keywords',
    'plan_stitching',
    'stitching_confidence',
]
