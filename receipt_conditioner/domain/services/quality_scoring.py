"""Quality scoring - turns image measurements into a QualityAnalysis."""

from __future__ import annotations

from ...config import (
    ISSUE_BLURRY,
    ISSUE_LOW_CONFIDENCE_DETECTION,
    ISSUE_LOW_LIGHTING,
    ISSUE_NO_DOCUMENT,
    ISSUE_OVEREXPOSED,
    ISSUE_UNUSUAL_ASPECT,
)
from ..entities.results import QualityAnalysis
from ..value_objects.config import ConditioningConfig
from ..value_objects.geometry import Quadrilateral

# Confidence deductions
LOW_LIGHT_PENALTY = 0.2
OVEREXPOSED_PENALTY = 0.1
BLUR_PENALTY = 0.25
NO_DOCUMENT_PENALTY = 0.15
LOW_CONFIDENCE_DETECTION_PENALTY = 0.10
UNUSUAL_ASPECT_PENALTY = 0.05

# Rectangle quality multipliers
SMALL_AREA_THRESHOLD = 0.1
SMALL_AREA_FACTOR = 0.5
RECT_ASPECT_RANGE = (0.33, 3.0)
RECT_ASPECT_FACTOR = 0.7
IRREGULAR_EDGE_TOLERANCE = 0.5
IRREGULAR_SHAPE_FACTOR = 0.8


def rectangle_quality(quad: Quadrilateral) -> float:
    """Score how plausible a detected boundary is as a receipt.

    Starts from the detector's own confidence and applies multiplicative
    penalties for a small area, an extreme aspect ratio and uneven edges.
    """
    quality = quad.confidence

    if quad.relative_area < SMALL_AREA_THRESHOLD:
        quality *= SMALL_AREA_FACTOR

    low, high = RECT_ASPECT_RANGE
    aspect = quad.aspect_ratio
    if aspect > high or aspect < low:
        quality *= RECT_ASPECT_FACTOR

    edges = quad.edge_lengths
    mean_edge = sum(edges) / len(edges)
    deviation = sum(abs(e - mean_edge) for e in edges) / len(edges)
    if deviation > mean_edge * IRREGULAR_EDGE_TOLERANCE:
        quality *= IRREGULAR_SHAPE_FACTOR

    return quality


def score_quality(
    luminance: float,
    sharpness: float,
    aspect_ratio: float,
    quad: Quadrilateral | None,
    config: ConditioningConfig | None = None
) -> QualityAnalysis:
    """Combine measurements into a confidence score and issue list.

    Args:
        luminance: Mean luminance of the central region in [0, 1]
        sharpness: Normalized edge response in [0, 1]
        aspect_ratio: Frame width divided by height
        quad: Detected document boundary, or None
        config: Thresholds (defaults when omitted)

    Returns:
        Analysis with confidence clamped to [0, 1]
    """
    config = config or ConditioningConfig()
    issues: list[str] = []
    confidence = 1.0

    if luminance < config.low_light_threshold:
        issues.append(ISSUE_LOW_LIGHTING)
        confidence -= LOW_LIGHT_PENALTY
    elif luminance > config.overexposed_threshold:
        issues.append(ISSUE_OVEREXPOSED)
        confidence -= OVEREXPOSED_PENALTY

    if sharpness < config.blur_threshold:
        issues.append(ISSUE_BLURRY)
        confidence -= BLUR_PENALTY

    if quad is None:
        issues.append(ISSUE_NO_DOCUMENT)
        confidence -= NO_DOCUMENT_PENALTY
    elif rectangle_quality(quad) < config.rectangle_quality_threshold:
        issues.append(ISSUE_LOW_CONFIDENCE_DETECTION)
        confidence -= LOW_CONFIDENCE_DETECTION_PENALTY

    if aspect_ratio > config.max_frame_aspect_ratio or aspect_ratio < config.min_frame_aspect_ratio:
        issues.append(ISSUE_UNUSUAL_ASPECT)
        confidence -= UNUSUAL_ASPECT_PENALTY

    confidence = max(0.0, min(1.0, confidence))

    return QualityAnalysis(
        confidence=confidence,
        issues=tuple(issues),
        detected_quadrilateral=quad,
    )
