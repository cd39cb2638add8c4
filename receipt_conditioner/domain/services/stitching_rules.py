"""Stitching rules - decide whether a batch is one receipt and how sure we are."""

from __future__ import annotations

from typing import Iterable, Sequence

from ...config import (
    REASON_CONTINUATION,
    REASON_INVALID_COUNT,
    REASON_MISSING_CONTENT,
    REASON_NO_PATTERN,
    RECEIPT_KEYWORDS,
)
from ..entities.receipt_part import ReceiptPartAnalysis, StitchingPlan

BASE_STITCH_CONFIDENCE = 0.8
ASPECT_SPREAD_TOLERANCE = 0.3
ASPECT_SPREAD_FACTOR = 0.85
KEYWORD_BONUS = 1.1
KEYWORD_BONUS_MIN_MATCHES = 2


def matched_keywords(
    texts: Iterable[str],
    keywords: Sequence[str] = RECEIPT_KEYWORDS
) -> set[str]:
    """Distinct receipt keywords found across the texts (case-insensitive)."""
    samples = [t.lower() for t in texts]
    return {kw for kw in keywords if any(kw in s for s in samples)}


def has_text_continuation(parts: Sequence[ReceiptPartAnalysis]) -> bool:
    """True if any sampled text carries a receipt keyword."""
    return bool(matched_keywords(p.sampled_text for p in parts))


def plan_stitching(
    parts: Sequence[ReceiptPartAnalysis],
    min_parts: int = 2,
    max_parts: int = 4
) -> StitchingPlan:
    """Decide whether the parts are segments of one tall receipt.

    Checks, in order: part count, receipt content in every part, portrait
    orientation of every part, and a receipt keyword in at least one sample.
    Stitch order is the capture order; no visual alignment is attempted.
    """
    if len(parts) < min_parts or len(parts) > max_parts:
        return StitchingPlan.reject(REASON_INVALID_COUNT)

    if not all(p.has_receipt_content for p in parts):
        return StitchingPlan.reject(REASON_MISSING_CONTENT)

    if not all(p.aspect_ratio < 1.0 for p in parts):
        return StitchingPlan.reject(REASON_NO_PATTERN)

    if not has_text_continuation(parts):
        return StitchingPlan.reject(REASON_NO_PATTERN)

    return StitchingPlan(
        should_stitch=True,
        reason=REASON_CONTINUATION,
        ordered_parts=tuple(sorted(parts, key=lambda p: p.original_index)),
    )


def aspect_ratio_spread(ratios: Sequence[float]) -> float:
    """Mean absolute deviation of the ratios from their mean."""
    if not ratios:
        return 0.0
    mean = sum(ratios) / len(ratios)
    return sum(abs(r - mean) for r in ratios) / len(ratios)


def stitching_confidence(parts: Sequence[ReceiptPartAnalysis]) -> float:
    """Confidence that a stitched composite is a faithful single receipt."""
    if not parts:
        return 0.0

    confidence = BASE_STITCH_CONFIDENCE

    content_ratio = sum(1 for p in parts if p.has_receipt_content) / len(parts)
    if content_ratio < 1.0:
        confidence *= content_ratio

    ratios = [p.aspect_ratio for p in parts]
    mean_ratio = sum(ratios) / len(ratios)
    if aspect_ratio_spread(ratios) > ASPECT_SPREAD_TOLERANCE * mean_ratio:
        confidence *= ASPECT_SPREAD_FACTOR

    if len(matched_keywords(p.sampled_text for p in parts)) >= KEYWORD_BONUS_MIN_MATCHES:
        confidence = min(1.0, confidence * KEYWORD_BONUS)

    return confidence
