"""Entities describing the parts of a multi-image batch."""

from __future__ import annotations

from dataclasses import dataclass

from ...config import PLACEHOLDER_DOMINANT_COLORS
from .image import RawImage


@dataclass(frozen=True, slots=True)
class ReceiptPartAnalysis:
    """Per-image findings used to decide whether a batch is one receipt."""
    image: RawImage
    original_index: int
    has_receipt_content: bool
    sampled_text: str
    aspect_ratio: float
    region_count: int = 0
    dominant_colors: tuple[tuple[int, int, int], ...] = PLACEHOLDER_DOMINANT_COLORS


@dataclass(frozen=True, slots=True)
class StitchingPlan:
    """Decision on whether to merge a batch into one image."""
    should_stitch: bool
    reason: str
    ordered_parts: tuple[ReceiptPartAnalysis, ...] | None = None

    @classmethod
    def reject(cls, reason: str) -> StitchingPlan:
        return cls(should_stitch=False, reason=reason)
