"""Result entities handed back to callers."""

from __future__ import annotations

from dataclasses import dataclass, field

from ...config import (
    ISSUE_LOW_CONFIDENCE_STITCH,
    ISSUE_MESSAGES,
    ProcessingType,
)
from ...exceptions import ValidationError
from ..value_objects.geometry import Quadrilateral
from .image import RawImage

# Confidence below which a stitched composite is flagged
LOW_STITCH_CONFIDENCE = 0.7


@dataclass(frozen=True, slots=True)
class QualityAnalysis:
    """Diagnostics for a single image."""
    confidence: float
    issues: tuple[str, ...] = ()
    detected_quadrilateral: Quadrilateral | None = None

    @property
    def can_adjust(self) -> bool:
        """Manual corner adjustment is offered only when a boundary was found."""
        return self.detected_quadrilateral is not None

    @property
    def issue_messages(self) -> list[str]:
        """Long-form descriptions of the issues."""
        return [ISSUE_MESSAGES.get(tag, tag) for tag in self.issues]


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """Output of the single-image path."""
    image: RawImage
    overall_confidence: float
    processing_type: str
    detected_quadrilateral: Quadrilateral | None = None
    quality_issues: tuple[str, ...] = ()
    can_adjust_manually: bool = False
    is_stitched: bool = False

    @property
    def has_issues(self) -> bool:
        return bool(self.quality_issues)

    @property
    def quality_label(self) -> str:
        """Coarse rating of the overall confidence."""
        if self.overall_confidence >= 0.9:
            return "Excellent"
        if self.overall_confidence >= 0.75:
            return "Good"
        if self.overall_confidence >= 0.6:
            return "Fair"
        return "Poor"


@dataclass(frozen=True, slots=True)
class MultiPartResult:
    """Output of the batch path.

    A stitched result always holds exactly one composite image.
    """
    processed_images: tuple[RawImage, ...]
    is_stitched: bool
    original_count: int
    confidence: float
    note: str = ""
    quality_issues: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "processed_images", tuple(self.processed_images))
        if self.is_stitched and len(self.processed_images) != 1:
            raise ValidationError(
                f"Stitched result must contain one image, got {len(self.processed_images)}",
                field="processed_images"
            )

    def to_processing_result(self) -> ProcessingResult:
        """Summarize the batch as a single processing result.

        Raises:
            ValidationError: If there is no image to summarize
        """
        if not self.processed_images:
            raise ValidationError("Empty batch has no processing result", field="processed_images")

        if self.is_stitched:
            issues = self.quality_issues
            if self.confidence < LOW_STITCH_CONFIDENCE and ISSUE_LOW_CONFIDENCE_STITCH not in issues:
                issues = issues + (ISSUE_LOW_CONFIDENCE_STITCH,)
            return ProcessingResult(
                image=self.processed_images[0],
                overall_confidence=self.confidence,
                processing_type=ProcessingType.MULTI_PART_STITCH.value,
                quality_issues=issues,
                can_adjust_manually=False,
                is_stitched=True,
            )

        return ProcessingResult(
            image=self.processed_images[0],
            overall_confidence=self.confidence,
            processing_type=ProcessingType.GALLERY_UPLOAD.value,
            quality_issues=self.quality_issues,
            can_adjust_manually=False,
            is_stitched=False,
        )
