"""Rectangle Detector port - interface for document boundary detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ...domain.entities.image import RawImage
from ...domain.value_objects.geometry import Quadrilateral


@dataclass(frozen=True, slots=True)
class DetectedRectangle:
    """A candidate document boundary."""
    quadrilateral: Quadrilateral

    @property
    def confidence(self) -> float:
        return self.quadrilateral.confidence

    @property
    def relative_area(self) -> float:
        return self.quadrilateral.relative_area

    @property
    def aspect_ratio(self) -> float:
        return self.quadrilateral.aspect_ratio


@runtime_checkable
class RectangleDetector(Protocol):
    """Port for document rectangle detectors.

    Implementations: OpenCV contours, platform vision services, etc.
    Constraints are hints; callers re-check every candidate.
    """

    @property
    def name(self) -> str:
        """Detector name."""
        ...

    async def detect(
        self,
        image: RawImage,
        max_candidates: int,
        aspect_ratio_range: tuple[float, float],
        min_relative_size: float,
        min_confidence: float
    ) -> list[DetectedRectangle]:
        """Find candidate quadrilaterals in the image.

        Args:
            image: Image to search
            max_candidates: Maximum number of candidates to return
            aspect_ratio_range: Accepted (min, max) width/height ratio
            min_relative_size: Minimum share of the frame a candidate must cover
            min_confidence: Minimum detector confidence

        Returns:
            Candidates in any order (possibly empty)
        """
        ...
