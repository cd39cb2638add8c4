"""Document detection service - picks the receipt boundary from detector candidates."""

from __future__ import annotations

import asyncio
import logging

from ...domain.entities.image import RawImage
from ...domain.value_objects.config import ConditioningConfig
from ...domain.value_objects.geometry import Quadrilateral
from ..ports.rectangle_detector import DetectedRectangle, RectangleDetector

logger = logging.getLogger(__name__)


class DocumentDetector:
    """Find the single most plausible document quadrilateral in an image.

    "No document found" is a normal outcome, reported as None. Detector
    errors and timeouts are reported the same way.
    """

    def __init__(self, detector: RectangleDetector, config: ConditioningConfig | None = None):
        self._detector = detector
        self._config = config or ConditioningConfig()

    def accepts(self, candidate: DetectedRectangle) -> bool:
        """Check a candidate against the configured constraints."""
        cfg = self._config
        low, high = cfg.aspect_ratio_range
        return (
            candidate.confidence >= cfg.min_detection_confidence
            and candidate.relative_area >= cfg.min_relative_size
            and low <= candidate.aspect_ratio <= high
        )

    async def detect(self, image: RawImage) -> Quadrilateral | None:
        """Return the largest acceptable quadrilateral, or None."""
        cfg = self._config
        name = getattr(self._detector, "name", type(self._detector).__name__)

        try:
            candidates = await asyncio.wait_for(
                self._detector.detect(
                    image,
                    max_candidates=cfg.max_candidates,
                    aspect_ratio_range=cfg.aspect_ratio_range,
                    min_relative_size=cfg.min_relative_size,
                    min_confidence=cfg.min_detection_confidence,
                ),
                timeout=cfg.detection_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Detector '{name}' timed out after {cfg.detection_timeout}s")
            return None
        except Exception as e:
            logger.warning(f"Detector '{name}' failed: {e}")
            return None

        # Constraints are re-applied; adapters may ignore them
        survivors = [c for c in (candidates or [])[:cfg.max_candidates] if self.accepts(c)]
        if not survivors:
            logger.debug(f"No document boundary among {len(candidates or [])} candidates")
            return None

        best = max(survivors, key=lambda c: c.relative_area)
        logger.debug(
            f"Selected boundary: area={best.relative_area:.2f}, "
            f"confidence={best.confidence:.2f}"
        )
        return best.quadrilateral
