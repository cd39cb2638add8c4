"""Quality analyzer - measures an image and scores it."""

from __future__ import annotations

import asyncio
import logging

from ...core.image_ops import mean_luminance_center, sharpness_score
from ...domain.entities.image import RawImage
from ...domain.entities.results import QualityAnalysis
from ...domain.services.quality_scoring import score_quality
from ...domain.value_objects.config import ConditioningConfig
from .document_detection import DocumentDetector

logger = logging.getLogger(__name__)


class QualityAnalyzer:
    """Score brightness, sharpness, framing and document detection for one image."""

    def __init__(self, detector: DocumentDetector, config: ConditioningConfig | None = None):
        self._detector = detector
        self._config = config or ConditioningConfig()

    async def analyze(self, image: RawImage) -> QualityAnalysis:
        luminance, sharpness = await asyncio.to_thread(self.measure, image)
        quad = await self._detector.detect(image)

        analysis = score_quality(
            luminance=luminance,
            sharpness=sharpness,
            aspect_ratio=image.aspect_ratio,
            quad=quad,
            config=self._config,
        )
        logger.info(
            f"Quality {analysis.confidence:.2f} "
            f"(luminance={luminance:.2f}, sharpness={sharpness:.2f}, "
            f"issues={list(analysis.issues)})"
        )
        return analysis

    @staticmethod
    def measure(image: RawImage) -> tuple[float, float]:
        """Return (central mean luminance, sharpness), both in [0, 1]."""
        return mean_luminance_center(image.pixels), sharpness_score(image.pixels)
