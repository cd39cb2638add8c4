"""Per-image receipt analysis for multi-image batches."""

from __future__ import annotations

import asyncio
import logging

from ...config import PLACEHOLDER_DOMINANT_COLORS
from ...domain.entities.image import RawImage
from ...domain.entities.receipt_part import ReceiptPartAnalysis
from ...domain.value_objects.config import ConditioningConfig
from ..ports.text_recognizer import RecognitionMode, TextRecognizer

logger = logging.getLogger(__name__)


class ReceiptPartAnalyzer:
    """Decide whether an image holds receipt text and sample some of it.

    Recognizer failures and timeouts degrade to zero regions and empty text.
    """

    def __init__(self, recognizer: TextRecognizer, config: ConditioningConfig | None = None):
        self._recognizer = recognizer
        self._config = config or ConditioningConfig()

    @property
    def _name(self) -> str:
        return getattr(self._recognizer, "name", type(self._recognizer).__name__)

    async def count_regions(self, image: RawImage) -> int:
        try:
            result = await asyncio.wait_for(
                self._recognizer.detect_regions(image),
                timeout=self._config.recognition_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Recognizer '{self._name}' region detection timed out")
            return 0
        except Exception as e:
            logger.warning(f"Recognizer '{self._name}' region detection failed: {e}")
            return 0
        return result.region_count if result is not None else 0

    async def sample_text(self, image: RawImage) -> str:
        """Join the first few recognized blocks with single spaces."""
        try:
            observations = await asyncio.wait_for(
                self._recognizer.recognize(image, RecognitionMode.FAST),
                timeout=self._config.recognition_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Recognizer '{self._name}' recognition timed out")
            return ""
        except Exception as e:
            logger.warning(f"Recognizer '{self._name}' recognition failed: {e}")
            return ""
        texts = [o.text for o in (observations or [])[:self._config.sample_text_blocks]]
        return " ".join(texts)

    async def analyze(self, image: RawImage, index: int) -> ReceiptPartAnalysis:
        region_count, sampled = await asyncio.gather(
            self.count_regions(image),
            self.sample_text(image),
        )
        part = ReceiptPartAnalysis(
            image=image,
            original_index=index,
            has_receipt_content=region_count >= self._config.min_text_regions,
            sampled_text=sampled,
            aspect_ratio=image.aspect_ratio,
            region_count=region_count,
            dominant_colors=PLACEHOLDER_DOMINANT_COLORS,
        )
        logger.debug(
            f"Part {index}: regions={region_count}, "
            f"aspect={part.aspect_ratio:.2f}, text={sampled[:40]!r}"
        )
        return part
