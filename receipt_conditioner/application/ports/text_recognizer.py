"""Text Recognizer port - interface for text detection and recognition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from ...domain.entities.image import RawImage


class RecognitionMode(str, Enum):
    """Speed/accuracy trade-off for recognition."""
    FAST = "fast"
    ACCURATE = "accurate"


@dataclass(frozen=True, slots=True)
class RecognizedText:
    """One recognized text observation."""
    text: str
    confidence: float = 1.0


@dataclass(frozen=True, slots=True)
class TextDetectionResult:
    """Result of text region detection."""
    region_count: int
    processing_time_ms: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.region_count == 0


@runtime_checkable
class TextRecognizer(Protocol):
    """Port for text recognizers.

    Implementations: PaddleOCR, platform vision services, etc.
    """

    @property
    def name(self) -> str:
        """Recognizer name."""
        ...

    async def detect_regions(self, image: RawImage) -> TextDetectionResult:
        """Count text regions without recognizing their content."""
        ...

    async def recognize(
        self,
        image: RawImage,
        mode: RecognitionMode = RecognitionMode.FAST
    ) -> list[RecognizedText]:
        """Recognize text, in reading order.

        Args:
            image: Image to process
            mode: Speed/accuracy trade-off

        Returns:
            Recognized observations (possibly empty)
        """
        ...
