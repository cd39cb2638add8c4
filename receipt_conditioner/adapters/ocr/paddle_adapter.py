"""PaddleOCR adapter - implements TextRecognizer port."""

from __future__ import annotations

import asyncio
import logging
import threading
import time

import cv2

from ...application.ports.text_recognizer import (
    RecognitionMode,
    RecognizedText,
    TextDetectionResult,
    TextRecognizer,
)
from ...domain.entities.image import RawImage
from ...exceptions import RecognizerError

logger = logging.getLogger(__name__)


class PaddleTextRecognizer(TextRecognizer):
    """Adapter for the PaddleOCR engine.

    The model is loaded on first use. Angle classification runs only in
    ACCURATE mode.
    """

    def __init__(self, lang: str = "en", use_gpu: bool = False):
        self._lang = lang
        self._use_gpu = use_gpu
        self._model = None
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "paddleocr"

    @property
    def is_available(self) -> bool:
        """Check if PaddleOCR is installed."""
        try:
            import paddleocr  # noqa: F401
            return True
        except ImportError:
            return False

    def load(self) -> None:
        """Load PaddleOCR model."""
        with self._lock:
            if self._model is not None:
                return
            try:
                from paddleocr import PaddleOCR
            except ImportError as e:
                raise RecognizerError(
                    "PaddleOCR not installed. Install with: pip install receipt-conditioner[paddle]",
                    recognizer=self.name
                ) from e

            self._model = PaddleOCR(
                use_angle_cls=True,
                lang=self._lang,
                use_gpu=self._use_gpu,
                show_log=False,
            )
            logger.info("PaddleOCR model loaded")

    def unload(self) -> None:
        """Unload model."""
        with self._lock:
            if self._model is not None:
                self._model = None
                logger.info("PaddleOCR model unloaded")

    async def detect_regions(self, image: RawImage) -> TextDetectionResult:
        return await asyncio.to_thread(self.detect_regions_sync, image)

    async def recognize(
        self,
        image: RawImage,
        mode: RecognitionMode = RecognitionMode.FAST
    ) -> list[RecognizedText]:
        return await asyncio.to_thread(self.recognize_sync, image, mode)

    def detect_regions_sync(self, image: RawImage) -> TextDetectionResult:
        """Detection-only pass; counts text boxes."""
        self.load()
        start = time.time()
        raw = self._model.ocr(self._to_bgr(image), rec=False, cls=False)
        boxes = self._first_page(raw)
        elapsed = (time.time() - start) * 1000
        logger.debug(f"PaddleOCR found {len(boxes)} regions in {elapsed:.0f}ms")
        return TextDetectionResult(region_count=len(boxes), processing_time_ms=elapsed)

    def recognize_sync(
        self,
        image: RawImage,
        mode: RecognitionMode = RecognitionMode.FAST
    ) -> list[RecognizedText]:
        """Detection plus recognition, in PaddleOCR's reading order."""
        self.load()
        use_cls = RecognitionMode(mode) == RecognitionMode.ACCURATE
        raw = self._model.ocr(self._to_bgr(image), cls=use_cls)
        return self._parse_result(raw)

    @staticmethod
    def _to_bgr(image: RawImage):
        return cv2.cvtColor(image.pixels, cv2.COLOR_RGB2BGR)

    @staticmethod
    def _first_page(raw: object) -> list:
        """PaddleOCR returns one list per page; None when nothing was found."""
        if not raw:
            return []
        page = raw[0]
        return list(page) if page else []

    @classmethod
    def _parse_result(cls, raw: object) -> list[RecognizedText]:
        """Parse ``[[box, (text, score)], ...]`` lines from the first page."""
        results: list[RecognizedText] = []
        for line in cls._first_page(raw):
            try:
                text, score = line[1][0], line[1][1]
            except (IndexError, TypeError):
                logger.warning(f"Skipping malformed PaddleOCR line: {line!r}")
                continue
            results.append(RecognizedText(text=str(text), confidence=float(score)))
        return results
