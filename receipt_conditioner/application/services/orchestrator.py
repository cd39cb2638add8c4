"""Receipt image processor - entry point for single images and batches."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from ...config import ProcessingType
from ...domain.entities.image import RawImage
from ...domain.entities.receipt_part import ReceiptPartAnalysis
from ...domain.entities.results import MultiPartResult, ProcessingResult, QualityAnalysis
from ...domain.value_objects.config import (
    ConditioningConfig,
    EnhancementConfig,
    EnhancementPreset,
)
from ...domain.value_objects.geometry import Point, Quadrilateral
from ..ports.event_publisher import (
    EventPublisher,
    ProcessingEvent,
    ProcessingStage,
    SimpleEventPublisher,
)
from ..ports.rectangle_detector import RectangleDetector
from ..ports.text_recognizer import TextRecognizer
from .document_detection import DocumentDetector
from .enhancement import EnhancementService
from .part_analysis import ReceiptPartAnalyzer
from .perspective import PerspectiveCorrector
from .quality_analyzer import QualityAnalyzer
from .stitching import Stitcher, StitchingPlanner

logger = logging.getLogger(__name__)


class ReceiptImageProcessor:
    """Conditions receipt photos for downstream text extraction.

    Holds no per-request state, so one instance may serve concurrent calls.

    Example:
        processor = ReceiptImageProcessor(OpenCVRectangleDetector(), recognizer)
        result = asyncio.run(processor.process_single(RawImage.from_file(path)))
    """

    def __init__(
        self,
        detector: RectangleDetector,
        recognizer: TextRecognizer,
        config: ConditioningConfig | None = None,
        events: EventPublisher | None = None
    ):
        self._config = config or ConditioningConfig()
        self._events = events or SimpleEventPublisher()
        self._document_detector = DocumentDetector(detector, self._config)
        self._quality = QualityAnalyzer(self._document_detector, self._config)
        self._perspective = PerspectiveCorrector()
        self._enhancer = EnhancementService(self._config)
        self._part_analyzer = ReceiptPartAnalyzer(recognizer, self._config)
        self._planner = StitchingPlanner(self._config)
        self._stitcher = Stitcher(self._enhancer)

    @property
    def config(self) -> ConditioningConfig:
        return self._config

    def subscribe_to_events(self, callback: Callable[[ProcessingEvent], None]) -> None:
        """Subscribe to processing events."""
        self._events.subscribe(callback)

    # ------------------------------------------------------------------
    # Single image
    # ------------------------------------------------------------------

    async def process_single(
        self,
        image: RawImage,
        processing_type: ProcessingType | str = ProcessingType.CAMERA
    ) -> ProcessingResult:
        """Analyze, rectify when a boundary is found, and enhance one image.

        Args:
            image: Captured photo
            processing_type: Source label; any string is kept as given
        """
        label = (
            processing_type.value if isinstance(processing_type, ProcessingType)
            else str(processing_type)
        )
        self._events.publish(ProcessingEvent(
            stage=ProcessingStage.START,
            message=f"Processing {label} image",
            progress=0.0,
            image_path=image.source_path
        ))

        analysis = await self.analyze_quality(image)
        quad = analysis.detected_quadrilateral

        working = image
        if quad is not None:
            self._events.publish(ProcessingEvent(
                stage=ProcessingStage.CROP,
                message="Correcting perspective",
                progress=0.4,
                image_path=image.source_path
            ))
            working = await asyncio.to_thread(self._perspective.crop_to_document, image, quad)

        self._events.publish(ProcessingEvent(
            stage=ProcessingStage.ENHANCE,
            message="Enhancing image",
            progress=0.7,
            image_path=image.source_path
        ))
        enhanced = await asyncio.to_thread(self._enhancer.enhance, working, EnhancementPreset.RECEIPT)

        self._events.publish(ProcessingEvent(
            stage=ProcessingStage.COMPLETE,
            message="Processing complete",
            progress=1.0,
            image_path=image.source_path
        ))

        return ProcessingResult(
            image=enhanced,
            overall_confidence=analysis.confidence,
            processing_type=label,
            detected_quadrilateral=quad,
            quality_issues=analysis.issues,
            can_adjust_manually=analysis.can_adjust,
            is_stitched=False,
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def analyze_parts(self, images: Sequence[RawImage]) -> list[ReceiptPartAnalysis]:
        """Analyze every image concurrently; results keep input order."""
        return list(await asyncio.gather(*(
            self._part_analyzer.analyze(img, i) for i, img in enumerate(images)
        )))

    async def process_batch(self, images: Sequence[RawImage]) -> MultiPartResult:
        """Process several captures as one stitched receipt or as separate receipts."""
        count = len(images)

        if count == 0:
            logger.info("Empty batch")
            return MultiPartResult(
                processed_images=(),
                is_stitched=False,
                original_count=0,
                confidence=0.0,
                note="No images to process",
            )

        if count == 1:
            single = await self.process_single(images[0], ProcessingType.GALLERY_SINGLE)
            return MultiPartResult(
                processed_images=(single.image,),
                is_stitched=False,
                original_count=1,
                confidence=single.overall_confidence,
                note="Processed 1 receipt",
                quality_issues=single.quality_issues,
            )

        self._events.publish(ProcessingEvent(
            stage=ProcessingStage.BATCH_START,
            message=f"Analyzing {count} images",
            progress=0.0
        ))
        parts = await self.analyze_parts(images)
        plan = self._planner.plan(parts)

        self._events.publish(ProcessingEvent(
            stage=ProcessingStage.STITCH if plan.should_stitch else ProcessingStage.SEPARATE,
            message=plan.reason,
            progress=0.5
        ))
        if plan.should_stitch:
            result = await self._stitcher.stitch(plan)
        else:
            result = await self._stitcher.process_separately(images)

        self._events.publish(ProcessingEvent(
            stage=ProcessingStage.BATCH_COMPLETE,
            message=result.note,
            progress=1.0
        ))
        return result

    # ------------------------------------------------------------------
    # Individual operations
    # ------------------------------------------------------------------

    async def analyze_quality(self, image: RawImage) -> QualityAnalysis:
        return await self._quality.analyze(image)

    async def detect_document(self, image: RawImage) -> Quadrilateral | None:
        return await self._document_detector.detect(image)

    def enhance(
        self,
        image: RawImage,
        preset: EnhancementPreset | EnhancementConfig = EnhancementPreset.RECEIPT
    ) -> RawImage:
        return self._enhancer.enhance(image, preset)

    def crop_to_document(self, image: RawImage, quad: Quadrilateral) -> RawImage:
        return self._perspective.crop_to_document(image, quad)

    def apply_perspective_correction(
        self,
        image: RawImage,
        corners: Sequence[Point | tuple[float, float]]
    ) -> RawImage:
        return self._perspective.apply_perspective_correction(image, corners)

    def default_manual_corners(self, image: RawImage) -> list[Point]:
        return self._perspective.default_manual_corners(image)

    def optimize_for_transmission(self, image: RawImage) -> RawImage:
        return self._enhancer.optimize_for_transmission(image)

    def encode_for_transmission(self, image: RawImage) -> bytes:
        return self._enhancer.encode_for_transmission(image)
