"""Tests for the receipt image processor."""

import asyncio
from pathlib import Path

import numpy as np
import pytest

from ..application.ports.event_publisher import (
    ProcessingEvent,
    ProcessingStage,
    SimpleEventPublisher,
)
from ..application.services.orchestrator import ReceiptImageProcessor
from ..config import (
    ISSUE_LOW_CONFIDENCE_STITCH,
    ISSUE_NO_DOCUMENT,
    REASON_MISSING_CONTENT,
    SEPARATE_RECEIPTS_CONFIDENCE,
    ProcessingType,
)
from ..domain.entities.image import RawImage
from ..domain.value_objects.config import ConditioningConfig
from .fakes import FakeRectangleDetector, FakeTextRecognizer, checkerboard, noisy, quad, solid


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def receipt_parts():
    """Three portrait captures keyed to the recognizer fixture by width."""
    return [solid(52, 100, 180), solid(50, 100, 190), solid(55, 100, 200)]


class TestProcessSingle:
    """Test the single-image path."""

    def test_without_document_keeps_frame(self, processor):
        image = checkerboard(80, 100, low=60, high=200)
        result = run(processor.process_single(image, ProcessingType.DOCUMENT_SCAN))
        assert result.image.size == image.size
        assert result.image.enhanced
        assert result.processing_type == "document-scan"
        assert result.detected_quadrilateral is None
        assert not result.can_adjust_manually
        assert ISSUE_NO_DOCUMENT in result.quality_issues
        assert not result.is_stitched

    def test_with_document_crops(self, recognizer):
        detector = FakeRectangleDetector([quad(0.1, 0.1, 0.9, 0.9)])
        processor = ReceiptImageProcessor(detector, recognizer)
        result = run(processor.process_single(checkerboard(100, 100, low=60, high=200)))
        assert result.image.size == (80, 80)
        assert result.can_adjust_manually
        assert result.detected_quadrilateral is not None
        assert result.processing_type == "camera"
        assert len(detector.calls) == 1

    def test_accepts_string_label(self, processor):
        result = run(processor.process_single(noisy(40, 40), "gallery-upload"))
        assert result.processing_type == "gallery-upload"

    def test_free_form_label_kept(self, processor):
        result = run(processor.process_single(noisy(40, 40), "VisionKit"))
        assert result.processing_type == "VisionKit"

    def test_detector_failure_degrades(self, recognizer):
        detector = FakeRectangleDetector(error=RuntimeError("vision unavailable"))
        processor = ReceiptImageProcessor(detector, recognizer)
        result = run(processor.process_single(noisy(40, 40)))
        assert ISSUE_NO_DOCUMENT in result.quality_issues

    def test_events(self, processor):
        stages = []
        processor.subscribe_to_events(lambda event: stages.append(event.stage))
        run(processor.process_single(noisy(40, 40)))
        assert stages[0] == "start"
        assert stages[-1] == "complete"
        assert "enhance" in stages

    def test_events_carry_image_path(self, recognizer):
        detector = FakeRectangleDetector([quad(0.1, 0.1, 0.9, 0.9)])
        processor = ReceiptImageProcessor(detector, recognizer)
        image = RawImage(pixels=noisy(40, 40).pixels, source_path=Path("shop.jpg"))
        events = []
        processor.subscribe_to_events(events.append)
        run(processor.process_single(image))
        assert [e.stage for e in events] == ["start", "crop", "enhance", "complete"]
        assert all(e.image_path == Path("shop.jpg") for e in events)


class TestProcessBatch:
    """Test the multi-image path."""

    def test_empty_batch(self, processor):
        result = run(processor.process_batch([]))
        assert result.processed_images == ()
        assert result.original_count == 0
        assert not result.is_stitched

    def test_single_image_matches_single_path(self, processor):
        image = checkerboard(60, 90, low=40, high=220)
        batch = run(processor.process_batch([image]))
        single = run(processor.process_single(image, ProcessingType.GALLERY_SINGLE))

        assert not batch.is_stitched
        assert batch.original_count == 1
        assert batch.confidence == pytest.approx(single.overall_confidence)
        assert batch.quality_issues == single.quality_issues
        assert np.array_equal(batch.processed_images[0].pixels, single.image.pixels)

    def test_three_part_receipt_is_stitched(self, processor, receipt_parts):
        result = run(processor.process_batch(receipt_parts))
        assert result.is_stitched
        assert result.original_count == 3
        assert result.confidence == pytest.approx(0.80)
        composite = result.processed_images[0]
        assert composite.height == 300
        assert composite.width == 55

        summary = result.to_processing_result()
        assert summary.processing_type == "multi-part-stitch"
        assert summary.is_stitched
        assert ISSUE_LOW_CONFIDENCE_STITCH not in summary.quality_issues

    def test_part_without_content_is_separate(self, detector):
        recognizer = FakeTextRecognizer(by_width={
            52: (5, ["TOTAL 12.00"]),
            50: (1, ["smudge"]),
        })
        processor = ReceiptImageProcessor(detector, recognizer)
        images = [solid(52, 100), solid(50, 100)]
        result = run(processor.process_batch(images))

        assert not result.is_stitched
        assert result.confidence == SEPARATE_RECEIPTS_CONFIDENCE
        assert len(result.processed_images) == 2
        assert result.to_processing_result().processing_type == "gallery-upload"

        parts = run(processor.analyze_parts(images))
        assert processor._planner.plan(parts).reason == REASON_MISSING_CONTENT

    def test_recognizer_failure_processes_separately(self, detector):
        recognizer = FakeTextRecognizer(error=RuntimeError("ocr down"))
        processor = ReceiptImageProcessor(detector, recognizer)
        result = run(processor.process_batch([solid(52, 100), solid(50, 100)]))
        assert not result.is_stitched
        assert len(result.processed_images) == 2

    def test_recognizer_timeout_processes_separately(self, detector):
        recognizer = FakeTextRecognizer(default=(5, ["total"]), delay=1.0)
        config = ConditioningConfig(recognition_timeout=0.05)
        processor = ReceiptImageProcessor(detector, recognizer, config)
        result = run(processor.process_batch([solid(52, 100), solid(50, 100)]))
        assert not result.is_stitched

    def test_too_many_parts_processed_separately(self, detector):
        recognizer = FakeTextRecognizer(default=(5, ["total"]))
        processor = ReceiptImageProcessor(detector, recognizer)
        result = run(processor.process_batch([solid(50, 100)] * 5))
        assert not result.is_stitched
        assert len(result.processed_images) == 5

    def test_analyze_parts_uses_fast_mode(self, processor, recognizer, receipt_parts):
        parts = run(processor.analyze_parts(receipt_parts))
        assert [p.original_index for p in parts] == [0, 1, 2]
        assert parts[0].sampled_text == "TOTAL 12.00 Card"
        assert parts[0].region_count == 5
        assert parts[0].dominant_colors == ((255, 255, 255),)
        assert {mode.value for mode in recognizer.modes} == {"fast"}

    def test_batch_events(self, processor, receipt_parts):
        stages = []
        processor.subscribe_to_events(lambda event: stages.append(event.stage))
        run(processor.process_batch(receipt_parts))
        assert stages == ["batch_start", "stitch", "batch_complete"]


class TestTransmission:
    """Test transmission helpers exposed on the processor."""

    def test_optimize_then_encode(self, processor):
        prepared = processor.optimize_for_transmission(noisy(300, 200))
        data = processor.encode_for_transmission(prepared)
        assert prepared.enhanced
        assert data[:2] == b"\xff\xd8"

    def test_manual_adjust_round_trip(self, processor):
        image = noisy(100, 50)
        corners = processor.default_manual_corners(image)
        out = processor.apply_perspective_correction(image, corners)
        assert out.size == (80, 40)


class TestEventPublisher:
    """Test the in-process publisher."""

    def test_publish_in_subscription_order(self):
        publisher = SimpleEventPublisher()
        seen = []
        publisher.subscribe(lambda event: seen.append(("a", event.stage)))
        publisher.subscribe(lambda event: seen.append(("b", event.stage)))
        publisher.publish(ProcessingEvent(ProcessingStage.START, "go"))
        assert seen == [("a", "start"), ("b", "start")]

    def test_unsubscribe(self):
        publisher = SimpleEventPublisher()
        seen = []
        publisher.subscribe(seen.append)
        publisher.unsubscribe(seen.append)
        publisher.unsubscribe(print)
        publisher.publish(ProcessingEvent(ProcessingStage.COMPLETE, "done"))
        assert seen == []
        assert publisher.subscriber_count == 0

    def test_progress_range(self):
        with pytest.raises(ValueError):
            ProcessingEvent(ProcessingStage.ENHANCE, "bad", progress=1.5)

    def test_custom_publisher(self, detector, recognizer):
        publisher = SimpleEventPublisher()
        processor = ReceiptImageProcessor(detector, recognizer, events=publisher)
        seen = []
        publisher.subscribe(seen.append)
        run(processor.process_single(noisy(40, 40)))
        assert seen[-1].stage is ProcessingStage.COMPLETE
