"""Ports - interfaces for external dependencies (Dependency Inversion)."""

from .event_publisher import (
    EventPublisher,
    ProcessingEvent,
    ProcessingStage,
    SimpleEventPublisher,
)
from .rectangle_detector import DetectedRectangle, RectangleDetector
from .text_recognizer import (
    RecognitionMode,
    RecognizedText,
    TextDetectionResult,
    TextRecognizer,
)

__all__ = [
    'EventPublisher',
    'ProcessingEvent',
    'ProcessingStage',
    'SimpleEventPublisher',
    'DetectedRectangle',
    'RectangleDetector',
    'RecognitionMode',
    'RecognizedText',
    'TextDetectionResult',
    'TextRecognizer',
]
