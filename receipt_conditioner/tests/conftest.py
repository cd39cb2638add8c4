"""Shared fixtures."""

import pytest

from ..application.services.orchestrator import ReceiptImageProcessor
from ..domain.value_objects.config import ConditioningConfig
from .fakes import FakeRectangleDetector, FakeTextRecognizer


@pytest.fixture
def config():
    return ConditioningConfig()


@pytest.fixture
def detector():
    return FakeRectangleDetector()


@pytest.fixture
def recognizer():
    """Three portrait parts (widths 52/50/55, height 100) of one receipt."""
    return FakeTextRecognizer(by_width={
        52: (5, ["TOTAL 12.00", "Card"]),
        50: (4, ["Milk", "Bread"]),
        55: (3, ["Visa ****1234"]),
    })


@pytest.fixture
def processor(detector, recognizer, config):
    return ReceiptImageProcessor(detector, recognizer, config)
