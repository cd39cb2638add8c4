"""OCR adapters - implementations of TextRecognizer port."""

from .paddle_adapter import PaddleTextRecognizer

__all__ = ['PaddleTextRecognizer']
