"""Domain entities."""

from .image import RawImage
from .receipt_part import ReceiptPartAnalysis, StitchingPlan
from .results import MultiPartResult, ProcessingResult, QualityAnalysis

__all__ = [
    'RawImage',
    'ReceiptPartAnalysis',
    'StitchingPlan',
    'MultiPartResult',
    'ProcessingResult',
    'QualityAnalysis',
]
