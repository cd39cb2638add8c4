"""Application services."""

from .document_detection import DocumentDetector
from .enhancement import EnhancementPipeline, EnhancementService, FilterStep
from .orchestrator import ReceiptImageProcessor
from .part_analysis import ReceiptPartAnalyzer
from .perspective import PerspectiveCorrector
from .quality_analyzer import QualityAnalyzer
from .stitching import Stitcher, StitchingPlanner

__all__ = [
    'DocumentDetector',
    'EnhancementPipeline',
    'EnhancementService',
    'FilterStep',
    'PerspectiveCorrector',
    'QualityAnalyzer',
    'ReceiptImageProcessor',
    'ReceiptPartAnalyzer',
    'Stitcher',
    'StitchingPlanner',
]
