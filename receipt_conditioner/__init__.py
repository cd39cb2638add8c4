"""Receipt Conditioner - prepares receipt photos for text extraction."""

__version__ = "1.0.0"

from .application.services.orchestrator import ReceiptImageProcessor
from .config import ProcessingType
from .domain.entities import (
    MultiPartResult,
    ProcessingResult,
    QualityAnalysis,
    RawImage,
)
from .domain.value_objects import (
    ConditioningConfig,
    EnhancementConfig,
    EnhancementPreset,
    Quadrilateral,
)
from .exceptions import (
    ReceiptConditionerError,
    ConfigurationError,
    ImageProcessingError,
    UndecodableImageError,
    DetectionError,
    RecognizerError,
    ValidationError,
)
from .utils.env import setup_logging

__all__ = [
    '__version__',
    'ReceiptImageProcessor',
    'ProcessingType',
    'RawImage',
    'QualityAnalysis',
    'ProcessingResult',
    'MultiPartResult',
    'ConditioningConfig',
    'EnhancementConfig',
    'EnhancementPreset',
    'Quadrilateral',
    'setup_logging',
    # Exceptions
    'ReceiptConditionerError',
    'ConfigurationError',
    'ImageProcessingError',
    'UndecodableImageError',
    'DetectionError',
    'RecognizerError',
    'ValidationError',
]
