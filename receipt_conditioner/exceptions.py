"""Custom exceptions for Receipt Conditioner."""

from typing import Optional


class ReceiptConditionerError(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for programmatic handling
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(ReceiptConditionerError):
    """Error in configuration or settings.

    Attributes:
        config_key: The configuration key that caused the error (if applicable)
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, error_code="CONFIG_ERROR")
        self.config_key = config_key


class ImageProcessingError(ReceiptConditionerError):
    """Error during image processing.

    Attributes:
        image_path: Path to the image being processed when error occurred
    """

    def __init__(
        self,
        message: str,
        image_path: Optional[str] = None,
        error_code: str = "IMAGE_ERROR"
    ):
        super().__init__(message, error_code=error_code)
        self.image_path = image_path

    def __str__(self) -> str:
        if self.image_path:
            return f"{super().__str__()} (image: {self.image_path})"
        return super().__str__()


class UndecodableImageError(ImageProcessingError):
    """Input buffer cannot be interpreted as an image at all.

    This is the only failure surfaced to callers for bad visual input;
    everything else degrades to a documented default.
    """

    def __init__(self, message: str, image_path: Optional[str] = None):
        super().__init__(message, image_path=image_path, error_code="UNDECODABLE_IMAGE")


class DetectionError(ReceiptConditionerError):
    """Error raised by a rectangle detector adapter.

    Attributes:
        detector: Name of the detector that failed (if applicable)
    """

    def __init__(self, message: str, detector: Optional[str] = None):
        super().__init__(message, error_code="DETECTION_ERROR")
        self.detector = detector


class RecognizerError(ReceiptConditionerError):
    """Error loading or running a text recognizer.

    Attributes:
        recognizer: Name of the recognizer that failed (if applicable)
    """

    def __init__(self, message: str, recognizer: Optional[str] = None):
        super().__init__(message, error_code="RECOGNIZER_ERROR")
        self.recognizer = recognizer


class ValidationError(ReceiptConditionerError):
    """Error validating inputs or parameters.

    Attributes:
        field: The field that failed validation (if applicable)
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, error_code="VALIDATION_ERROR")
        self.field = field
