"""Plugin registry - discovers and loads adapters via entry points."""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib.metadata import entry_points
from typing import TYPE_CHECKING

from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..application.ports.rectangle_detector import RectangleDetector
    from ..application.ports.text_recognizer import TextRecognizer

logger = logging.getLogger(__name__)


def _load_group(group: str) -> dict[str, type]:
    found: dict[str, type] = {}
    for ep in entry_points(group=group):
        try:
            found[ep.name] = ep.load()
            logger.debug(f"Discovered {group} plugin: {ep.name}")
        except Exception as e:
            logger.warning(f"Failed to load plugin {ep.name} from {group}: {e}")
    return found


class PluginRegistry:
    """Registry for discovering and loading adapters.

    Uses entry points for plugin discovery:
    - receipt_conditioner.detectors: RectangleDetector implementations
    - receipt_conditioner.recognizers: TextRecognizer implementations

    Third-party packages can register plugins:

    [project.entry-points."receipt_conditioner.detectors"]
    my_detector = "my_package:MyDetector"
    """

    DETECTOR_GROUP = "receipt_conditioner.detectors"
    RECOGNIZER_GROUP = "receipt_conditioner.recognizers"

    @classmethod
    @lru_cache(maxsize=1)
    def discover_detectors(cls) -> dict[str, type]:
        """Discover all available rectangle detectors.

        Returns:
            Dict mapping detector names to classes
        """
        detectors = _load_group(cls.DETECTOR_GROUP)

        # Always include built-in detectors
        from ..adapters.detection.opencv_adapter import OpenCVRectangleDetector
        detectors.setdefault("opencv", OpenCVRectangleDetector)

        return detectors

    @classmethod
    @lru_cache(maxsize=1)
    def discover_recognizers(cls) -> dict[str, type]:
        """Discover all available text recognizers.

        Returns:
            Dict mapping recognizer names to classes
        """
        recognizers = _load_group(cls.RECOGNIZER_GROUP)

        # Built-in; paddleocr itself is imported only when the model loads
        from ..adapters.ocr.paddle_adapter import PaddleTextRecognizer
        recognizers.setdefault("paddleocr", PaddleTextRecognizer)

        return recognizers

    @classmethod
    def create_detector(cls, name: str, **kwargs) -> "RectangleDetector":
        """Create rectangle detector instance by name.

        Raises:
            ConfigurationError: If detector not found
        """
        detectors = cls.discover_detectors()

        if name not in detectors:
            available = ", ".join(detectors.keys())
            raise ConfigurationError(
                f"Unknown detector: {name}. Available: {available}",
                config_key="detector"
            )

        return detectors[name](**kwargs)

    @classmethod
    def create_recognizer(cls, name: str, **kwargs) -> "TextRecognizer":
        """Create text recognizer instance by name.

        Raises:
            ConfigurationError: If recognizer not found
        """
        recognizers = cls.discover_recognizers()

        if name not in recognizers:
            available = ", ".join(recognizers.keys())
            raise ConfigurationError(
                f"Unknown recognizer: {name}. Available: {available}",
                config_key="recognizer"
            )

        return recognizers[name](**kwargs)

    @classmethod
    def list_available_detectors(cls) -> list[str]:
        return list(cls.discover_detectors().keys())

    @classmethod
    def list_available_recognizers(cls) -> list[str]:
        return list(cls.discover_recognizers().keys())
