"""Rectangle detector adapters."""

from .opencv_adapter import OpenCVRectangleDetector

__all__ = ['OpenCVRectangleDetector']
