"""OpenCV contour detector - implements RectangleDetector port."""

from __future__ import annotations

import asyncio
import logging

import cv2
import numpy as np

from ...application.ports.rectangle_detector import DetectedRectangle, RectangleDetector
from ...domain.entities.image import RawImage
from ...domain.value_objects.geometry import Quadrilateral
from ...exceptions import DetectionError

logger = logging.getLogger(__name__)


def order_corners(points: np.ndarray) -> np.ndarray:
    """Order four points as top_left, top_right, bottom_right, bottom_left.

    Top-left has the smallest x + y and bottom-right the largest; top-right
    has the smallest y - x and bottom-left the largest.
    """
    pts = np.asarray(points, dtype=np.float32).reshape(4, 2)
    sums = pts.sum(axis=1)
    diffs = np.diff(pts, axis=1).ravel()
    return np.array([
        pts[np.argmin(sums)],
        pts[np.argmin(diffs)],
        pts[np.argmax(sums)],
        pts[np.argmax(diffs)],
    ], dtype=np.float32)


class OpenCVRectangleDetector(RectangleDetector):
    """Find document outlines with edge detection and polygon approximation.

    Confidence is how well the contour fills its four-sided approximation,
    so crisp paper edges score near 1.0 and ragged blobs score lower.
    """

    def __init__(
        self,
        canny_low: int = 50,
        canny_high: int = 150,
        blur_kernel: int = 5,
        approx_epsilon: float = 0.02
    ):
        self._canny_low = canny_low
        self._canny_high = canny_high
        self._blur_kernel = blur_kernel
        self._approx_epsilon = approx_epsilon

    @property
    def name(self) -> str:
        return "opencv"

    async def detect(
        self,
        image: RawImage,
        max_candidates: int,
        aspect_ratio_range: tuple[float, float],
        min_relative_size: float,
        min_confidence: float
    ) -> list[DetectedRectangle]:
        return await asyncio.to_thread(
            self.detect_sync,
            image,
            max_candidates,
            aspect_ratio_range,
            min_relative_size,
            min_confidence,
        )

    def detect_sync(
        self,
        image: RawImage,
        max_candidates: int,
        aspect_ratio_range: tuple[float, float],
        min_relative_size: float,
        min_confidence: float
    ) -> list[DetectedRectangle]:
        """Blocking implementation of detect()."""
        width, height = image.width, image.height
        low, high = aspect_ratio_range

        try:
            contours = self._find_contours(image.pixels)
        except cv2.error as e:
            raise DetectionError(f"Contour search failed: {e}", detector=self.name) from e

        candidates: list[DetectedRectangle] = []
        for contour in contours:
            corners = self._approximate_quad(contour)
            if corners is None:
                continue

            quad_area = cv2.contourArea(corners)
            if quad_area <= 0:
                continue
            fill = min(1.0, cv2.contourArea(contour) / quad_area)

            quad = Quadrilateral.from_pixel_corners(
                [tuple(p) for p in order_corners(corners).tolist()],
                width, height,
                confidence=fill
            )
            if (quad.confidence < min_confidence
                    or quad.relative_area < min_relative_size
                    or not low <= quad.aspect_ratio <= high):
                continue
            candidates.append(DetectedRectangle(quadrilateral=quad))

        candidates.sort(key=lambda c: c.relative_area, reverse=True)
        logger.debug(f"OpenCV detector found {len(candidates)} candidates")
        return candidates[:max_candidates]

    def _find_contours(self, pixels: np.ndarray) -> list[np.ndarray]:
        gray = cv2.cvtColor(pixels, cv2.COLOR_RGB2GRAY)
        blur = cv2.GaussianBlur(gray, (self._blur_kernel, self._blur_kernel), 0)
        edges = cv2.Canny(blur, self._canny_low, self._canny_high)
        # Close small gaps in the paper outline
        edges = cv2.dilate(edges, np.ones((3, 3), np.uint8), iterations=1)
        contours, _ = cv2.findContours(edges, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        return list(contours)

    def _approximate_quad(self, contour: np.ndarray) -> np.ndarray | None:
        """Four-point approximation of the contour or its convex hull."""
        for shape in (contour, cv2.convexHull(contour)):
            perimeter = cv2.arcLength(shape, True)
            approx = cv2.approxPolyDP(shape, self._approx_epsilon * perimeter, True)
            if len(approx) == 4:
                return approx.reshape(4, 2).astype(np.float32)
        return None
