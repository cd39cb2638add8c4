"""Perspective correction - rectify a skewed document to an upright rectangle."""

from __future__ import annotations

import logging
from typing import Sequence

from ...core.image_ops import warp_perspective
from ...domain.entities.image import RawImage
from ...domain.value_objects.geometry import Point, Quadrilateral
from ...exceptions import ValidationError

logger = logging.getLogger(__name__)

# Inset of the starting rectangle for manual corner adjustment
MANUAL_INSET = 0.1


def _as_pairs(corners: Sequence[Point | tuple[float, float]]) -> list[tuple[float, float]]:
    pairs = []
    for corner in corners:
        if isinstance(corner, Point):
            pairs.append((corner.x, corner.y))
        else:
            x, y = corner
            pairs.append((float(x), float(y)))
    return pairs


class PerspectiveCorrector:
    """Warp a quadrilateral region onto an axis-aligned rectangle.

    Detected boundaries (normalized) and manually placed corners (pixels)
    go through the same warp.
    """

    def crop_to_document(self, image: RawImage, quad: Quadrilateral) -> RawImage:
        """Rectify the region bounded by a detected quadrilateral."""
        corners = quad.to_pixels(image.width, image.height)
        return self._warp(image, _as_pairs(corners))

    def apply_perspective_correction(
        self,
        image: RawImage,
        corners: Sequence[Point | tuple[float, float]]
    ) -> RawImage:
        """Rectify using caller-supplied pixel corners.

        Args:
            image: Source image
            corners: Exactly four corners ordered top_left, top_right,
                bottom_right, bottom_left, in pixels with y pointing down

        Raises:
            ValidationError: If there are not exactly four corners
        """
        if len(corners) != 4:
            raise ValidationError(
                f"Perspective correction needs 4 corners, got {len(corners)}",
                field="corners"
            )
        return self._warp(image, _as_pairs(corners))

    def default_manual_corners(self, image: RawImage) -> list[Point]:
        """Starting corners for manual adjustment: a rectangle inset by 10%."""
        w, h = image.width, image.height
        left, right = w * MANUAL_INSET, w * (1 - MANUAL_INSET)
        top, bottom = h * MANUAL_INSET, h * (1 - MANUAL_INSET)
        return [
            Point(left, top),
            Point(right, top),
            Point(right, bottom),
            Point(left, bottom),
        ]

    def _warp(self, image: RawImage, corners: list[tuple[float, float]]) -> RawImage:
        warped = warp_perspective(image.pixels, corners)
        logger.debug(
            f"Perspective warp {image.width}x{image.height} -> "
            f"{warped.shape[1]}x{warped.shape[0]}"
        )
        return image.with_pixels(warped)
