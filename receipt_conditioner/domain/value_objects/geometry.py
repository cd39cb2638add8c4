"""Geometry value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence


class CoordinateOrigin(str, Enum):
    """Where normalized y = 0 sits in the image."""
    TOP_LEFT = "top_left"
    BOTTOM_LEFT = "bottom_left"


@dataclass(frozen=True, slots=True)
class Point:
    """2D point."""
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        """Euclidean distance."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height (0 for a degenerate box)."""
        if self.height <= 0:
            return 0.0
        return self.width / self.height


@dataclass(frozen=True, slots=True)
class Quadrilateral:
    """Document boundary in normalized [0, 1] x [0, 1] coordinates.

    Corners are named by their visual position in the photo, whatever the
    coordinate origin. ``confidence`` is the detector's own score.
    """
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point
    confidence: float = 1.0
    origin: CoordinateOrigin = CoordinateOrigin.TOP_LEFT

    def __iter__(self) -> Iterator[Point]:
        """Iterate clockwise: top_left, top_right, bottom_right, bottom_left."""
        yield self.top_left
        yield self.top_right
        yield self.bottom_right
        yield self.bottom_left

    @property
    def points(self) -> list[Point]:
        return list(self)

    @property
    def bounding_box(self) -> BoundingBox:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return BoundingBox(min(xs), min(ys), max(xs), max(ys))

    @property
    def relative_area(self) -> float:
        """Share of the frame covered by the bounding box."""
        return self.bounding_box.area

    @property
    def aspect_ratio(self) -> float:
        """Width over height of the bounding box in normalized units.

        This is not the pixel aspect ratio: on a non-square frame the two
        differ by the frame's own width/height ratio. Detector aspect
        constraints are checked against this normalized value.
        """
        return self.bounding_box.aspect_ratio

    @property
    def edge_lengths(self) -> list[float]:
        """Lengths of the four edges, walking clockwise from top_left."""
        points = self.points
        return [
            points[i].distance_to(points[(i + 1) % 4])
            for i in range(4)
        ]

    def to_pixels(self, width: int, height: int) -> list[Point]:
        """Convert to pixel coordinates with y pointing down.

        Returns:
            Corners ordered top_left, top_right, bottom_right, bottom_left
        """
        flip = self.origin == CoordinateOrigin.BOTTOM_LEFT
        return [
            Point(p.x * width, ((1.0 - p.y) if flip else p.y) * height)
            for p in self.points
        ]

    @classmethod
    def full_frame(cls, confidence: float = 1.0) -> Quadrilateral:
        """Quadrilateral covering the whole image."""
        return cls(
            top_left=Point(0.0, 0.0),
            top_right=Point(1.0, 0.0),
            bottom_left=Point(0.0, 1.0),
            bottom_right=Point(1.0, 1.0),
            confidence=confidence,
        )

    @classmethod
    def from_pixel_corners(
        cls,
        corners: Sequence[tuple[float, float]],
        width: int,
        height: int,
        confidence: float = 1.0
    ) -> Quadrilateral:
        """Create from pixel corners ordered top_left, top_right, bottom_right, bottom_left."""
        if len(corners) != 4:
            raise ValueError(f"Expected 4 corners, got {len(corners)}")
        tl, tr, br, bl = (Point(x / width, y / height) for x, y in corners)
        return cls(
            top_left=tl,
            top_right=tr,
            bottom_left=bl,
            bottom_right=br,
            confidence=confidence,
        )
