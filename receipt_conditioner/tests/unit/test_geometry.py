"""Unit tests for geometry value objects."""

import pytest
from receipt_conditioner.domain.value_objects.geometry import (
    BoundingBox, CoordinateOrigin, Point, Quadrilateral
)


class TestPoint:
    """Tests for Point."""

    def test_distance(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == 5.0

    def test_hashable(self):
        assert len({Point(1, 1), Point(1, 1)}) == 1


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_dimensions(self):
        box = BoundingBox(0.1, 0.2, 0.5, 0.8)
        assert box.width == pytest.approx(0.4)
        assert box.height == pytest.approx(0.6)
        assert box.area == pytest.approx(0.24)
        assert box.aspect_ratio == pytest.approx(0.4 / 0.6)

    def test_degenerate_aspect(self):
        assert BoundingBox(0, 0.5, 1, 0.5).aspect_ratio == 0.0


class TestQuadrilateral:
    """Tests for Quadrilateral."""

    def test_full_frame(self):
        quad = Quadrilateral.full_frame()
        assert quad.relative_area == 1.0
        assert quad.aspect_ratio == 1.0
        assert quad.edge_lengths == [1.0, 1.0, 1.0, 1.0]

    def test_clockwise_iteration(self):
        quad = Quadrilateral.full_frame()
        assert list(quad) == [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]

    def test_relative_area_uses_bounding_box(self):
        quad = Quadrilateral(
            top_left=Point(0.2, 0.1),
            top_right=Point(0.8, 0.2),
            bottom_left=Point(0.1, 0.9),
            bottom_right=Point(0.9, 0.8),
        )
        assert quad.relative_area == pytest.approx(0.8 * 0.8)

    def test_to_pixels_top_left(self):
        quad = Quadrilateral.full_frame()
        assert quad.to_pixels(200, 100) == [
            Point(0, 0), Point(200, 0), Point(200, 100), Point(0, 100)
        ]

    def test_to_pixels_bottom_left_flips(self):
        quad = Quadrilateral(
            top_left=Point(0.0, 1.0),
            top_right=Point(1.0, 1.0),
            bottom_left=Point(0.0, 0.0),
            bottom_right=Point(1.0, 0.0),
            origin=CoordinateOrigin.BOTTOM_LEFT,
        )
        assert quad.to_pixels(200, 100) == Quadrilateral.full_frame().to_pixels(200, 100)

    def test_aspect_ratio_is_normalized(self):
        quad = Quadrilateral.from_pixel_corners(
            [(0, 0), (200, 0), (200, 100), (0, 100)], 200, 100
        )
        assert quad.aspect_ratio == 1.0
        pixels = quad.to_pixels(200, 100)
        assert pixels[1].x / pixels[2].y == 2.0

    def test_from_pixel_corners(self):
        quad = Quadrilateral.from_pixel_corners(
            [(10, 20), (90, 20), (90, 80), (10, 80)], 100, 100, confidence=0.8
        )
        assert quad.top_left == Point(0.1, 0.2)
        assert quad.bottom_right == Point(0.9, 0.8)
        assert quad.confidence == 0.8
        assert quad.origin == CoordinateOrigin.TOP_LEFT

    def test_from_pixel_corners_requires_four(self):
        with pytest.raises(ValueError):
            Quadrilateral.from_pixel_corners([(0, 0), (1, 0), (1, 1)], 10, 10)
