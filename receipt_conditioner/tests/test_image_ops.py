"""Tests for pixel operations."""

import numpy as np
import pytest

from ..core.image_ops import (
    adjust_brightness,
    adjust_contrast,
    adjust_exposure,
    adjust_saturation,
    mean_luminance_center,
    reduce_noise,
    resize_to_fit,
    sharpen_luminance,
    sharpness_score,
    stack_vertically,
    to_float,
    to_uint8,
    warp_perspective,
)


def _grey(value: float, shape=(8, 8)) -> np.ndarray:
    return np.full((*shape, 3), value, dtype=np.float32)


class TestConversions:
    """Test uint8/float conversion."""

    def test_round_trip_is_exact(self):
        img = np.arange(256, dtype=np.uint8).reshape(16, 16, 1).repeat(3, axis=2)
        assert np.array_equal(to_uint8(to_float(img)), img)

    def test_to_uint8_clips(self):
        data = np.array([[[-0.5, 0.5, 1.5]]], dtype=np.float32)
        assert to_uint8(data).tolist() == [[[0, 128, 255]]]


class TestColourFilters:
    """Test the float colour filters."""

    def test_exposure_one_stop_doubles(self):
        out = adjust_exposure(_grey(0.25), 1.0)
        assert np.allclose(out, 0.5)

    def test_exposure_clips_at_white(self):
        assert np.allclose(adjust_exposure(_grey(0.8), 1.0), 1.0)

    def test_brightness_adds(self):
        assert np.allclose(adjust_brightness(_grey(0.3), 0.1), 0.4)

    def test_contrast_keeps_mid_grey(self):
        assert np.allclose(adjust_contrast(_grey(0.5), 1.4), 0.5)

    def test_contrast_stretches(self):
        assert np.allclose(adjust_contrast(_grey(0.7), 2.0), 0.9)

    def test_zero_saturation_is_grey(self):
        img = np.zeros((4, 4, 3), dtype=np.float32)
        img[..., 0] = 1.0
        out = adjust_saturation(img, 0.0)
        assert np.allclose(out[..., 0], out[..., 1])
        assert np.allclose(out[..., 0], 0.299, atol=1e-5)

    def test_unit_saturation_is_identity(self):
        rng = np.random.default_rng(1)
        img = rng.random((6, 6, 3), dtype=np.float32)
        assert np.allclose(adjust_saturation(img, 1.0), img, atol=1e-6)

    def test_sharpen_flat_image_unchanged(self):
        img = _grey(0.4, shape=(20, 20))
        assert np.allclose(sharpen_luminance(img, 0.8), img, atol=1e-4)

    def test_sharpen_increases_edge_contrast(self):
        img = _grey(0.3, shape=(20, 20))
        img[:, 10:] = 0.7
        out = sharpen_luminance(img, 0.8)
        assert out[5, 9, 0] < 0.3
        assert out[5, 10, 0] > 0.7

    def test_sharpen_zero_amount_is_noop(self):
        img = _grey(0.4)
        assert sharpen_luminance(img, 0.0) is img

    def test_noise_reduction_keeps_strong_edges(self):
        img = _grey(0.0, shape=(10, 10))
        img[:, 5:] = 1.0
        assert np.allclose(reduce_noise(img, 0.03), img, atol=1e-6)

    def test_noise_reduction_smooths_small_fluctuations(self):
        img = _grey(0.5, shape=(9, 9))
        img[4, 4] = 0.51
        out = reduce_noise(img, 0.03)
        assert abs(out[4, 4, 0] - 0.5) < 0.01


class TestMeasurements:
    """Test luminance and sharpness."""

    def test_luminance_samples_center_only(self):
        img = np.zeros((100, 100, 3), dtype=np.uint8)
        img[25:75, 25:75] = 255
        assert mean_luminance_center(img) == pytest.approx(1.0)

    def test_luminance_uses_rec601_weights(self):
        img = np.zeros((10, 10, 3), dtype=np.uint8)
        img[..., 1] = 255
        assert mean_luminance_center(img) == pytest.approx(0.587, abs=1e-4)

    def test_flat_image_has_no_sharpness(self):
        img = np.full((50, 50, 3), 200, dtype=np.uint8)
        assert sharpness_score(img) < 1e-6

    def test_checkerboard_is_maximally_sharp(self):
        yy, xx = np.mgrid[0:50, 0:50]
        board = np.where((xx + yy) % 2 == 0, 255, 0).astype(np.uint8)
        img = np.repeat(board[:, :, None], 3, axis=2)
        assert sharpness_score(img) == 1.0

    def test_blur_lowers_sharpness(self):
        import cv2
        rng = np.random.default_rng(3)
        img = rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)
        blurred = cv2.GaussianBlur(img, (0, 0), 4)
        assert sharpness_score(blurred) < sharpness_score(img)


class TestWarpPerspective:
    """Test quadrilateral rectification."""

    def test_full_frame_is_identity(self):
        rng = np.random.default_rng(7)
        img = rng.integers(0, 256, size=(40, 60, 3), dtype=np.uint8)
        out = warp_perspective(img, [(0, 0), (60, 0), (60, 40), (0, 40)])
        assert out.shape == img.shape
        assert np.abs(out.astype(int) - img.astype(int)).max() <= 1

    def test_output_size_uses_longest_edges(self):
        img = np.zeros((100, 100, 3), dtype=np.uint8)
        # Trapezoid: top edge 40, bottom edge 60, sides 50
        corners = [(30, 20), (70, 20), (80, 70), (20, 70)]
        out = warp_perspective(img, corners)
        assert out.shape[1] == 60
        assert out.shape[0] == round(np.hypot(10, 50))

    def test_axis_aligned_crop(self):
        img = np.zeros((100, 100, 3), dtype=np.uint8)
        img[20:60, 10:90] = 255
        out = warp_perspective(img, [(10, 20), (90, 20), (90, 60), (10, 60)])
        assert out.shape == (40, 80, 3)
        assert out[5:-5, 5:-5].min() == 255


class TestResizeToFit:
    """Test transmission downscaling."""

    def test_downscales_longest_side(self):
        img = np.zeros((1000, 4000, 3), dtype=np.uint8)
        out = resize_to_fit(img, 2048)
        assert out.shape == (512, 2048, 3)

    def test_never_upscales(self):
        img = np.zeros((100, 50, 3), dtype=np.uint8)
        assert resize_to_fit(img, 2048) is img


class TestStackVertically:
    """Test vertical concatenation."""

    def test_dimensions(self):
        parts = [
            np.zeros((100, 52, 3), dtype=np.uint8),
            np.zeros((80, 50, 3), dtype=np.uint8),
            np.zeros((120, 55, 3), dtype=np.uint8),
        ]
        out = stack_vertically(parts)
        assert out.shape == (300, 55, 3)

    def test_parts_in_order_with_white_padding(self):
        top = np.full((10, 20, 3), 10, dtype=np.uint8)
        bottom = np.full((5, 30, 3), 20, dtype=np.uint8)
        out = stack_vertically([top, bottom])
        assert (out[:10, :20] == 10).all()
        assert (out[:10, 20:] == 255).all()
        assert (out[10:, :] == 20).all()

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            stack_vertically([])
