"""Pixel operations for receipt conditioning.

Colour filters work on float32 RGB arrays with intensities in [0, 1] so
they can be chained without repeated quantization. Everything else takes
and returns ``uint8`` RGB arrays.
"""

import logging
from typing import Sequence

import cv2
import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

# Type aliases
ImageArray = npt.NDArray[np.uint8]  # HxWx3 RGB
FloatImage = npt.NDArray[np.float32]  # HxWx3 RGB in [0, 1]
Corners = Sequence[tuple[float, float]]  # TL, TR, BR, BL in pixels

# Rec. 601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)

# Discrete Laplacian used as the sharpness high-pass
LAPLACIAN_KERNEL = np.array([
    [0, -1, 0],
    [-1, 4, -1],
    [0, -1, 0]
], dtype=np.float32)
SHARPNESS_SCALE = 10.0

UNSHARP_SIGMA = 1.5
DENOISE_KERNEL = (3, 3)
WHITE = (255, 255, 255)


def to_float(img: ImageArray) -> FloatImage:
    """Convert uint8 RGB to float32 in [0, 1]."""
    return img.astype(np.float32) / 255.0


def to_uint8(img: FloatImage) -> ImageArray:
    """Convert float RGB back to uint8, clipping out-of-range values."""
    return np.clip(np.rint(img * 255.0), 0, 255).astype(np.uint8)


def luma(img: FloatImage) -> npt.NDArray[np.float32]:
    """Rec. 601 luminance plane of a float RGB image."""
    return (img @ LUMA_WEIGHTS).astype(np.float32)


# ---------------------------------------------------------------------------
# Colour filters
# ---------------------------------------------------------------------------

def adjust_exposure(img: FloatImage, ev: float) -> FloatImage:
    """Scale intensities by 2**ev."""
    return np.clip(img * (2.0 ** ev), 0.0, 1.0)


def adjust_brightness(img: FloatImage, amount: float) -> FloatImage:
    return np.clip(img + amount, 0.0, 1.0)


def adjust_contrast(img: FloatImage, multiplier: float) -> FloatImage:
    """Stretch intensities around mid-grey."""
    return np.clip((img - 0.5) * multiplier + 0.5, 0.0, 1.0)


def adjust_saturation(img: FloatImage, saturation: float) -> FloatImage:
    """Blend between the luminance plane (0) and the original colours (1)."""
    grey = luma(img)[:, :, None]
    return np.clip(grey + saturation * (img - grey), 0.0, 1.0)


def sharpen_luminance(img: FloatImage, amount: float) -> FloatImage:
    """Unsharp mask applied to the luminance channel only.

    Chroma is left untouched so sharpening does not introduce colour
    fringes around printed text.
    """
    if amount <= 0:
        return img
    ycrcb = cv2.cvtColor(img.astype(np.float32), cv2.COLOR_RGB2YCrCb)
    y = ycrcb[:, :, 0]
    blurred = cv2.GaussianBlur(y, (0, 0), UNSHARP_SIGMA)
    ycrcb[:, :, 0] = y + amount * (y - blurred)
    return np.clip(cv2.cvtColor(ycrcb, cv2.COLOR_YCrCb2RGB), 0.0, 1.0)


def reduce_noise(img: FloatImage, level: float) -> FloatImage:
    """Smooth small fluctuations while keeping edges.

    Pixels that differ from their local average by less than ``level`` are
    replaced by that average; stronger differences are treated as detail.
    """
    if level <= 0:
        return img
    blurred = cv2.GaussianBlur(img.astype(np.float32), DENOISE_KERNEL, 0)
    noise = np.abs(img - blurred) < level
    return np.where(noise, blurred, img).astype(np.float32)


# ---------------------------------------------------------------------------
# Measurements
# ---------------------------------------------------------------------------

def mean_luminance_center(img: ImageArray) -> float:
    """Mean luminance in [0, 1] over the central 50% x 50% region."""
    h, w = img.shape[:2]
    y0, y1 = h // 4, max(h // 4 + 1, (3 * h) // 4)
    x0, x1 = w // 4, max(w // 4 + 1, (3 * w) // 4)
    center = to_float(img[y0:y1, x0:x1])
    return float(luma(center).mean())


def sharpness_score(img: ImageArray) -> float:
    """Edge response over the whole frame, normalized to [0, 1].

    The Laplacian response is clamped at zero, averaged, scaled by 10 and
    capped at 1.0. Flat or defocused images score near zero.
    """
    plane = luma(to_float(img))
    response = cv2.filter2D(plane, cv2.CV_32F, LAPLACIAN_KERNEL)
    score = float(np.maximum(response, 0.0).mean()) * SHARPNESS_SCALE
    return min(1.0, score)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def _edge(a: tuple[float, float], b: tuple[float, float]) -> float:
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))


def warp_perspective(img: ImageArray, corners: Corners) -> ImageArray:
    """Map a quadrilateral region onto an upright rectangle.

    Output width is the longer of the top and bottom edges, output height
    the longer of the left and right edges. A quadrilateral equal to the
    image frame reproduces the input.

    Args:
        img: Source image
        corners: Pixel corners ordered top_left, top_right, bottom_right, bottom_left

    Returns:
        Rectified image
    """
    tl, tr, br, bl = [(float(x), float(y)) for x, y in corners]

    width = max(1, int(round(max(_edge(tl, tr), _edge(bl, br)))))
    height = max(1, int(round(max(_edge(tl, bl), _edge(tr, br)))))

    src = np.array([tl, tr, br, bl], dtype=np.float32)
    dst = np.array([
        [0, 0],
        [width, 0],
        [width, height],
        [0, height]
    ], dtype=np.float32)

    matrix = cv2.getPerspectiveTransform(src, dst)
    return cv2.warpPerspective(
        img, matrix, (width, height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_REPLICATE
    )


def resize_to_fit(img: ImageArray, max_dimension: int) -> ImageArray:
    """Downscale so the longer side is at most max_dimension (never upscales)."""
    h, w = img.shape[:2]
    longest = max(h, w)
    if longest <= max_dimension:
        return img
    scale = max_dimension / longest
    new_size = (max(1, int(round(w * scale))), max(1, int(round(h * scale))))
    logger.debug(f"Resizing {w}x{h} -> {new_size[0]}x{new_size[1]}")
    return cv2.resize(img, new_size, interpolation=cv2.INTER_AREA)


def stack_vertically(images: Sequence[ImageArray]) -> ImageArray:
    """Concatenate images top to bottom on a white canvas.

    Canvas width is the widest part and height the sum of the parts; each
    part is drawn left-aligned at its own size.
    """
    if not images:
        raise ValueError("No images to stack")

    width = max(img.shape[1] for img in images)
    height = sum(img.shape[0] for img in images)
    canvas = np.full((height, width, 3), WHITE, dtype=np.uint8)

    y = 0
    for img in images:
        h, w = img.shape[:2]
        canvas[y:y + h, :w] = img
        y += h

    return canvas
