"""Image entity - immutable pixel buffer."""

from __future__ import annotations

import io
from dataclasses import dataclass, replace
from pathlib import Path

import numpy as np
from PIL import Image as PILImage
from PIL import ImageOps, UnidentifiedImageError

from ...exceptions import UndecodableImageError


@dataclass(frozen=True, slots=True, eq=False)
class RawImage:
    """Domain entity representing a captured receipt photo.

    Pixels are an RGB ``uint8`` array of shape (height, width, 3) that is
    made read-only on construction, so an image never changes once captured.
    ``enhanced`` records that the enhancement pipeline produced this image.
    """
    pixels: np.ndarray
    source_path: Path | None = None
    enhanced: bool = False

    def __post_init__(self) -> None:
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise TypeError(f"pixels must be a numpy array, got {type(pixels).__name__}")
        if pixels.ndim == 2:
            pixels = np.repeat(pixels[:, :, None], 3, axis=2)
        elif pixels.ndim == 3 and pixels.shape[2] == 4:
            pixels = pixels[:, :, :3]
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Expected an HxWx3 array, got shape {self.pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Image must have non-zero width and height")
        if pixels.dtype != np.uint8:
            pixels = np.clip(pixels, 0, 255).astype(np.uint8)
        if pixels.flags.writeable or pixels is not self.pixels:
            pixels = np.ascontiguousarray(pixels).copy()
            pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    def with_pixels(self, pixels: np.ndarray, enhanced: bool | None = None) -> RawImage:
        """Return a new image with different pixels and the same provenance."""
        return replace(
            self,
            pixels=pixels,
            enhanced=self.enhanced if enhanced is None else enhanced
        )

    def to_array(self) -> np.ndarray:
        """Writable RGB copy of the pixels."""
        return self.pixels.copy()

    def to_pil(self) -> PILImage.Image:
        return PILImage.fromarray(self.pixels)

    def to_jpeg(self, quality: int = 90) -> bytes:
        """Encode as JPEG bytes."""
        buffer = io.BytesIO()
        self.to_pil().save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()

    def save(self, path: Path | str, quality: int = 95) -> None:
        """Save image to path (format from the suffix)."""
        path = Path(path)
        if path.suffix.lower() in ('.jpg', '.jpeg', '.jpe'):
            self.to_pil().save(path, quality=quality)
        else:
            self.to_pil().save(path)

    @classmethod
    def from_array(cls, data: np.ndarray, source_path: Path | None = None) -> RawImage:
        """Create from an RGB (or greyscale) numpy array."""
        return cls(pixels=np.array(data, copy=True), source_path=source_path)

    @classmethod
    def from_pil(cls, image: PILImage.Image, source_path: Path | None = None) -> RawImage:
        """Create from a Pillow image, honouring EXIF orientation."""
        image = ImageOps.exif_transpose(image)
        return cls(pixels=np.asarray(image.convert("RGB")), source_path=source_path)

    @classmethod
    def from_bytes(cls, data: bytes, source_path: Path | None = None) -> RawImage:
        """Decode an encoded image buffer.

        Raises:
            UndecodableImageError: If the buffer is not an image
        """
        path_str = str(source_path) if source_path else None
        if not data:
            raise UndecodableImageError("Empty image buffer", image_path=path_str)
        try:
            with PILImage.open(io.BytesIO(data)) as pil_image:
                pil_image.load()
                return cls.from_pil(pil_image, source_path=source_path)
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
            raise UndecodableImageError(
                f"Cannot decode image: {e}", image_path=path_str
            ) from e

    @classmethod
    def from_file(cls, path: Path | str) -> RawImage:
        """Load and decode an image file.

        Raises:
            FileNotFoundError: If the file does not exist
            UndecodableImageError: If the file is not an image
        """
        path = Path(path)
        return cls.from_bytes(path.read_bytes(), source_path=path)
