"""Enhancement pipeline - ordered, named filter steps over float RGB."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable

import numpy as np

from ...core import image_ops
from ...core.image_ops import FloatImage
from ...domain.entities.image import RawImage
from ...domain.value_objects.config import (
    ConditioningConfig,
    EnhancementConfig,
    EnhancementPreset,
)

logger = logging.getLogger(__name__)

FilterFn = Callable[[FloatImage], "FloatImage | None"]


@dataclass(frozen=True, slots=True)
class FilterStep:
    """A single named stage of the chain."""
    name: str
    apply: FilterFn


class EnhancementPipeline:
    """Immutable ordered chain of filter steps.

    A step that raises, returns None or changes the image shape is skipped
    and the previous stage's output flows on unchanged.
    """

    def __init__(self, steps: Iterable[FilterStep] = ()):
        self._steps = tuple(steps)

    def then(self, name: str, fn: FilterFn) -> EnhancementPipeline:
        """Return a new pipeline with one more step at the end."""
        return EnhancementPipeline(self._steps + (FilterStep(name, fn),))

    def extend(self, other: EnhancementPipeline) -> EnhancementPipeline:
        return EnhancementPipeline(self._steps + other.steps)

    @property
    def steps(self) -> tuple[FilterStep, ...]:
        return self._steps

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def run(self, image: RawImage) -> RawImage:
        """Apply every step in order and mark the result as enhanced."""
        data = image_ops.to_float(image.pixels)

        for step in self._steps:
            try:
                out = step.apply(data)
            except Exception as e:
                logger.warning(f"Filter '{step.name}' failed, passing through: {e}")
                continue
            if not isinstance(out, np.ndarray):
                logger.warning(
                    f"Filter '{step.name}' produced no image ({type(out).__name__}), passing through"
                )
                continue
            if out.shape != data.shape:
                logger.warning(
                    f"Filter '{step.name}' changed shape {data.shape} -> {out.shape}, "
                    f"passing through"
                )
                continue
            data = np.asarray(out, dtype=np.float32)

        return image.with_pixels(image_ops.to_uint8(data), enhanced=True)


def receipt_chain(config: EnhancementConfig) -> EnhancementPipeline:
    """Display-oriented chain built from any enhancement config."""
    def exposure_and_brightness(img: FloatImage) -> FloatImage:
        img = image_ops.adjust_exposure(img, config.exposure_adjustment)
        return image_ops.adjust_brightness(img, config.brightness_boost)

    return (
        EnhancementPipeline()
        .then("exposure_and_brightness", exposure_and_brightness)
        .then("contrast", partial(image_ops.adjust_contrast, multiplier=config.contrast_multiplier))
        .then("sharpen_luminance", partial(image_ops.sharpen_luminance, amount=config.sharpness_amount))
        .then("normalize_saturation", partial(image_ops.adjust_saturation, saturation=config.saturation))
        .then("reduce_noise", partial(image_ops.reduce_noise, level=config.noise_reduction_amount))
    )


def ocr_tail(config: EnhancementConfig) -> EnhancementPipeline:
    """Extra sharpening and greyscale contrast for text extraction."""
    def ocr_color_controls(img: FloatImage) -> FloatImage:
        img = image_ops.adjust_contrast(img, config.contrast_multiplier)
        return image_ops.adjust_saturation(img, config.saturation)

    return (
        EnhancementPipeline()
        .then("sharpen_luminance", partial(image_ops.sharpen_luminance, amount=config.sharpness_amount))
        .then("ocr_color_controls", ocr_color_controls)
    )


class EnhancementService:
    """Runs the display chain and prepares images for transmission."""

    def __init__(self, config: ConditioningConfig | None = None):
        self._config = config or ConditioningConfig()
        self._tail = ocr_tail(EnhancementConfig.for_preset(EnhancementPreset.OCR_OPTIMIZED))

    def enhance(
        self,
        image: RawImage,
        preset: EnhancementPreset | EnhancementConfig = EnhancementPreset.RECEIPT
    ) -> RawImage:
        """Apply the enhancement chain for a preset or explicit config."""
        config = preset if isinstance(preset, EnhancementConfig) else EnhancementConfig.for_preset(preset)
        return receipt_chain(config).run(image)

    def optimize_for_transmission(self, image: RawImage) -> RawImage:
        """Downscale to the transmission limit, then apply the OCR tail."""
        resized = image_ops.resize_to_fit(image.pixels, self._config.max_transmission_dimension)
        if resized is not image.pixels:
            image = image.with_pixels(resized)
        return self._tail.run(image)

    def encode_for_transmission(self, image: RawImage) -> bytes:
        """JPEG bytes, at higher quality for enhanced images."""
        quality = (
            self._config.jpeg_quality_enhanced if image.enhanced
            else self._config.jpeg_quality_default
        )
        return image.to_jpeg(quality=quality)
