"""Configuration value objects with validation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from pydantic import model_validator

from ...config import ENV_PREFIX
from ...exceptions import ConfigurationError


class EnhancementPreset(str, Enum):
    """Named enhancement parameter sets."""
    RECEIPT = "receipt"
    OCR_OPTIMIZED = "ocr_optimized"


@dataclass(frozen=True, slots=True)
class EnhancementConfig:
    """Parameters for the enhancement filter chain."""
    exposure_adjustment: float  # EV stops
    brightness_boost: float  # added to [0, 1] intensities
    contrast_multiplier: float
    sharpness_amount: float
    noise_reduction_amount: float
    saturation: float = 1.0

    @classmethod
    def for_preset(cls, preset: EnhancementPreset | str) -> EnhancementConfig:
        """Look up a canonical preset."""
        return ENHANCEMENT_PRESETS[EnhancementPreset(preset)]


ENHANCEMENT_PRESETS: dict[EnhancementPreset, EnhancementConfig] = {
    # Display-oriented
    EnhancementPreset.RECEIPT: EnhancementConfig(
        exposure_adjustment=0.5,
        brightness_boost=0.1,
        contrast_multiplier=1.2,
        sharpness_amount=0.6,
        noise_reduction_amount=0.02,
        saturation=1.0,
    ),
    # Transmission-oriented
    EnhancementPreset.OCR_OPTIMIZED: EnhancementConfig(
        exposure_adjustment=0.3,
        brightness_boost=0.15,
        contrast_multiplier=1.4,
        sharpness_amount=0.8,
        noise_reduction_amount=0.03,
        saturation=0.0,
    ),
}


class ConditioningConfig(BaseModel):
    """Tunable thresholds and limits for the conditioning pipeline."""

    model_config = {"frozen": True}

    # External capability calls (seconds, None waits forever)
    detection_timeout: float | None = Field(default=10.0, gt=0)
    recognition_timeout: float | None = Field(default=10.0, gt=0)

    # Document detection constraints
    max_candidates: int = Field(default=5, ge=1, le=50)
    min_aspect_ratio: float = Field(default=0.2, gt=0)
    max_aspect_ratio: float = Field(default=5.0, gt=0)
    min_relative_size: float = Field(default=0.3, ge=0.0, le=1.0)
    min_detection_confidence: float = Field(default=0.7, ge=0.0, le=1.0)

    # Quality analysis
    low_light_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    overexposed_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    blur_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    rectangle_quality_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    min_frame_aspect_ratio: float = Field(default=0.5, gt=0)
    max_frame_aspect_ratio: float = Field(default=2.0, gt=0)

    # Per-image receipt analysis
    min_text_regions: int = Field(default=3, ge=1)
    sample_text_blocks: int = Field(default=3, ge=1)

    # Stitching
    min_stitch_parts: int = Field(default=2, ge=2)
    max_stitch_parts: int = Field(default=4, ge=2, le=16)

    # Transmission
    max_transmission_dimension: int = Field(default=2048, ge=64)
    jpeg_quality_enhanced: int = Field(default=95, ge=1, le=100)
    jpeg_quality_default: int = Field(default=90, ge=1, le=100)

    @model_validator(mode='after')
    def check_ranges(self) -> ConditioningConfig:
        """Reject inverted ranges."""
        if self.min_aspect_ratio >= self.max_aspect_ratio:
            raise ValueError("min_aspect_ratio must be below max_aspect_ratio")
        if self.min_frame_aspect_ratio >= self.max_frame_aspect_ratio:
            raise ValueError("min_frame_aspect_ratio must be below max_frame_aspect_ratio")
        if self.low_light_threshold >= self.overexposed_threshold:
            raise ValueError("low_light_threshold must be below overexposed_threshold")
        if self.min_stitch_parts > self.max_stitch_parts:
            raise ValueError("min_stitch_parts must not exceed max_stitch_parts")
        return self

    @property
    def aspect_ratio_range(self) -> tuple[float, float]:
        return (self.min_aspect_ratio, self.max_aspect_ratio)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> ConditioningConfig:
        """Build from RECEIPT_CONDITIONER_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Explicit values, taking precedence over the environment

        Raises:
            ConfigurationError: If a value fails validation
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            raw = raw.strip()
            values[name] = None if raw.lower() in ("", "none") else raw
        values.update(overrides)

        try:
            return cls(**values)
        except PydanticValidationError as e:
            errors = e.errors()
            key = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else None
            raise ConfigurationError(f"Invalid configuration: {e}", config_key=key) from e


__all__ = [
    'EnhancementPreset',
    'EnhancementConfig',
    'ENHANCEMENT_PRESETS',
    'ConditioningConfig',
]
