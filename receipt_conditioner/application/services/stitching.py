"""Stitching service - merges receipt segments or processes them separately."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ...config import SEPARATE_RECEIPTS_CONFIDENCE
from ...core.image_ops import stack_vertically
from ...domain.entities.image import RawImage
from ...domain.entities.receipt_part import ReceiptPartAnalysis, StitchingPlan
from ...domain.entities.results import MultiPartResult
from ...domain.services.stitching_rules import plan_stitching, stitching_confidence
from ...domain.value_objects.config import ConditioningConfig, EnhancementPreset
from .enhancement import EnhancementService

logger = logging.getLogger(__name__)


class StitchingPlanner:
    """Decide whether analyzed parts form one receipt."""

    def __init__(self, config: ConditioningConfig | None = None):
        self._config = config or ConditioningConfig()

    def plan(self, parts: Sequence[ReceiptPartAnalysis]) -> StitchingPlan:
        plan = plan_stitching(
            parts,
            min_parts=self._config.min_stitch_parts,
            max_parts=self._config.max_stitch_parts,
        )
        logger.info(
            f"Stitching plan for {len(parts)} parts: "
            f"{'stitch' if plan.should_stitch else 'separate'} ({plan.reason})"
        )
        return plan


class Stitcher:
    """Produce the batch output for a stitching plan."""

    def __init__(self, enhancer: EnhancementService):
        self._enhancer = enhancer

    async def _enhance_all(self, images: Sequence[RawImage]) -> list[RawImage]:
        return list(await asyncio.gather(*(
            asyncio.to_thread(self._enhancer.enhance, img, EnhancementPreset.RECEIPT)
            for img in images
        )))

    async def stitch(self, plan: StitchingPlan) -> MultiPartResult:
        """Enhance each part and stack them top to bottom in capture order."""
        if not plan.should_stitch or not plan.ordered_parts:
            raise ValueError("Plan does not call for stitching")

        parts = plan.ordered_parts
        enhanced = await self._enhance_all([p.image for p in parts])
        composite = await asyncio.to_thread(stack_vertically, [img.pixels for img in enhanced])
        stitched = RawImage(pixels=composite, enhanced=True)

        confidence = stitching_confidence(parts)
        logger.info(
            f"Stitched {len(parts)} parts into {stitched.width}x{stitched.height} "
            f"(confidence {confidence:.2f})"
        )
        return MultiPartResult(
            processed_images=(stitched,),
            is_stitched=True,
            original_count=len(parts),
            confidence=confidence,
            note=f"Combined {len(parts)} receipt parts into single image",
        )

    async def process_separately(self, images: Sequence[RawImage]) -> MultiPartResult:
        """Enhance each image on its own, keeping input order."""
        enhanced = await self._enhance_all(images)
        return MultiPartResult(
            processed_images=tuple(enhanced),
            is_stitched=False,
            original_count=len(images),
            confidence=SEPARATE_RECEIPTS_CONFIDENCE,
            note=f"Processed {len(images)} separate receipts",
        )
