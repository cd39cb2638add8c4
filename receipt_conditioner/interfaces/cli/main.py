"""Command line interface for receipt conditioning."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ...application.services.orchestrator import ReceiptImageProcessor
from ...config import SUPPORTED_IMAGE_EXTENSIONS, ProcessingType
from ...domain.entities.image import RawImage
from ...domain.value_objects.config import ConditioningConfig
from ...exceptions import ReceiptConditionerError, UndecodableImageError
from ...infrastructure.plugin_registry import PluginRegistry
from ...utils.env import setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="receipt-conditioner",
        description="Condition receipt photos for text extraction"
    )

    parser.add_argument(
        "--detector",
        default="opencv",
        help="Rectangle detector plugin (default: opencv)"
    )
    parser.add_argument(
        "--recognizer",
        default="paddleocr",
        help="Text recognizer plugin (default: paddleocr)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Timeout for detector and recognizer calls (default: 10)"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on undecodable input instead of skipping it"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    single = subparsers.add_parser("single", help="Condition one receipt photo")
    single.add_argument("input", type=Path, help="Input image")
    single.add_argument("-o", "--output", type=Path, required=True, help="Output folder")
    single.add_argument(
        "--type",
        choices=[t.value for t in ProcessingType],
        default=ProcessingType.CAMERA.value,
        help="Where the image came from (default: camera)"
    )
    single.add_argument(
        "--for-transmission",
        action="store_true",
        help="Downscale and apply the OCR-oriented filters before saving"
    )

    batch = subparsers.add_parser(
        "batch",
        help="Condition several photos, stitching them when they are one receipt"
    )
    batch.add_argument("inputs", type=Path, nargs="+", help="Input images or a folder")
    batch.add_argument("-o", "--output", type=Path, required=True, help="Output folder")
    batch.add_argument(
        "--for-transmission",
        action="store_true",
        help="Downscale and apply the OCR-oriented filters before saving"
    )

    quality = subparsers.add_parser("quality", help="Report quality issues without saving")
    quality.add_argument("inputs", type=Path, nargs="+", help="Input images or a folder")

    return parser


def collect_files(paths: list[Path]) -> list[Path]:
    """Expand folders into their supported image files (sorted by name)."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(
                f for f in path.iterdir()
                if f.is_file() and f.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS
            ))
        else:
            files.append(path)
    return files


def load_images(files: list[Path], strict: bool) -> list[RawImage]:
    """Decode files, skipping undecodable ones unless strict."""
    images: list[RawImage] = []
    for file_path in files:
        try:
            images.append(RawImage.from_file(file_path))
        except UndecodableImageError as e:
            if strict:
                raise
            logger.error(f"Skipping {file_path.name}: {e}")
    return images


def save_output(
    processor: ReceiptImageProcessor,
    image: RawImage,
    output_file: Path,
    for_transmission: bool
) -> Path:
    """Write an image as JPEG, optionally prepared for transmission."""
    if for_transmission:
        image = processor.optimize_for_transmission(image)
    output_file = output_file.with_suffix(".jpg")
    output_file.write_bytes(processor.encode_for_transmission(image))
    logger.info(f"Saved: {output_file.name} ({image.width}x{image.height})")
    return output_file


async def run_single(processor: ReceiptImageProcessor, parsed: argparse.Namespace) -> int:
    image = RawImage.from_file(parsed.input)
    result = await processor.process_single(image, parsed.type)

    logger.info(
        f"{parsed.input.name}: confidence {result.overall_confidence:.2f} "
        f"({result.quality_label})"
    )
    for issue in result.quality_issues:
        logger.warning(f"  - {issue}")

    parsed.output.mkdir(parents=True, exist_ok=True)
    save_output(
        processor, result.image,
        parsed.output / f"conditioned_{parsed.input.stem}",
        parsed.for_transmission
    )
    return 0


async def run_batch(processor: ReceiptImageProcessor, parsed: argparse.Namespace) -> int:
    files = collect_files(parsed.inputs)
    images = load_images(files, parsed.strict)
    if not images:
        logger.error("No image files found")
        return 1

    logger.info(f"Processing {len(images)} image(s)...")
    result = await processor.process_batch(images)
    logger.info(f"{result.note} (confidence {result.confidence:.2f})")

    parsed.output.mkdir(parents=True, exist_ok=True)
    if result.is_stitched:
        save_output(
            processor, result.processed_images[0],
            parsed.output / "stitched_receipt",
            parsed.for_transmission
        )
    else:
        for source, image in zip(images, result.processed_images):
            stem = source.source_path.stem if source.source_path else "receipt"
            save_output(
                processor, image,
                parsed.output / f"conditioned_{stem}",
                parsed.for_transmission
            )
    return 0


async def run_quality(processor: ReceiptImageProcessor, parsed: argparse.Namespace) -> int:
    images = load_images(collect_files(parsed.inputs), parsed.strict)
    if not images:
        logger.error("No image files found")
        return 1

    analyses = await asyncio.gather(*(processor.analyze_quality(img) for img in images))
    for image, analysis in zip(images, analyses):
        name = image.source_path.name if image.source_path else "image"
        print(f"{name}: confidence {analysis.confidence:.2f}")
        for message in analysis.issue_messages:
            print(f"  - {message}")
        if analysis.can_adjust:
            print("  (document boundary detected)")
    return 0


COMMANDS = {
    "single": run_single,
    "batch": run_batch,
    "quality": run_quality,
}


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    setup_logging(logging.DEBUG if parsed.verbose else logging.INFO, parsed.log_file)

    overrides = {}
    if parsed.timeout is not None:
        overrides = {
            "detection_timeout": parsed.timeout,
            "recognition_timeout": parsed.timeout,
        }

    try:
        config = ConditioningConfig.from_env(**overrides)
        detector = PluginRegistry.create_detector(parsed.detector)
        recognizer = PluginRegistry.create_recognizer(parsed.recognizer)
    except ReceiptConditionerError as e:
        logger.error(f"Failed to initialize: {e}")
        return 1

    processor = ReceiptImageProcessor(detector, recognizer, config)

    try:
        return asyncio.run(COMMANDS[parsed.command](processor, parsed))
    except FileNotFoundError as e:
        logger.error(f"Input not found: {e.filename}")
        return 1
    except ReceiptConditionerError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
