"""Configuration and constants for the Receipt Conditioner project."""

from enum import Enum


class ProcessingType(str, Enum):
    """Labels attached to a processing result, describing where the image came from."""
    CAMERA = "camera"
    DOCUMENT_SCAN = "document-scan"
    GALLERY_SINGLE = "gallery-single"
    GALLERY_UPLOAD = "gallery-upload"
    MULTI_PART_STITCH = "multi-part-stitch"


# Words that mark a text sample as receipt content.
# "$" and "thank you" are matched as plain substrings like the rest.
RECEIPT_KEYWORDS: tuple[str, ...] = (
    "total",
    "subtotal",
    "tax",
    "receipt",
    "store",
    "$",
    "thank you",
)


# Quality issue tags, in the order the analyzer may emit them
ISSUE_LOW_LIGHTING = "low lighting"
ISSUE_OVEREXPOSED = "overexposed"
ISSUE_BLURRY = "blurry"
ISSUE_NO_DOCUMENT = "no document boundary"
ISSUE_LOW_CONFIDENCE_DETECTION = "low-confidence detection"
ISSUE_UNUSUAL_ASPECT = "unusual aspect ratio"
ISSUE_LOW_CONFIDENCE_STITCH = "low-confidence stitching"

ISSUE_MESSAGES: dict[str, str] = {
    ISSUE_LOW_LIGHTING: "Low lighting detected - image may be too dark",
    ISSUE_OVEREXPOSED: "High brightness detected - image may be overexposed",
    ISSUE_BLURRY: "Image appears blurry - consider retaking",
    ISSUE_NO_DOCUMENT: "Could not detect document boundaries",
    ISSUE_LOW_CONFIDENCE_DETECTION: "Low confidence document detection",
    ISSUE_UNUSUAL_ASPECT: "Unusual aspect ratio detected",
    ISSUE_LOW_CONFIDENCE_STITCH: "Low confidence stitching",
}


# Stitching plan reasons
REASON_INVALID_COUNT = "invalid count for stitching"
REASON_MISSING_CONTENT = "not all images contain receipt content"
REASON_NO_PATTERN = "no clear stitching pattern detected"
REASON_CONTINUATION = "detected vertical receipt parts with text continuation"


# Confidence reported for a batch processed as independent receipts
SEPARATE_RECEIPTS_CONFIDENCE = 0.95

# Placeholder returned by dominant color sampling (RGB white)
PLACEHOLDER_DOMINANT_COLORS: tuple[tuple[int, int, int], ...] = ((255, 255, 255),)


# File handling - formats Pillow and OpenCV both decode
SUPPORTED_IMAGE_EXTENSIONS: tuple[str, ...] = (
    '.jpg', '.jpeg', '.jpe',
    '.png',
    '.bmp', '.dib',
    '.tiff', '.tif',
    '.webp',
)

# Environment
ENV_PREFIX = "RECEIPT_CONDITIONER_"


# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
