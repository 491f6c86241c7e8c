"""
Dominant color extraction for Color Sorter.

The dominant color of an image is the most frequent 16-level quantization
bucket among its opaque, non-white pixels, measured on a copy scaled down to
at most ANALYSIS_MAX_SIZE pixels on the longer side. Images already within
that size are analyzed as they are and never enlarged.

Functions:
    extract_dominant_color: Most frequent quantized color of an image
    quantize_channel: Round a channel down to its bucket
    pack_bucket: Pack a quantized triplet into one integer key
    unpack_bucket: Inverse of pack_bucket
"""

import logging
from typing import Any, Tuple

import numpy as np
from PIL import Image

from CS_Libs.constants import (
    ANALYSIS_MAX_SIZE,
    FALLBACK_COLOR,
    MIN_ALPHA,
    NEAR_WHITE_THRESHOLD,
    QUANTIZATION_STEP,
)

RgbColor = Tuple[int, int, int]

logger = logging.getLogger(__name__)


def quantize_channel(value: int) -> int:
    return (value // QUANTIZATION_STEP) * QUANTIZATION_STEP


def pack_bucket(r: int, g: int, b: int) -> int:
    return (r << 16) | (g << 8) | b


def unpack_bucket(key: int) -> RgbColor:
    return (key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF


def _analysis_copy(image: Any) -> Any:
    """Return an RGBA copy no larger than ANALYSIS_MAX_SIZE on either side."""
    img = image if image.mode == "RGBA" else image.convert("RGBA")
    width, height = img.size
    scale = min(ANALYSIS_MAX_SIZE / width, ANALYSIS_MAX_SIZE / height, 1.0)
    if scale < 1.0:
        new_size = (max(1, int(width * scale)), max(1, int(height * scale)))
        img = img.resize(new_size, Image.Resampling.BILINEAR)
    return img


def extract_dominant_color(image: Any) -> RgbColor:
    """
    Find the most frequent quantized color of an image.

    Pixels with alpha below MIN_ALPHA and pixels whose three channels are all
    above NEAR_WHITE_THRESHOLD are ignored. Ties between buckets go to the
    bucket seen first in row-major scan order.

    Args:
        image: PIL Image of any mode and size

    Returns:
        The winning bucket's quantized RGB triplet, or FALLBACK_COLOR if no
        pixel qualifies
    """
    img = _analysis_copy(image)
    pixels = np.asarray(img, dtype=np.uint8).reshape(-1, 4)

    rgb = pixels[:, :3].astype(np.int32)
    opaque = pixels[:, 3] >= MIN_ALPHA
    near_white = np.all(rgb > NEAR_WHITE_THRESHOLD, axis=1)
    kept = rgb[opaque & ~near_white]

    if kept.shape[0] == 0:
        logger.debug("No qualifying pixels, using fallback color")
        return FALLBACK_COLOR

    quantized = (kept // QUANTIZATION_STEP) * QUANTIZATION_STEP
    keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]

    bucket_keys, first_seen, counts = np.unique(keys, return_index=True, return_counts=True)
    candidates = np.flatnonzero(counts == counts.max())
    winner = candidates[np.argmin(first_seen[candidates])]

    return unpack_bucket(int(bucket_keys[winner]))
