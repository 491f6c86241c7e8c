"""
Encoded image decoding for Color Sorter.

Functions:
    decode_image_bytes: Decode PNG/JPEG bytes into an RGBA PIL Image
    detect_format: Identify the encoding of raw image bytes
"""

import io
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError

from CS_Libs.errors import ImageDecodeError


def detect_format(data: bytes) -> Optional[str]:
    """
    Identify the encoding of raw image bytes without fully decoding them.

    Args:
        data: Encoded image bytes

    Returns:
        The PIL format name (e.g. "PNG", "JPEG"), or None if unrecognized
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None


def decode_image_bytes(data: bytes, name: str = "<memory>") -> Any:
    """
    Decode encoded image bytes into a fully loaded RGBA image.

    Args:
        data: Encoded image bytes
        name: Name used in error messages

    Returns:
        PIL Image in RGBA mode, detached from the source buffer

    Raises:
        ImageDecodeError: If the bytes are not a decodable image
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image {name}: {str(e)}") from e

    # Convert to RGBA for consistency
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img
