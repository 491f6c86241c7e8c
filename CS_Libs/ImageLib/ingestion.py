"""
Image ingestion for Color Sorter.

Uploads are validated at the boundary (encoding and record cap), then decoded
and analyzed into ImageRecords. Decoding is exposed as a pending Future so a
caller can keep the record out of the visible set until it has resolved.

Classes:
    ImageIngestor: Validates uploads and produces ImageRecords

Functions:
    read_upload: Read a file from disk as (name, bytes)
    is_supported_extension: Check a path's extension against accepted encodings
"""

import logging
import uuid
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Optional, Tuple

from CS_Libs.ColorLib.dominant_color import extract_dominant_color
from CS_Libs.ImageLib.image_codec import decode_image_bytes, detect_format
from CS_Libs.ImageLib.image_models import ImageRecord
from CS_Libs.constants import (
    DEFAULT_WEIGHT,
    MAX_IMAGES,
    SUPPORTED_DECODED_FORMATS,
    SUPPORTED_EXTENSIONS,
)
from CS_Libs.errors import CapacityExceededError, UnsupportedFormatError

logger = logging.getLogger(__name__)


def is_supported_extension(file_path: Path) -> bool:
    return Path(file_path).suffix.lower() in SUPPORTED_EXTENSIONS


def read_upload(file_path: Path) -> Tuple[str, bytes]:
    """
    Read an uploaded file from disk.

    Args:
        file_path: Path to the image file

    Returns:
        (file name, raw bytes)

    Raises:
        FileNotFoundError: If the path does not exist
        ValueError: If the path is not a file
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    return path.name, path.read_bytes()


class ImageIngestor:
    """Turns uploaded bytes into ImageRecords.

    Attributes:
        executor: Optional executor used to decode in the background; when
                  None, decoding runs immediately and the returned Future is
                  already resolved
        max_images: Maximum number of records a session may hold
    """

    def __init__(self, executor: Optional[Executor] = None, max_images: int = MAX_IMAGES):
        self.executor = executor
        self.max_images = max_images

    def check_capacity(self, current_count: int, incoming_count: int) -> None:
        """
        Reject a batch that would push the record count over the cap.

        Raises:
            CapacityExceededError: If current_count + incoming_count > max_images
        """
        if current_count + incoming_count > self.max_images:
            raise CapacityExceededError(
                f"At most {self.max_images} images can be uploaded "
                f"({current_count} loaded, {incoming_count} requested)"
            )

    def validate_encoding(self, name: str, data: bytes) -> str:
        """
        Check that the bytes are one of the accepted encodings.

        Returns:
            The detected PIL format name

        Raises:
            UnsupportedFormatError: If the encoding is not PNG or JPEG
        """
        image_format = detect_format(data)
        if image_format not in SUPPORTED_DECODED_FORMATS:
            raise UnsupportedFormatError(
                f"{name} has an unsupported format; only PNG and JPEG are accepted"
            )
        return image_format

    def submit(self, name: str, data: bytes) -> "Future[ImageRecord]":
        """
        Validate an upload and start decoding it.

        Args:
            name: Original file name
            data: Encoded file bytes

        Returns:
            Future resolving to the new ImageRecord, or to ImageDecodeError

        Raises:
            UnsupportedFormatError: If the encoding is not accepted
        """
        self.validate_encoding(name, data)

        if self.executor is not None:
            return self.executor.submit(self.decode_record, name, data)

        future: "Future[ImageRecord]" = Future()
        try:
            future.set_result(self.decode_record(name, data))
        except Exception as e:
            future.set_exception(e)
        return future

    def decode_record(self, name: str, data: bytes) -> ImageRecord:
        """
        Decode an upload and compute its initial dominant color.

        Raises:
            ImageDecodeError: If the data cannot be decoded
        """
        raster = decode_image_bytes(data, name)
        color = extract_dominant_color(raster)
        record = ImageRecord(
            id=uuid.uuid4().hex,
            source=data,
            raster=raster,
            color=color,
            weight=DEFAULT_WEIGHT,
            name=name,
        )
        logger.debug(f"Decoded {name} ({raster.width}x{raster.height}), dominant color {color}")
        return record
