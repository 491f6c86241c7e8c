"""
ImageLib - Image records and ingestion

This module provides the data models, decoding and upload validation
for the Color Sorter project.
"""

from CS_Libs.ImageLib.image_models import (
    RgbColor,
    HueDirection,
    ImageRecord,
    GridConfig,
    validate_color,
    validate_weight,
)
from CS_Libs.ImageLib.image_codec import decode_image_bytes, detect_format
from CS_Libs.ImageLib.ingestion import ImageIngestor, read_upload, is_supported_extension

__all__ = [
    "RgbColor",
    "HueDirection",
    "ImageRecord",
    "GridConfig",
    "validate_color",
    "validate_weight",
    "decode_image_bytes",
    "detect_format",
    "ImageIngestor",
    "read_upload",
    "is_supported_extension",
]
