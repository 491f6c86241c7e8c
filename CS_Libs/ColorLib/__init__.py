"""
ColorLib - Color analysis functionality

This module provides HSL conversion, dominant color extraction and
pointer-driven pixel sampling for the Color Sorter project.
"""

from CS_Libs.ColorLib.hsl_converter import rgb_to_hsl, hue_of
from CS_Libs.ColorLib.dominant_color import (
    extract_dominant_color,
    quantize_channel,
    pack_bucket,
    unpack_bucket,
)
from CS_Libs.ColorLib.pixel_sampler import (
    DisplayRect,
    map_display_to_raster,
    sample_pixel,
)

__all__ = [
    "rgb_to_hsl",
    "hue_of",
    "extract_dominant_color",
    "quantize_channel",
    "pack_bucket",
    "unpack_bucket",
    "DisplayRect",
    "map_display_to_raster",
    "sample_pixel",
]
