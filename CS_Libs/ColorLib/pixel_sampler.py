"""
Pointer-to-pixel sampling for manual color overrides.

A pointer position inside the on-screen rectangle of a displayed image is
mapped back to the original raster's pixel grid; the exact (unquantized)
color at that pixel is returned.

Classes:
    DisplayRect: On-screen rectangle of a rendered image

Functions:
    map_display_to_raster: Map a display coordinate to a raster pixel
    sample_pixel: Exact RGB color under a display coordinate
"""

import math
from dataclasses import dataclass
from typing import Any, Tuple

RgbColor = Tuple[int, int, int]


@dataclass(frozen=True)
class DisplayRect:
    left: float
    top: float
    width: float
    height: float


def _map_axis(pointer: float, origin: float, extent: float, raster_extent: int) -> int:
    if extent <= 0:
        return 0
    index = math.floor((pointer - origin) * raster_extent / extent)
    return max(0, min(raster_extent - 1, index))


def map_display_to_raster(
    pointer: Tuple[float, float],
    rect: DisplayRect,
    raster_size: Tuple[int, int],
) -> Tuple[int, int]:
    """
    Map a display-space pointer position to an original-resolution pixel.

    Coordinates outside the rectangle are clamped to the raster bounds.

    Args:
        pointer: (x, y) pointer position in display space
        rect: Display rectangle of the rendered image
        raster_size: (width, height) of the original raster

    Returns:
        (x, y) pixel coordinate inside the raster
    """
    raster_width, raster_height = raster_size
    x = _map_axis(pointer[0], rect.left, rect.width, raster_width)
    y = _map_axis(pointer[1], rect.top, rect.height, raster_height)
    return x, y


def sample_pixel(image: Any, pointer: Tuple[float, float], rect: DisplayRect) -> RgbColor:
    """
    Read the exact RGB color under a display-space pointer position.

    Args:
        image: Original-resolution PIL Image
        pointer: (x, y) pointer position in display space
        rect: Display rectangle of the rendered image

    Returns:
        RGB triplet of the pixel
    """
    img = image if image.mode in ("RGB", "RGBA") else image.convert("RGBA")
    x, y = map_display_to_raster(pointer, rect, img.size)
    pixel = img.getpixel((x, y))
    return int(pixel[0]), int(pixel[1]), int(pixel[2])
