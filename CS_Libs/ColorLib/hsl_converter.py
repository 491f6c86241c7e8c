"""
RGB to HSL conversion used for hue ordering.

Functions:
    rgb_to_hsl: Convert an 8-bit RGB triplet to (hue, saturation, lightness)
    hue_of: Hue in degrees of an RGB triplet
"""

from colorsys import rgb_to_hls
from typing import Sequence, Tuple


def rgb_to_hsl(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """
    Convert 8-bit RGB channels to HSL.

    Achromatic colors (r == g == b) have hue 0 and saturation 0.

    Args:
        r: Red channel 0-255
        g: Green channel 0-255
        b: Blue channel 0-255

    Returns:
        (hue in [0, 360), saturation in [0, 100], lightness in [0, 100])
    """
    h, l, s = rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return h * 360.0, s * 100.0, l * 100.0


def hue_of(color: Sequence[int]) -> float:
    r, g, b = color
    return rgb_to_hsl(r, g, b)[0]
