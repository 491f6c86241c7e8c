"""
Unit tests for dominant color extraction.

Tests cover quantization, exclusion filters, tie-breaking, downscaling
and the fallback color.
"""

from PIL import Image

from CS_Libs.ColorLib.dominant_color import (
    extract_dominant_color,
    pack_bucket,
    quantize_channel,
    unpack_bucket,
)
from CS_Libs.constants import FALLBACK_COLOR


def _two_color_image(size, color_a, color_b, count_a):
    """Image whose first count_a pixels (row-major) are color_a, the rest color_b."""
    width, height = size
    image = Image.new("RGBA", size, color_b)
    for index in range(count_a):
        image.putpixel((index % width, index // width), color_a)
    return image


class TestBucketHelpers:
    """Tests for quantization and key packing helpers."""

    def test_quantize_channel(self):
        assert quantize_channel(0) == 0
        assert quantize_channel(15) == 0
        assert quantize_channel(16) == 16
        assert quantize_channel(200) == 192
        assert quantize_channel(255) == 240

    def test_pack_unpack(self):
        key = pack_bucket(192, 32, 240)

        assert key == (192 << 16) | (32 << 8) | 240
        assert unpack_bucket(key) == (192, 32, 240)


class TestExtractDominantColor:
    """Tests for extract_dominant_color function."""

    def test_solid_color_returns_quantized_bucket(self):
        """A solid image returns its quantized color, not the exact one."""
        image = Image.new("RGBA", (10, 10), (200, 40, 40, 255))

        assert extract_dominant_color(image) == (192, 32, 32)

    def test_majority_bucket_wins(self):
        """The most frequent bucket wins."""
        image = _two_color_image((10, 10), (40, 40, 200, 255), (200, 40, 40, 255), count_a=40)

        assert extract_dominant_color(image) == (192, 32, 32)

    def test_tie_goes_to_first_seen_bucket(self):
        """On equal counts the bucket scanned first wins."""
        blue_first = Image.new("RGBA", (2, 1))
        blue_first.putpixel((0, 0), (0, 0, 255, 255))
        blue_first.putpixel((1, 0), (255, 0, 0, 255))

        red_first = Image.new("RGBA", (2, 1))
        red_first.putpixel((0, 0), (255, 0, 0, 255))
        red_first.putpixel((1, 0), (0, 0, 255, 255))

        assert extract_dominant_color(blue_first) == (0, 0, 240)
        assert extract_dominant_color(red_first) == (240, 0, 0)

    def test_fully_transparent_returns_fallback(self):
        image = Image.new("RGBA", (10, 10), (200, 40, 40, 0))

        assert extract_dominant_color(image) == FALLBACK_COLOR

    def test_half_transparent_pixels_excluded(self):
        """Alpha 127 is excluded, alpha 128 is counted."""
        assert extract_dominant_color(Image.new("RGBA", (4, 4), (10, 200, 10, 127))) == FALLBACK_COLOR
        assert extract_dominant_color(Image.new("RGBA", (4, 4), (10, 200, 10, 128))) == (0, 192, 0)

    def test_near_white_returns_fallback(self):
        image = Image.new("RGBA", (10, 10), (241, 250, 255, 255))

        assert extract_dominant_color(image) == FALLBACK_COLOR

    def test_near_white_requires_all_channels(self):
        """Only pixels with all three channels above 240 are skipped."""
        assert extract_dominant_color(Image.new("RGBA", (4, 4), (241, 241, 100, 255))) == (240, 240, 96)
        assert extract_dominant_color(Image.new("RGBA", (4, 4), (240, 240, 240, 255))) == (240, 240, 240)

    def test_excluded_pixels_do_not_outvote(self):
        """White and transparent majorities are ignored."""
        image = _two_color_image((10, 10), (60, 120, 180, 255), (255, 255, 255, 255), count_a=5)
        for x in range(10):
            image.putpixel((x, 9), (0, 0, 0, 0))

        assert extract_dominant_color(image) == (48, 112, 176)

    def test_near_black_is_kept(self):
        image = Image.new("RGBA", (10, 10), (5, 5, 5, 255))

        assert extract_dominant_color(image) == (0, 0, 0)

    def test_single_pixel_image(self):
        image = Image.new("RGBA", (1, 1), (33, 66, 99, 255))

        assert extract_dominant_color(image) == (32, 64, 96)

    def test_accepts_rgb_mode(self):
        image = Image.new("RGB", (10, 10), (100, 150, 200))

        assert extract_dominant_color(image) == (96, 144, 192)

    def test_large_non_square_image_is_downscaled(self):
        image = Image.new("RGBA", (300, 50), (100, 150, 200, 255))

        assert extract_dominant_color(image) == (96, 144, 192)

    def test_invariant_under_uniform_scaling(self):
        """Scaling an image up keeps the same dominant bucket."""
        small = Image.new("RGBA", (40, 40), (40, 40, 200, 255))
        for x in range(30):
            for y in range(40):
                small.putpixel((x, y), (200, 40, 40, 255))
        large = small.resize((400, 400), Image.Resampling.NEAREST)

        assert extract_dominant_color(small) == (192, 32, 32)
        assert extract_dominant_color(large) == extract_dominant_color(small)
