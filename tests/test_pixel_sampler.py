"""
Unit tests for pointer-to-pixel sampling.
"""

from PIL import Image

from CS_Libs.ColorLib.pixel_sampler import DisplayRect, map_display_to_raster, sample_pixel


def _gradient_image(width=4, height=3):
    """Image where pixel (x, y) has color (x * 10, y * 10, 7)."""
    image = Image.new("RGBA", (width, height))
    for x in range(width):
        for y in range(height):
            image.putpixel((x, y), (x * 10, y * 10, 7, 255))
    return image


class TestMapDisplayToRaster:
    """Tests for map_display_to_raster function."""

    def test_top_left_corner_maps_to_origin(self):
        rect = DisplayRect(left=10, top=20, width=40, height=30)

        assert map_display_to_raster((10, 20), rect, (4, 3)) == (0, 0)

    def test_bottom_right_corner_maps_to_last_pixel(self):
        rect = DisplayRect(left=10, top=20, width=40, height=30)

        assert map_display_to_raster((49.9, 49.9), rect, (4, 3)) == (3, 2)
        assert map_display_to_raster((50, 50), rect, (4, 3)) == (3, 2)

    def test_scales_between_display_and_raster(self):
        rect = DisplayRect(left=0, top=0, width=100, height=100)

        assert map_display_to_raster((50, 25), rect, (1000, 400)) == (500, 100)

    def test_out_of_bounds_is_clamped(self):
        rect = DisplayRect(left=10, top=10, width=40, height=30)

        assert map_display_to_raster((-100, -5), rect, (4, 3)) == (0, 0)
        assert map_display_to_raster((1000, 1000), rect, (4, 3)) == (3, 2)

    def test_degenerate_rect_maps_to_origin(self):
        rect = DisplayRect(left=0, top=0, width=0, height=0)

        assert map_display_to_raster((5, 5), rect, (4, 3)) == (0, 0)


class TestSamplePixel:
    """Tests for sample_pixel function."""

    def test_returns_exact_unquantized_color(self):
        image = _gradient_image()
        rect = DisplayRect(left=0, top=0, width=400, height=300)

        assert sample_pixel(image, (250, 150), rect) == (20, 10, 7)

    def test_corners(self):
        image = _gradient_image()
        rect = DisplayRect(left=0, top=0, width=40, height=30)

        assert sample_pixel(image, (0, 0), rect) == (0, 0, 7)
        assert sample_pixel(image, (39.99, 29.99), rect) == (30, 20, 7)

    def test_converts_other_modes(self):
        image = Image.new("L", (2, 2), 90)
        rect = DisplayRect(left=0, top=0, width=2, height=2)

        assert sample_pixel(image, (1, 1), rect) == (90, 90, 90)
