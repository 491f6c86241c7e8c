"""
Unit tests for the RGB to HSL converter.
"""

import pytest

from CS_Libs.ColorLib.hsl_converter import hue_of, rgb_to_hsl


class TestRgbToHsl:
    """Tests for rgb_to_hsl function."""

    @pytest.mark.parametrize("value", [0, 1, 17, 128, 200, 255])
    def test_achromatic_has_zero_hue_and_saturation(self, value):
        """Gray levels should have hue 0 and saturation 0."""
        hue, saturation, lightness = rgb_to_hsl(value, value, value)

        assert hue == 0
        assert saturation == 0
        assert lightness == pytest.approx(value / 255 * 100)

    @pytest.mark.parametrize(
        "rgb, expected_hue",
        [
            ((255, 0, 0), 0.0),
            ((255, 255, 0), 60.0),
            ((0, 255, 0), 120.0),
            ((0, 255, 255), 180.0),
            ((0, 0, 255), 240.0),
            ((255, 0, 255), 300.0),
        ],
    )
    def test_primary_and_secondary_hues(self, rgb, expected_hue):
        """Fully saturated colors should land on their sector boundaries."""
        hue, saturation, lightness = rgb_to_hsl(*rgb)

        assert hue == pytest.approx(expected_hue)
        assert saturation == pytest.approx(100.0)
        assert lightness == pytest.approx(50.0)

    def test_hue_wraps_below_360(self):
        """Red-dominant colors with blue > green wrap into [0, 360)."""
        hue, _, _ = rgb_to_hsl(255, 0, 1)

        assert 359.0 < hue < 360.0

    def test_saturation_depends_on_lightness(self):
        """Light and dark colors use different saturation denominators."""
        # dark: d / (max + min)
        _, dark_saturation, dark_lightness = rgb_to_hsl(100, 50, 50)
        # light: d / (2 - max - min)
        _, light_saturation, light_lightness = rgb_to_hsl(250, 200, 200)

        assert dark_lightness < 50 < light_lightness
        assert dark_saturation == pytest.approx((50 / 255) / (150 / 255) * 100)
        assert light_saturation == pytest.approx((50 / 255) / (2 - 450 / 255) * 100)

    def test_outputs_in_range(self):
        """All outputs stay in their documented ranges."""
        for rgb in [(0, 0, 0), (255, 255, 255), (12, 200, 99), (240, 15, 130)]:
            hue, saturation, lightness = rgb_to_hsl(*rgb)
            assert 0 <= hue < 360
            assert 0 <= saturation <= 100
            assert 0 <= lightness <= 100


class TestHueOf:
    """Tests for hue_of helper."""

    def test_returns_hue_component(self, sample_rgb_colors):
        """Should return only the hue of a triplet."""
        assert hue_of(sample_rgb_colors["blue"]) == pytest.approx(240.0)
        assert hue_of(sample_rgb_colors["gray"]) == 0
