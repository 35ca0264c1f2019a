"""
Tests for the HSB color model and escape-time coloring.
"""

import numpy as np
import pytest

from fractals_playground.core.math_functions import IterationResult
from fractals_playground.rendering.coloring import (
    ColorRGB, ColoringEngine, SpectrumColoring, YellowGradientColoring,
    hsb_to_rgb, hsb_to_rgb_array, parse_color,
)


class TestHsbToRgb:
    """Scalar hue/saturation/brightness conversion."""

    @pytest.mark.parametrize("hue, expected", [
        (0, (255, 0, 0)),
        (60, (255, 255, 0)),
        (120, (0, 255, 0)),
        (180, (0, 255, 255)),
        (240, (0, 0, 255)),
        (300, (255, 0, 255)),
    ])
    def test_primary_and_secondary_colors(self, hue, expected):
        """Full saturation/brightness at 60 degree boundaries gives pure colors."""
        assert hsb_to_rgb(hue, 100, 100) == expected

    def test_zero_saturation_is_gray(self):
        """Without saturation every hue is the brightness gray."""
        for hue in (0, 90, 200, 330):
            assert hsb_to_rgb(hue, 0, 100) == (255, 255, 255)
            assert hsb_to_rgb(hue, 0, 0) == (0, 0, 0)

    def test_half_way_hue(self):
        """Hue 30 mixes red and half green."""
        assert hsb_to_rgb(30, 100, 100) == (255, 128, 0)

    def test_hue_360_falls_into_last_sector(self):
        """Out-of-range hues are not wrapped; they use the magenta-red sector."""
        assert hsb_to_rgb(360, 100, 100) == (255, 0, 0)
        assert hsb_to_rgb(420, 100, 100) == (255, 0, 255)

    def test_negative_hue_is_clamped(self):
        """Negative hues drive the blue channel below zero; it clamps to 0."""
        assert hsb_to_rgb(-30, 100, 100) == (255, 0, 0)
        assert hsb_to_rgb(-90, 100, 100) == (255, 0, 0)

    def test_channels_are_ints(self):
        """Channels are plain ints in 0-255."""
        for channel in hsb_to_rgb(123.4, 80, 90):
            assert isinstance(channel, int)
            assert 0 <= channel <= 255


class TestHsbToRgbArray:
    """Vectorised conversion must match the scalar version byte for byte."""

    def test_matches_scalar_over_hue_range(self):
        """Every hue in a fine sweep converts to the same bytes."""
        hues = np.linspace(0, 359.9, 3600)
        vectorised = hsb_to_rgb_array(hues, 80, 90)
        scalar = np.array([hsb_to_rgb(h, 80, 90) for h in hues], dtype=np.uint8)
        np.testing.assert_array_equal(vectorised, scalar)

    def test_matches_scalar_for_julia_hues(self):
        """Hues produced by the Julia coloring convert identically."""
        hues = (np.arange(100) / 100) * 300
        vectorised = hsb_to_rgb_array(hues, 80, 90)
        for hue, rgb in zip(hues, vectorised):
            assert tuple(int(v) for v in rgb) == hsb_to_rgb(hue, 80, 90)

    def test_matches_scalar_outside_hue_range(self):
        """Negative and past-360 hues convert to the same clamped bytes."""
        hues = np.array([-720.0, -90.0, -30.0, -0.5, 360.0, 420.0, 725.0])
        vectorised = hsb_to_rgb_array(hues, 100, 100)
        scalar = np.array([hsb_to_rgb(h, 100, 100) for h in hues], dtype=np.uint8)
        np.testing.assert_array_equal(vectorised, scalar)

    def test_keeps_input_shape(self):
        """A 2D hue array yields a (h, w, 3) array."""
        assert hsb_to_rgb_array(np.zeros((4, 5)), 80, 90).shape == (4, 5, 3)


class TestColorHelpers:
    """ColorRGB and color parsing."""

    def test_color_rgb_validation(self):
        """Channels outside 0-255 are rejected."""
        with pytest.raises(ValueError):
            ColorRGB(256, 0, 0)

    def test_color_rgb_from_hsb(self):
        """ColorRGB.from_hsb wraps hsb_to_rgb."""
        assert ColorRGB.from_hsb(240, 100, 100).to_tuple() == (0, 0, 255)

    def test_to_hex(self):
        """Hex formatting is lower case with a leading hash."""
        assert ColorRGB(255, 221, 68).to_hex() == '#ffdd44'

    def test_parse_color(self):
        """Hex strings, tuples and ColorRGB all normalize to tuples."""
        assert parse_color('#1a1a1a') == (26, 26, 26)
        assert parse_color((1, 2, 3)) == (1, 2, 3)
        assert parse_color(ColorRGB(4, 5, 6)) == (4, 5, 6)
        with pytest.raises(ValueError):
            parse_color('#12345')


class TestColoringAlgorithms:
    """Spectrum and yellow gradient coloring of iteration results."""

    def test_spectrum_members_are_black(self):
        """Points that reached max_iter render opaque black."""
        result = IterationResult(np.array([[100, 0], [50, 99]], dtype=np.int32), 100)
        rgba = SpectrumColoring().apply(result)

        assert tuple(rgba[0, 0]) == (0, 0, 0, 255)
        assert tuple(rgba[0, 1, :3]) == hsb_to_rgb(0, 80, 90)
        assert tuple(rgba[1, 0, :3]) == hsb_to_rgb(150, 80, 90)
        assert tuple(rgba[1, 1, :3]) == hsb_to_rgb((99 / 100) * 300, 80, 90)
        assert np.all(rgba[..., 3] == 255)

    def test_yellow_gradient(self):
        """Thumbnail gradient fades from light yellow; members are not black."""
        result = IterationResult(np.array([[0, 50]], dtype=np.int32), 50)
        rgba = YellowGradientColoring().apply(result)

        assert tuple(rgba[0, 0]) == (255, 255, 100, 255)
        assert tuple(rgba[0, 1]) == (127, 178, 0, 255)

    def test_engine_lookup(self):
        """Unknown algorithms raise ValueError."""
        engine = ColoringEngine()
        assert set(engine.list_algorithms()) == {'spectrum', 'yellow_gradient'}
        with pytest.raises(ValueError):
            engine.get_algorithm('histogram')
