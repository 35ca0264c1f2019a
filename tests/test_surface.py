"""
Tests for the drawing surfaces.
"""

import numpy as np
import pytest

from fractals_playground.rendering.coloring import ColorRGB
from fractals_playground.rendering.surface import ImageSurface, RecordingSurface


class TestImageSurface:
    """Pillow-backed surface."""

    def test_starts_with_background(self):
        surface = ImageSurface(4, 3, background='#1a1a1a')
        assert surface.to_array().shape == (3, 4, 4)
        assert np.all(surface.to_array()[..., :3] == 26)

    def test_put_image_data(self):
        rgba = np.zeros((3, 4, 4), dtype=np.uint8)
        rgba[..., 0] = 200
        rgba[..., 3] = 255
        surface = ImageSurface(4, 3)
        surface.put_image_data(rgba)

        np.testing.assert_array_equal(surface.to_array(), rgba)

    def test_put_image_data_wrong_shape(self):
        with pytest.raises(ValueError):
            ImageSurface(4, 3).put_image_data(np.zeros((3, 4, 3), dtype=np.uint8))

    def test_put_image_data_at_offset(self):
        """A smaller block lands at (dx, dy); the rest keeps the background."""
        block = np.full((2, 3, 4), 200, dtype=np.uint8)
        surface = ImageSurface(10, 8)
        surface.put_image_data(block, 4, 5)
        pixels = surface.to_array()

        assert np.all(pixels[5:7, 4:7] == 200)
        assert tuple(pixels[4, 4]) == (0, 0, 0, 255)
        assert tuple(pixels[5, 7]) == (0, 0, 0, 255)

    def test_put_image_data_clips_to_surface(self):
        block = np.full((4, 4, 4), 90, dtype=np.uint8)
        surface = ImageSurface(5, 5)
        surface.put_image_data(block, 3, -2)
        pixels = surface.to_array()

        assert np.all(pixels[0:2, 3:5] == 90)
        assert tuple(pixels[2, 3]) == (0, 0, 0, 255)

    def test_fill_rect(self):
        surface = ImageSurface(10, 10)
        surface.fill_rect(2, 3, 4, 5, (255, 0, 0))
        pixels = surface.to_array()

        assert np.all(pixels[3:8, 2:6, :3] == (255, 0, 0))
        assert tuple(pixels[8, 2, :3]) == (0, 0, 0)
        assert tuple(pixels[3, 6, :3]) == (0, 0, 0)

    def test_clear(self):
        surface = ImageSurface(5, 5)
        surface.clear(ColorRGB(1, 2, 3))
        assert np.all(surface.to_array()[..., :3] == (1, 2, 3))

    def test_stroke_line(self):
        surface = ImageSurface(20, 20)
        surface.set_stroke_style('#00ff00')
        surface.begin_path()
        surface.move_to(2, 10)
        surface.line_to(17, 10)
        surface.stroke()

        pixels = surface.to_array()
        assert tuple(pixels[10, 10, :3]) == (0, 255, 0)
        assert tuple(pixels[2, 10, :3]) == (0, 0, 0)

    def test_stroke_circle(self):
        surface = ImageSurface(40, 40)
        surface.set_stroke_style((0, 0, 255))
        surface.begin_path()
        surface.arc(20, 20, 10)
        surface.stroke()

        pixels = surface.to_array()
        assert np.any(np.all(pixels[..., :3] == (0, 0, 255), axis=-1))
        assert tuple(pixels[20, 20, :3]) == (0, 0, 0)

    def test_begin_path_discards_previous_path(self):
        surface = ImageSurface(20, 20)
        surface.set_stroke_style((255, 255, 255))
        surface.begin_path()
        surface.move_to(0, 5)
        surface.line_to(19, 5)
        surface.begin_path()
        surface.stroke()

        assert np.all(surface.to_array()[..., :3] == 0)

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            ImageSurface(0, 10)


class TestRecordingSurface:
    """Call-recording surface."""

    def test_records_calls_in_order(self):
        surface = RecordingSurface(10, 10)
        surface.set_stroke_style('#ffdd44')
        surface.set_line_width(1.5)
        surface.begin_path()
        surface.move_to(1, 2)
        surface.line_to(3, 4)
        surface.close_path()
        surface.stroke()

        assert surface.calls == [
            ('set_stroke_style', (255, 221, 68)),
            ('set_line_width', 1.5),
            ('begin_path',),
            ('move_to', 1, 2),
            ('line_to', 3, 4),
            ('close_path',),
            ('stroke',),
        ]
        assert surface.count('line_to') == 1

    def test_fill_rect_paints_pixels(self):
        surface = RecordingSurface(10, 10)
        surface.fill_rect(0, 0, 10, 10, '#1a1a1a')

        assert np.all(surface.pixels[..., :3] == 26)
        assert np.all(surface.pixels[..., 3] == 255)

    def test_put_image_data_writes_sub_rectangle(self):
        """Only the block is replaced; the call records its origin."""
        surface = RecordingSurface(6, 6)
        surface.fill_rect(0, 0, 6, 6, (1, 1, 1))
        surface.put_image_data(np.full((2, 2, 4), 9, dtype=np.uint8), 1, 3)

        assert np.all(surface.pixels[3:5, 1:3] == 9)
        assert tuple(surface.pixels[0, 0]) == (1, 1, 1, 255)
        assert tuple(surface.pixels[5, 5]) == (1, 1, 1, 255)
        assert surface.calls[-1] == ('put_image_data', 1, 3)

    def test_put_image_data_outside_surface(self):
        surface = RecordingSurface(4, 4)
        surface.put_image_data(np.full((2, 2, 4), 9, dtype=np.uint8), 10, 10)

        assert not np.any(surface.pixels)
        assert surface.calls == [('put_image_data', 10, 10)]

    def test_put_image_data_copies(self):
        rgba = np.full((2, 3, 4), 7, dtype=np.uint8)
        surface = RecordingSurface(3, 2)
        surface.put_image_data(rgba)
        rgba[...] = 0

        assert np.all(surface.pixels == 7)
