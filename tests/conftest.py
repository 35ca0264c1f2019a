"""Pytest configuration - shared fixtures for the rendering tests."""
from __future__ import annotations

import pytest

from fractals_playground.api import FractalRenderer, RenderConfig
from fractals_playground.core.math_functions import julia_escape_count
from fractals_playground.rendering.coloring import hsb_to_rgb
from fractals_playground.rendering.surface import RecordingSurface

JULIA_C = (-0.8, 0.156)


@pytest.fixture
def numpy_renderer():
    """Renderer restricted to the plain NumPy escape-time path."""
    return FractalRenderer(RenderConfig(use_numba=False, use_multiprocessing=False))


@pytest.fixture
def recording_surface():
    """Factory for headless recording surfaces."""
    def make(width=600, height=600):
        return RecordingSurface(width, height)
    return make


def reference_julia_pixel(px, py, width, height, focus_x, focus_y, radius, max_iter=100):
    """Per-pixel color of the main Julia render, computed one point at a time."""
    zx = focus_x + ((px / width) - 0.5) * 4 * radius
    zy = focus_y + ((py / height) - 0.5) * 4 * radius
    iterations = julia_escape_count(zx, zy, JULIA_C[0], JULIA_C[1], max_iter)
    if iterations == max_iter:
        return (0, 0, 0)
    return hsb_to_rgb((iterations / max_iter) * 300, 80, 90)
