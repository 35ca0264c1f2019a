"""
Fractals playground rendering engine.

This library paints three parametric fractals onto a raster surface: an
escape-time Julia set, a recursive circle-packing approximation of an
Apollonian gasket, and a Koch-subdivided eight-vertex star. A view is chosen
by a focus point in [-2, 2] x [-2, 2] and a zoom radius.

Example usage:
    >>> from fractals_playground import FractalRenderer, ImageSurface
    >>> renderer = FractalRenderer()
    >>> surface = ImageSurface(600, 600)
    >>> renderer.render('julia', surface, 0.0, 0.0, 1.0)
    >>> surface.image.save('julia.png')
"""

__version__ = "1.0.0"
__author__ = "Fractals Playground Team"

from fractals_playground.core.fractal_types import (
    FractalKind, FractalRegistry, JuliaSet, ApollonianGasket, KochStar,
)
from fractals_playground.core.math_functions import FocusPoint, FractalIterator, click_to_focus
from fractals_playground.rendering.coloring import ColoringEngine, hsb_to_rgb
from fractals_playground.rendering.surface import Surface, ImageSurface, RecordingSurface
from fractals_playground.rendering.image_output import ImageExporter

# Main API classes
from fractals_playground.api import (
    FractalRenderer, FractalExplorer, RenderConfig, ZOOM_LEVELS, render, generate_thumbnail,
)

__all__ = [
    "FractalRenderer",
    "FractalExplorer",
    "RenderConfig",
    "ZOOM_LEVELS",
    "render",
    "generate_thumbnail",
    "FractalKind",
    "FractalRegistry",
    "JuliaSet",
    "ApollonianGasket",
    "KochStar",
    "FocusPoint",
    "FractalIterator",
    "click_to_focus",
    "ColoringEngine",
    "hsb_to_rgb",
    "Surface",
    "ImageSurface",
    "RecordingSurface",
    "ImageExporter",
]
