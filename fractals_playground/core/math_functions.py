"""
Core mathematical functions for fractal generation.

This module provides the coordinate conventions shared by all generators
(per-pixel mapping, per-shape mapping and the click-to-focus inversion) and
the escape-time iteration used by the Julia set.
"""

import numpy as np
from typing import Tuple, Optional
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

# Width of the logical domain [-2, 2] on both axes
DOMAIN_SPAN = 4.0

# Canvas center offset for the per-shape mapping (600 px canvas)
CANVAS_CENTER = 300.0


@dataclass(frozen=True)
class FocusPoint:
    """Center of the viewport in the mathematical domain."""
    x: float = 0.0
    y: float = 0.0


class Viewport:
    """Per-pixel mapping of a width x height raster around a focus point."""

    def __init__(self, focus_x: float, focus_y: float, radius: float,
                 width: int, height: int):
        """
        Initialize viewport.

        Args:
            focus_x, focus_y: Focus point in the mathematical domain
            radius: Zoom radius; smaller is more zoomed in
            width, height: Raster resolution in pixels
        """
        if radius <= 0:
            raise ValueError("radius must be positive")
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")

        self.focus_x = focus_x
        self.focus_y = focus_y
        self.radius = radius
        self.width = width
        self.height = height

    def pixel_to_complex(self, px: float, py: float) -> complex:
        """Convert pixel coordinates to a point in the mathematical domain."""
        real = self.focus_x + ((px / self.width) - 0.5) * DOMAIN_SPAN * self.radius
        imag = self.focus_y + ((py / self.height) - 0.5) * DOMAIN_SPAN * self.radius
        return complex(real, imag)

    def create_coordinate_arrays(self, row_start: int = 0,
                                 row_end: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Create real and imaginary coordinate arrays for a band of rows.

        Args:
            row_start: First row (inclusive)
            row_end: Last row (exclusive); defaults to the full height

        Returns:
            Tuple of (real_coords, imag_coords), each (rows, width) float64
        """
        if row_end is None:
            row_end = self.height

        px = np.arange(self.width, dtype=np.float64)
        py = np.arange(row_start, row_end, dtype=np.float64)

        x = self.focus_x + ((px / self.width) - 0.5) * DOMAIN_SPAN * self.radius
        y = self.focus_y + ((py / self.height) - 0.5) * DOMAIN_SPAN * self.radius
        return np.meshgrid(x, y)


@dataclass(frozen=True)
class ShapeMapping:
    """
    Per-shape mapping used by the recursive generators.

    Shapes are centered at focus * (scale_constant / radius) + CANVAS_CENTER
    and sized size_constant / radius, so features shrink as the radius shrinks.
    """
    scale_constant: float
    size_constant: float = 100.0

    def scale(self, radius: float) -> float:
        if radius <= 0:
            raise ValueError("radius must be positive")
        return self.scale_constant / radius

    def center(self, focus_x: float, focus_y: float, radius: float) -> Tuple[float, float]:
        scale = self.scale(radius)
        return focus_x * scale + CANVAS_CENTER, focus_y * scale + CANVAS_CENTER

    def feature_size(self, radius: float) -> float:
        if radius <= 0:
            raise ValueError("radius must be positive")
        return self.size_constant / radius


def click_to_focus(px: float, py: float, width: int, height: int) -> FocusPoint:
    """
    Convert a click on the canvas into a new focus point.

    The inversion ignores the current zoom and treats the radius as 1.
    """
    return FocusPoint(((px / width) - 0.5) * DOMAIN_SPAN,
                      ((py / height) - 0.5) * DOMAIN_SPAN)


class IterationResult:
    """Container for escape-time iteration results."""

    def __init__(self, iterations: np.ndarray, max_iter: int):
        """
        Initialize iteration result.

        Args:
            iterations: Array of iteration counts (0..max_iter)
            max_iter: Iteration limit used for the computation
        """
        self.iterations = iterations
        self.max_iter = max_iter
        self.shape = iterations.shape

    @property
    def escaped(self) -> np.ndarray:
        """Boolean array of points that escaped before max_iter."""
        return self.iterations < self.max_iter


def julia_escape_count(zx: float, zy: float, c_real: float, c_imag: float,
                       max_iter: int) -> int:
    """Iterate z <- z^2 + c for a single point and return the iteration count."""
    iterations = 0
    while zx * zx + zy * zy < 4 and iterations < max_iter:
        xtemp = zx * zx - zy * zy + c_real
        zy = 2 * zx * zy + c_imag
        zx = xtemp
        iterations += 1
    return iterations


class FractalIterator:
    """NumPy escape-time iterator."""

    def __init__(self, max_iter: int = 100):
        """
        Initialize fractal iterator.

        Args:
            max_iter: Maximum number of iterations
        """
        if max_iter <= 0:
            raise ValueError("max_iter must be positive")
        self.max_iter = max_iter

    def julia_iteration(self, z_real: np.ndarray, z_imag: np.ndarray,
                        c: complex) -> IterationResult:
        """
        Compute Julia set iterations.

        Each point starts from its own coordinate and is counted once per
        update while |z|^2 < 4, matching julia_escape_count() exactly.

        Args:
            z_real: Real parts of the starting points
            z_imag: Imaginary parts of the starting points
            c: Julia set constant

        Returns:
            IterationResult with iteration counts
        """
        zx = np.array(z_real, dtype=np.float64)
        zy = np.array(z_imag, dtype=np.float64)
        c_real = float(c.real)
        c_imag = float(c.imag)

        iterations = np.zeros(zx.shape, dtype=np.int32)
        active = np.ones(zx.shape, dtype=bool)

        for _ in range(self.max_iter):
            active &= (zx * zx + zy * zy) < 4
            if not np.any(active):
                break

            ax = zx[active]
            ay = zy[active]
            xtemp = ax * ax - ay * ay + c_real
            zy[active] = 2 * ax * ay + c_imag
            zx[active] = xtemp
            iterations[active] += 1

        return IterationResult(iterations, self.max_iter)
