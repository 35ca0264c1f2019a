"""
Color model and coloring algorithms for fractal rendering.

This module provides the hue/saturation/brightness to RGB conversion shared by
every generator, in scalar and vectorised form, plus the escape-time coloring
schemes used by the main Julia render and by its thumbnail.
"""

import math
import numpy as np
from typing import Dict, List, Tuple, Union
from dataclasses import dataclass
from abc import ABC, abstractmethod
import logging

from ..core.math_functions import IterationResult

logger = logging.getLogger(__name__)

# Fixed saturation/brightness used by the main renderers
SPECTRUM_SATURATION = 80
SPECTRUM_BRIGHTNESS = 90

# Escaped points are spread over 0-300 degrees (violet to red)
SPECTRUM_HUE_RANGE = 300


@dataclass(frozen=True)
class ColorRGB:
    """8-bit RGB color representation."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        """Validate RGB values."""
        for component in [self.r, self.g, self.b]:
            if not 0 <= component <= 255:
                raise ValueError("RGB components must be between 0 and 255")

    def to_tuple(self) -> Tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to a '#rrggbb' string."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @classmethod
    def from_hsb(cls, hue: float, saturation: float, brightness: float) -> 'ColorRGB':
        """Create a color from hue (degrees), saturation and brightness (percent)."""
        return cls(*hsb_to_rgb(hue, saturation, brightness))


def _round_half_up(value: float) -> int:
    """Round half up, then clamp to a byte like a canvas color string."""
    return min(255, max(0, int(math.floor(value + 0.5))))


def hsb_to_rgb(hue: float, saturation: float, brightness: float) -> Tuple[int, int, int]:
    """
    Convert HSB color values to 8-bit RGB.

    Hue values outside [0, 360) are not rejected: they fall through to the
    last (magenta to red) sector. Negative hues can push a channel below
    zero; channels are clamped to 0-255.

    Args:
        hue: Hue in degrees, conceptually 0-360
        saturation: Saturation in percent (0-100)
        brightness: Brightness in percent (0-100)

    Returns:
        Tuple of (r, g, b) values 0-255
    """
    s = saturation / 100
    b = brightness / 100

    c = b * s  # Chroma
    x = c * (1 - abs(math.fmod(hue / 60, 2) - 1))
    m = b - c

    if 0 <= hue < 60:
        r, g, bl = c, x, 0.0
    elif 60 <= hue < 120:
        r, g, bl = x, c, 0.0
    elif 120 <= hue < 180:
        r, g, bl = 0.0, c, x
    elif 180 <= hue < 240:
        r, g, bl = 0.0, x, c
    elif 240 <= hue < 300:
        r, g, bl = x, 0.0, c
    else:
        r, g, bl = c, 0.0, x

    return (
        _round_half_up((r + m) * 255),
        _round_half_up((g + m) * 255),
        _round_half_up((bl + m) * 255),
    )


def hsb_to_rgb_array(hue: np.ndarray, saturation: float, brightness: float) -> np.ndarray:
    """
    Vectorised HSB to RGB conversion.

    Produces exactly the bytes hsb_to_rgb() produces for each element.

    Args:
        hue: Array of hues in degrees
        saturation: Saturation in percent (0-100)
        brightness: Brightness in percent (0-100)

    Returns:
        uint8 array with a trailing RGB axis
    """
    hue = np.asarray(hue, dtype=np.float64)
    s = saturation / 100
    b = brightness / 100

    c = b * s
    x = c * (1 - np.abs(np.fmod(hue / 60, 2) - 1))
    m = b - c
    zero = np.zeros_like(hue)
    chroma = np.full_like(hue, c)

    sectors = [
        (hue >= 0) & (hue < 60),
        (hue >= 60) & (hue < 120),
        (hue >= 120) & (hue < 180),
        (hue >= 180) & (hue < 240),
        (hue >= 240) & (hue < 300),
    ]
    r = np.select(sectors, [chroma, x, zero, zero, x], default=chroma)
    g = np.select(sectors, [x, chroma, chroma, x, zero], default=zero)
    bl = np.select(sectors, [zero, zero, x, chroma, chroma], default=x)

    rgb = np.stack([r, g, bl], axis=-1)
    return np.clip(np.floor((rgb + m) * 255 + 0.5), 0, 255).astype(np.uint8)


def parse_color(color: Union[str, Tuple[int, int, int], ColorRGB]) -> Tuple[int, int, int]:
    """Normalize '#rrggbb' strings, tuples and ColorRGB into an RGB tuple."""
    if isinstance(color, ColorRGB):
        return color.to_tuple()
    if isinstance(color, str):
        text = color.lstrip('#')
        if len(text) != 6:
            raise ValueError(f"Invalid color string: {color}")
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    if isinstance(color, (tuple, list)) and len(color) == 3:
        return (int(color[0]), int(color[1]), int(color[2]))
    raise ValueError(f"Invalid color format: {color}")


class ColoringAlgorithm(ABC):
    """Abstract base class for coloring algorithms."""

    @abstractmethod
    def apply(self, result: IterationResult) -> np.ndarray:
        """
        Apply coloring algorithm to iteration result.

        Args:
            result: Fractal iteration result

        Returns:
            RGBA image array (height, width, 4), uint8
        """
        pass


class SpectrumColoring(ColoringAlgorithm):
    """Light spectrum escape-time coloring with black set members."""

    def __init__(self, saturation: float = SPECTRUM_SATURATION,
                 brightness: float = SPECTRUM_BRIGHTNESS,
                 hue_range: float = SPECTRUM_HUE_RANGE):
        self.saturation = saturation
        self.brightness = brightness
        self.hue_range = hue_range

    def apply(self, result: IterationResult) -> np.ndarray:
        """
        Apply spectrum coloring.

        Escaped points get hue (iterations / max_iter) * hue_range, points
        that never escaped are opaque black.
        """
        hue = (result.iterations.astype(np.float64) / result.max_iter) * self.hue_range

        rgba = np.empty((*result.shape, 4), dtype=np.uint8)
        rgba[..., :3] = hsb_to_rgb_array(hue, self.saturation, self.brightness)
        rgba[..., 3] = 255

        # Set inside color for non-escaped points
        mask = ~result.escaped
        if np.any(mask):
            rgba[mask, :3] = 0

        return rgba


class YellowGradientColoring(ColoringAlgorithm):
    """Yellow gradient used by preview thumbnails; darker with more iterations."""

    def apply(self, result: IterationResult) -> np.ndarray:
        """Apply yellow gradient coloring. Set members are not blacked out."""
        intensity = result.iterations.astype(np.float64) / result.max_iter

        rgba = np.empty((*result.shape, 4), dtype=np.uint8)
        rgba[..., 0] = np.floor(255 * (1 - intensity * 0.5)).astype(np.uint8)
        rgba[..., 1] = np.floor(255 * (1 - intensity * 0.3)).astype(np.uint8)
        rgba[..., 2] = np.floor(100 * (1 - intensity)).astype(np.uint8)
        rgba[..., 3] = 255
        return rgba


class ColoringEngine:
    """Registry of the coloring algorithms known to the renderers."""

    def __init__(self):
        """Initialize coloring engine with built-in algorithms."""
        self.algorithms: Dict[str, ColoringAlgorithm] = {
            'spectrum': SpectrumColoring(),
            'yellow_gradient': YellowGradientColoring(),
        }

    def get_algorithm(self, name: str) -> ColoringAlgorithm:
        """Get coloring algorithm by name."""
        if name not in self.algorithms:
            available = ', '.join(self.algorithms.keys())
            raise ValueError(f"Unknown coloring algorithm '{name}'. Available: {available}")
        return self.algorithms[name]

    def render_color_image(self, result: IterationResult, algorithm: str = 'spectrum') -> np.ndarray:
        """
        Render an RGBA image from an iteration result.

        Args:
            result: Fractal iteration result
            algorithm: Coloring algorithm name

        Returns:
            RGBA image array (height, width, 4), uint8
        """
        return self.get_algorithm(algorithm).apply(result)

    def list_algorithms(self) -> List[str]:
        """Get list of available coloring algorithms."""
        return list(self.algorithms.keys())
