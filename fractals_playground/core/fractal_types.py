"""
Fractal type definitions and parameter management.

This module defines the three fractals of the playground (an escape-time
Julia set, a quad-offset circle packing and a Koch-subdivided star) as
classes sharing one interface: paint the main view for a focus point and
radius, or paint a small preview thumbnail.
"""

import enum
import math
import numpy as np
from typing import Dict, Any, Optional, Tuple, Union
from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

from .math_functions import Viewport, ShapeMapping, FractalIterator, IterationResult
from .geometry import Circle, apollonian_circles, polygon_vertices, koch_star_points
from ..rendering.coloring import (
    ColoringEngine, hsb_to_rgb, SPECTRUM_SATURATION, SPECTRUM_BRIGHTNESS,
)
from ..rendering.surface import Surface

logger = logging.getLogger(__name__)

THUMBNAIL_BACKGROUND = '#1a1a1a'
THUMBNAIL_STAR_COLOR = '#ffdd44'


class FractalKind(enum.Enum):
    """Closed set of fractals the engine can draw."""
    JULIA = 'julia'
    APOLLONIAN = 'apollonian'
    KOCH = 'koch'

    @classmethod
    def parse(cls, value: Union[str, 'FractalKind']) -> 'FractalKind':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            available = ', '.join(kind.value for kind in cls)
            raise ValueError(f"Unknown fractal type '{value}'. Available: {available}") from None


@dataclass
class FractalParameters:
    """Base class for fractal parameters with validation."""

    def validate(self) -> None:
        """Validate parameter values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}


class FractalType(ABC):
    """Abstract base class for fractal types."""

    kind: FractalKind

    def __init__(self, name: str, parameters: FractalParameters):
        """
        Initialize fractal type.

        Args:
            name: Human-readable name for the fractal
            parameters: Fractal-specific parameters
        """
        self.name = name
        self.parameters = parameters
        self.parameters.validate()

    @abstractmethod
    def render(self, surface: Surface, focus_x: float, focus_y: float, radius: float) -> None:
        """
        Paint the main view of this fractal onto the surface.

        Args:
            surface: Target surface
            focus_x, focus_y: Focus point in the mathematical domain
            radius: Zoom radius
        """
        pass

    @abstractmethod
    def thumbnail(self, surface: Surface, width: int, height: int) -> None:
        """Paint a width x height preview of this fractal onto the surface."""
        pass

    def get_description(self) -> str:
        """Get a description of this fractal type."""
        return f"{self.name} fractal"


@dataclass
class JuliaParameters(FractalParameters):
    """Parameters for Julia set generation."""

    c_real: float = -0.8
    c_imag: float = 0.156
    max_iter: int = 100
    thumbnail_max_iter: int = 50

    def validate(self) -> None:
        """Validate Julia parameters."""
        if not isinstance(self.c_real, (int, float)):
            raise ValueError("c_real must be numeric")
        if not isinstance(self.c_imag, (int, float)):
            raise ValueError("c_imag must be numeric")
        if self.max_iter <= 0 or self.thumbnail_max_iter <= 0:
            raise ValueError("iteration limits must be positive")

    @property
    def c(self) -> complex:
        """Get the Julia constant as a complex number."""
        return complex(self.c_real, self.c_imag)


class JuliaSet(FractalType):
    """Escape-time Julia set painted pixel by pixel."""

    kind = FractalKind.JULIA

    def __init__(self, parameters: Optional[JuliaParameters] = None,
                 backend: Optional[Any] = None):
        """
        Initialize Julia set.

        Args:
            parameters: Julia-specific parameters
            backend: Optional accelerator; called as
                backend(viewport, c, max_iter) -> IterationResult
        """
        if parameters is None:
            parameters = JuliaParameters()
        super().__init__("Julia Set", parameters)
        self.backend = backend
        self.coloring = ColoringEngine()

    def compute(self, viewport: Viewport, max_iter: int) -> IterationResult:
        """Compute iteration counts for every pixel of the viewport."""
        if self.backend is not None:
            return self.backend(viewport, self.parameters.c, max_iter)
        z_real, z_imag = viewport.create_coordinate_arrays()
        return FractalIterator(max_iter).julia_iteration(z_real, z_imag, self.parameters.c)

    def render(self, surface: Surface, focus_x: float, focus_y: float, radius: float) -> None:
        viewport = Viewport(focus_x, focus_y, radius, surface.width, surface.height)
        result = self.compute(viewport, self.parameters.max_iter)
        rgba = self.coloring.render_color_image(result, 'spectrum')
        surface.put_image_data(rgba)

        logger.debug(f"Julia: {int(np.count_nonzero(~result.escaped))} of "
                     f"{result.iterations.size} pixels in the set")

    def thumbnail(self, surface: Surface, width: int, height: int) -> None:
        viewport = Viewport(0.0, 0.0, 1.0, width, height)
        z_real, z_imag = viewport.create_coordinate_arrays()
        result = FractalIterator(self.parameters.thumbnail_max_iter).julia_iteration(
            z_real, z_imag, self.parameters.c
        )
        surface.put_image_data(self.coloring.render_color_image(result, 'yellow_gradient'))

    def get_description(self) -> str:
        """Get description of Julia set."""
        return f"Julia set: z_{{n+1}} = z_n^2 + c, where c = {self.parameters.c} and z_0 is the pixel coordinate"


@dataclass
class ApollonianParameters(FractalParameters):
    """Parameters for the circle-packing approximation."""

    depth: int = 5
    scale_constant: float = 300.0
    size_constant: float = 100.0
    line_width: float = 1.0
    thumbnail_line_width: float = 2.0

    def validate(self) -> None:
        """Validate circle-packing parameters."""
        if self.depth < 0:
            raise ValueError("depth cannot be negative")
        if self.scale_constant <= 0 or self.size_constant <= 0:
            raise ValueError("mapping constants must be positive")


class ApollonianGasket(FractalType):
    """
    Quad-offset circle packing.

    Each circle is stroked with a hue chosen by its depth, then four children
    at 0.4 r offsets with radius 0.6 r are drawn. This approximates an
    Apollonian gasket; the circles are not mutually tangent.
    """

    kind = FractalKind.APOLLONIAN

    def __init__(self, parameters: Optional[ApollonianParameters] = None):
        if parameters is None:
            parameters = ApollonianParameters()
        super().__init__("Apollonian Gasket", parameters)
        self.mapping = ShapeMapping(parameters.scale_constant, parameters.size_constant)

    def depth_color(self, depth: int) -> Tuple[int, int, int]:
        """Stroke color for circles at the given remaining depth."""
        hue = (self.parameters.depth - depth) * 60
        return hsb_to_rgb(hue, SPECTRUM_SATURATION, SPECTRUM_BRIGHTNESS)

    def render(self, surface: Surface, focus_x: float, focus_y: float, radius: float) -> None:
        surface.set_line_width(self.parameters.line_width)

        cx, cy = self.mapping.center(focus_x, focus_y, radius)
        count = 0
        for circle, depth in apollonian_circles(cx, cy, self.mapping.feature_size(radius),
                                                self.parameters.depth):
            surface.set_stroke_style(self.depth_color(depth))
            surface.begin_path()
            surface.arc(circle.x, circle.y, circle.r)
            surface.stroke()
            count += 1

        logger.debug(f"Apollonian: stroked {count} circles")

    def thumbnail(self, surface: Surface, width: int, height: int) -> None:
        surface.fill_rect(0, 0, width, height, THUMBNAIL_BACKGROUND)

        center_x = width / 2
        center_y = height / 2
        base = min(width, height) / 6

        circles = [
            Circle(center_x, center_y - base, base * 0.8),
            Circle(center_x - base, center_y + base * 0.5, base * 0.8),
            Circle(center_x + base, center_y + base * 0.5, base * 0.8),
            Circle(center_x, center_y + base * 0.3, base * 0.4),
        ]

        for i, circle in enumerate(circles):
            intensity = (4 - i) / 4
            surface.set_stroke_style((math.floor(255 * intensity),
                                      math.floor(255 * intensity),
                                      math.floor(100 * intensity)))
            surface.set_line_width(self.parameters.thumbnail_line_width)
            surface.begin_path()
            surface.arc(circle.x, circle.y, circle.r)
            surface.stroke()

    def get_description(self) -> str:
        return (f"Apollonian gasket approximation: {self.parameters.depth} levels, "
                f"4 children per circle at 0.4r offset, radius 0.6r")


@dataclass
class KochParameters(FractalParameters):
    """Parameters for the Koch star."""

    depth: int = 3
    vertices: int = 8
    hue: float = 60.0
    scale_constant: float = 150.0
    size_constant: float = 100.0
    line_width: float = 1.0
    thumbnail_line_width: float = 1.5

    def validate(self) -> None:
        """Validate Koch star parameters."""
        if self.depth < 0:
            raise ValueError("depth cannot be negative")
        if self.vertices < 3:
            raise ValueError("a star needs at least 3 vertices")
        if self.scale_constant <= 0 or self.size_constant <= 0:
            raise ValueError("mapping constants must be positive")


class KochStar(FractalType):
    """Octagon whose edges are replaced by Koch curves, stroked as one path."""

    kind = FractalKind.KOCH

    def __init__(self, parameters: Optional[KochParameters] = None):
        if parameters is None:
            parameters = KochParameters()
        super().__init__("Koch Star", parameters)
        self.mapping = ShapeMapping(parameters.scale_constant, parameters.size_constant)

    def render(self, surface: Surface, focus_x: float, focus_y: float, radius: float) -> None:
        surface.set_stroke_style(hsb_to_rgb(self.parameters.hue, SPECTRUM_SATURATION,
                                            SPECTRUM_BRIGHTNESS))
        surface.set_line_width(self.parameters.line_width)

        cx, cy = self.mapping.center(focus_x, focus_y, radius)
        vertices = polygon_vertices(cx, cy, self.mapping.feature_size(radius),
                                    self.parameters.vertices)

        surface.begin_path()
        surface.move_to(vertices[0].x, vertices[0].y)
        segments = 0
        for point in koch_star_points(vertices, self.parameters.depth):
            surface.line_to(point.x, point.y)
            segments += 1
        surface.stroke()

        logger.debug(f"Koch: stroked {segments} segments")

    def thumbnail(self, surface: Surface, width: int, height: int) -> None:
        surface.fill_rect(0, 0, width, height, THUMBNAIL_BACKGROUND)

        vertices = polygon_vertices(width / 2, height / 2, min(width, height) / 3,
                                    self.parameters.vertices)

        surface.set_stroke_style(THUMBNAIL_STAR_COLOR)
        surface.set_line_width(self.parameters.thumbnail_line_width)
        surface.begin_path()
        surface.move_to(vertices[0].x, vertices[0].y)
        for vertex in vertices[1:]:
            surface.line_to(vertex.x, vertex.y)
        surface.close_path()
        surface.stroke()

    def get_description(self) -> str:
        return (f"Koch star: {self.parameters.vertices}-vertex outline with depth "
                f"{self.parameters.depth} Koch edges")


class FractalRegistry:
    """Lookup of the built-in fractal classes by kind."""

    _fractals: Dict[FractalKind, type] = {
        FractalKind.JULIA: JuliaSet,
        FractalKind.APOLLONIAN: ApollonianGasket,
        FractalKind.KOCH: KochStar,
    }

    @classmethod
    def get(cls, kind: Union[str, FractalKind]) -> type:
        """
        Get a fractal class by kind.

        Args:
            kind: FractalKind member or its string value

        Returns:
            Fractal class
        """
        return cls._fractals[FractalKind.parse(kind)]

    @classmethod
    def list_fractals(cls) -> Dict[str, str]:
        """Get a dictionary of available fractals and their descriptions."""
        return {kind.value: fractal_class().get_description()
                for kind, fractal_class in cls._fractals.items()}

    @classmethod
    def create_fractal(cls, kind: Union[str, FractalKind], **kwargs) -> FractalType:
        """
        Create a fractal instance with the given parameters.

        Args:
            kind: Fractal kind
            **kwargs: Parameters for the fractal

        Returns:
            Configured fractal instance
        """
        kind = FractalKind.parse(kind)
        fractal_class = cls._fractals[kind]

        param_classes = {
            FractalKind.JULIA: JuliaParameters,
            FractalKind.APOLLONIAN: ApollonianParameters,
            FractalKind.KOCH: KochParameters,
        }
        if kwargs:
            return fractal_class(param_classes[kind](**kwargs))
        return fractal_class()
