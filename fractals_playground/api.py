"""
Main API classes for fractal rendering.

This module provides the high-level interface of the engine: a renderer that
dispatches on the fractal kind and paints a caller-owned surface, and an
explorer that keeps the interactive state (selected fractal, zoom level and
focus point) of a playground view.
"""

from typing import Optional, Union, Dict, Any, Tuple, Callable
from dataclasses import dataclass
import logging
import time

from .core.fractal_types import (
    FractalKind, FractalType, JuliaSet, JuliaParameters, ApollonianGasket, KochStar,
)
from .core.math_functions import (
    FocusPoint, Viewport, IterationResult, FractalIterator, click_to_focus,
)
from .rendering.surface import Surface, ImageSurface
from .acceleration.numba_backend import get_numba_accelerator, is_numba_available
from .acceleration.multiprocessing import MultiprocessingAccelerator

logger = logging.getLogger(__name__)

# Radius of each zoom level; smaller is more zoomed in
ZOOM_LEVELS: Tuple[float, ...] = (2.0, 1.0, 0.5, 0.1, 0.01)


@dataclass
class RenderConfig:
    """Configuration for fractal rendering."""

    # Canvas parameters
    width: int = 600
    height: int = 600
    background: Tuple[int, int, int] = (0, 0, 0)

    # Julia parameters
    max_iterations: int = 100
    thumbnail_iterations: int = 50
    julia_c_real: float = -0.8
    julia_c_imag: float = 0.156

    # Thumbnails
    thumbnail_width: int = 120
    thumbnail_height: int = 80

    # Performance
    use_numba: bool = True
    use_multiprocessing: bool = False
    num_processes: Optional[int] = None
    band_height: int = 64
    multiprocessing_min_pixels: int = 250000

    def validate(self):
        """Validate configuration parameters."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Width and height must be positive")

        if self.thumbnail_width <= 0 or self.thumbnail_height <= 0:
            raise ValueError("Thumbnail width and height must be positive")

        if self.max_iterations <= 0 or self.thumbnail_iterations <= 0:
            raise ValueError("Iteration limits must be positive")

        if self.band_height <= 0:
            raise ValueError("band_height must be positive")

        if self.num_processes is not None and self.num_processes <= 0:
            raise ValueError("num_processes must be positive")

        if len(self.background) != 3:
            raise ValueError("background must be an (r, g, b) tuple")


class FractalRenderer:
    """Main fractal rendering engine."""

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize fractal renderer.

        Args:
            config: Rendering configuration (uses defaults if None)
        """
        self.config = config or RenderConfig()
        self.config.validate()

        self._setup_accelerators()

        julia_params = JuliaParameters(
            c_real=self.config.julia_c_real,
            c_imag=self.config.julia_c_imag,
            max_iter=self.config.max_iterations,
            thumbnail_max_iter=self.config.thumbnail_iterations,
        )
        self.fractals: Dict[FractalKind, FractalType] = {
            FractalKind.JULIA: JuliaSet(julia_params, backend=self._julia_backend),
            FractalKind.APOLLONIAN: ApollonianGasket(),
            FractalKind.KOCH: KochStar(),
        }

        logger.debug(f"FractalRenderer initialized: {self.config.width}x{self.config.height}")

    def _setup_accelerators(self):
        """Setup available acceleration backends."""
        self.accelerators = {
            'numba': None,
            'multiprocessing': None
        }

        if self.config.use_numba and is_numba_available():
            try:
                self.accelerators['numba'] = get_numba_accelerator()
                logger.debug("Numba acceleration enabled")
            except Exception as e:
                logger.warning(f"Failed to initialize Numba: {e}")

        if self.config.use_multiprocessing:
            self.accelerators['multiprocessing'] = MultiprocessingAccelerator(
                self.config.num_processes, self.config.band_height
            )
            logger.debug(f"Multiprocessing enabled: "
                         f"{self.accelerators['multiprocessing'].num_processes} processes")

    def _julia_backend(self, viewport: Viewport, c: complex, max_iter: int) -> IterationResult:
        """Choose and execute the best escape-time method for the viewport."""
        total_pixels = viewport.width * viewport.height

        if (self.accelerators['multiprocessing'] and
                total_pixels >= self.config.multiprocessing_min_pixels):
            try:
                return self.accelerators['multiprocessing'].julia_iteration(viewport, c, max_iter)
            except Exception as e:
                logger.warning(f"Multiprocessing render failed, falling back: {e}")

        z_real, z_imag = viewport.create_coordinate_arrays()

        if self.accelerators['numba']:
            try:
                return self.accelerators['numba'].julia_iteration(z_real, z_imag, c, max_iter)
            except Exception as e:
                logger.warning(f"Numba render failed, falling back: {e}")

        return FractalIterator(max_iter).julia_iteration(z_real, z_imag, c)

    def get_fractal(self, fractal_type: Union[str, FractalKind]) -> FractalType:
        """Get the configured fractal for a kind."""
        return self.fractals[FractalKind.parse(fractal_type)]

    def render(self, fractal_type: Union[str, FractalKind], surface: Surface,
               focus_x: float, focus_y: float, radius: float) -> None:
        """
        Clear the surface and paint one fractal onto it.

        Args:
            fractal_type: Fractal kind ('julia', 'apollonian' or 'koch')
            surface: Caller-owned target surface
            focus_x, focus_y: Focus point in [-2, 2] x [-2, 2]
            radius: Zoom radius, must be positive
        """
        fractal = self.get_fractal(fractal_type)
        if radius <= 0:
            raise ValueError("radius must be positive")

        start_time = time.time()
        logger.info(f"Rendering {fractal.name} at ({focus_x:.4f}, {focus_y:.4f}), radius {radius}")

        surface.clear(self.config.background)
        fractal.render(surface, focus_x, focus_y, radius)

        logger.info(f"Render complete: {time.time() - start_time:.2f}s")

    def generate_thumbnail(self, fractal_type: Union[str, FractalKind], surface: Surface,
                           width: int, height: int) -> None:
        """
        Paint a preview thumbnail of one fractal.

        Args:
            fractal_type: Fractal kind
            surface: Caller-owned target surface of size width x height
            width, height: Thumbnail size in pixels
        """
        if width <= 0 or height <= 0:
            raise ValueError("Thumbnail width and height must be positive")
        fractal = self.get_fractal(fractal_type)
        fractal.thumbnail(surface, width, height)
        logger.debug(f"Generated thumbnail for {fractal.name}")

    def generate_thumbnails(self, width: Optional[int] = None,
                            height: Optional[int] = None) -> Dict[FractalKind, ImageSurface]:
        """Render thumbnails for every fractal kind onto fresh image surfaces."""
        width = width or self.config.thumbnail_width
        height = height or self.config.thumbnail_height

        thumbnails = {}
        for kind in FractalKind:
            surface = ImageSurface(width, height)
            self.generate_thumbnail(kind, surface, width, height)
            thumbnails[kind] = surface
        return thumbnails


class FractalExplorer:
    """Interactive exploration state: selected fractal, zoom level and focus."""

    def __init__(self, initial_config: Optional[RenderConfig] = None,
                 zoom_levels: Tuple[float, ...] = ZOOM_LEVELS):
        """Initialize fractal explorer."""
        if not zoom_levels or any(level <= 0 for level in zoom_levels):
            raise ValueError("zoom levels must be positive")

        self.config = initial_config or RenderConfig()
        self.renderer = FractalRenderer(self.config)
        self.zoom_levels = tuple(zoom_levels)
        self.selected = FractalKind.JULIA
        self.zoom_level = 0
        self.focus = FocusPoint(0.0, 0.0)
        self.on_change: Optional[Callable[['FractalExplorer'], None]] = None

    @property
    def radius(self) -> float:
        return self.zoom_levels[self.zoom_level]

    def _changed(self):
        if self.on_change is not None:
            self.on_change(self)

    def select(self, fractal_type: Union[str, FractalKind]):
        """Select the fractal to display."""
        self.selected = FractalKind.parse(fractal_type)
        logger.info(f"Selected fractal: {self.selected.value}")
        self._changed()

    def set_zoom_level(self, level: int):
        """Select a zoom level by index into the zoom level list."""
        if not 0 <= level < len(self.zoom_levels):
            raise ValueError(f"Zoom level must be between 0 and {len(self.zoom_levels) - 1}")
        self.zoom_level = level
        logger.info(f"Zoom level {level}: radius {self.radius}")
        self._changed()

    def click(self, px: float, py: float) -> FocusPoint:
        """
        Move the focus to the clicked canvas pixel.

        Args:
            px, py: Click position in canvas pixels

        Returns:
            The new focus point
        """
        self.focus = click_to_focus(px, py, self.config.width, self.config.height)
        logger.info(f"Focus moved to ({self.focus.x:.2f}, {self.focus.y:.2f})")
        self._changed()
        return self.focus

    def reset_view(self):
        """Return to the default focus and zoom level."""
        self.focus = FocusPoint(0.0, 0.0)
        self.zoom_level = 0
        self._changed()

    def render_current(self, surface: Optional[Surface] = None) -> Surface:
        """Render the current state; creates an image surface if none is given."""
        if surface is None:
            surface = ImageSurface(self.config.width, self.config.height)
        self.renderer.render(self.selected, surface, self.focus.x, self.focus.y, self.radius)
        return surface

    def get_exploration_info(self) -> Dict[str, Any]:
        """Get current exploration state information."""
        return {
            'fractal': self.selected.value,
            'focus': (self.focus.x, self.focus.y),
            'radius': self.radius,
            'zoom_level': self.zoom_level,
            'overlay': f"Focus: ({self.focus.x:.2f}, {self.focus.y:.2f}) | Radius: {self.radius:g}",
        }


_default_renderer: Optional[FractalRenderer] = None


def _get_default_renderer() -> FractalRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = FractalRenderer()
    return _default_renderer


def render(fractal_type: Union[str, FractalKind], surface: Surface,
           focus_x: float, focus_y: float, radius: float) -> None:
    """Paint a fractal onto the surface with the default configuration."""
    _get_default_renderer().render(fractal_type, surface, focus_x, focus_y, radius)


def generate_thumbnail(fractal_type: Union[str, FractalKind], surface: Surface,
                       width: int, height: int) -> None:
    """Paint a fractal thumbnail onto the surface with the default configuration."""
    _get_default_renderer().generate_thumbnail(fractal_type, surface, width, height)
