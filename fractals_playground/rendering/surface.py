"""
Drawing surfaces the fractal generators paint into.

The generators only need two capabilities from a surface: a bulk write of an
RGBA pixel buffer, and canvas-style stroked paths (move_to / line_to / arc /
stroke). Surface defines that interface; ImageSurface implements it on top of
a Pillow image and RecordingSurface keeps an ordered log of the calls.
"""

import math
import numpy as np
from typing import List, Tuple, Union, Any, Optional
from abc import ABC, abstractmethod
import logging

from PIL import Image, ImageDraw

from .coloring import ColorRGB, parse_color

logger = logging.getLogger(__name__)

Color = Union[str, Tuple[int, int, int], ColorRGB]


class Surface(ABC):
    """Abstract raster target with a pixel buffer and stroked paths."""

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def put_image_data(self, rgba: np.ndarray, dx: int = 0, dy: int = 0) -> None:
        """
        Write an RGBA block with its top-left corner at (dx, dy).

        Pixels falling outside the surface are dropped.

        Args:
            rgba: uint8 array (rows, cols, 4)
            dx, dy: Destination of the block's top-left pixel
        """
        pass

    @abstractmethod
    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        pass

    @abstractmethod
    def set_stroke_style(self, color: Color) -> None:
        pass

    @abstractmethod
    def set_line_width(self, width: float) -> None:
        pass

    @abstractmethod
    def begin_path(self) -> None:
        pass

    @abstractmethod
    def move_to(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    def line_to(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    def arc(self, x: float, y: float, r: float) -> None:
        """Add a full circle of radius r centered at (x, y) to the path."""
        pass

    @abstractmethod
    def close_path(self) -> None:
        pass

    @abstractmethod
    def stroke(self) -> None:
        """Stroke the current path with the current style and line width."""
        pass

    def clear(self, color: Color = (0, 0, 0)) -> None:
        """Fill the whole surface with a single color."""
        self.fill_rect(0, 0, self.width, self.height, color)


def _clip_block(rgba: np.ndarray, dx: int, dy: int, width: int,
                height: int) -> Optional[Tuple[np.ndarray, int, int]]:
    """Crop an RGBA block placed at (dx, dy) to a width x height surface."""
    rgba = np.asarray(rgba)
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected RGBA array (rows, cols, 4), got {rgba.shape}")

    dx = int(dx)
    dy = int(dy)
    x0 = max(0, dx)
    y0 = max(0, dy)
    x1 = min(width, dx + rgba.shape[1])
    y1 = min(height, dy + rgba.shape[0])
    if x1 <= x0 or y1 <= y0:
        return None

    block = rgba[y0 - dy:y1 - dy, x0 - dx:x1 - dx].astype(np.uint8, copy=False)
    return block, x0, y0


class _PathBuilder:
    """Canvas-style path made of polylines and full circles."""

    def __init__(self):
        self.polylines: List[List[Tuple[float, float]]] = []
        self.circles: List[Tuple[float, float, float]] = []
        self._current: Optional[List[Tuple[float, float]]] = None

    def move_to(self, x: float, y: float) -> None:
        self._current = [(x, y)]
        self.polylines.append(self._current)

    def line_to(self, x: float, y: float) -> None:
        if self._current is None:
            self.move_to(x, y)
        else:
            self._current.append((x, y))

    def arc(self, x: float, y: float, r: float) -> None:
        self.circles.append((x, y, r))
        self._current = None

    def close_path(self) -> None:
        if self._current and len(self._current) > 1:
            start = self._current[0]
            self._current.append(start)
            self.move_to(*start)


class ImageSurface(Surface):
    """Surface backed by a Pillow RGBA image."""

    def __init__(self, width: int, height: int, background: Color = (0, 0, 0)):
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")
        self.image = Image.new('RGBA', (width, height), parse_color(background) + (255,))
        self._draw = ImageDraw.Draw(self.image)
        self._stroke_color: Tuple[int, int, int] = (0, 0, 0)
        self._line_width = 1.0
        self._path = _PathBuilder()

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def put_image_data(self, rgba: np.ndarray, dx: int = 0, dy: int = 0) -> None:
        clipped = _clip_block(rgba, dx, dy, self.width, self.height)
        if clipped is None:
            return
        block, x0, y0 = clipped
        self.image.paste(Image.fromarray(np.ascontiguousarray(block)), (x0, y0))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        if w <= 0 or h <= 0:
            return
        self._draw.rectangle([x, y, max(x, x + w - 1), max(y, y + h - 1)], fill=parse_color(color) + (255,))

    def set_stroke_style(self, color: Color) -> None:
        self._stroke_color = parse_color(color)

    def set_line_width(self, width: float) -> None:
        self._line_width = width

    def begin_path(self) -> None:
        self._path = _PathBuilder()

    def move_to(self, x: float, y: float) -> None:
        self._path.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.line_to(x, y)

    def arc(self, x: float, y: float, r: float) -> None:
        self._path.arc(x, y, r)

    def close_path(self) -> None:
        self._path.close_path()

    def stroke(self) -> None:
        fill = self._stroke_color + (255,)
        width = max(1, int(round(self._line_width)))

        for polyline in self._path.polylines:
            if len(polyline) > 1:
                self._draw.line(polyline, fill=fill, width=width)

        for x, y, r in self._path.circles:
            if r <= 0:
                continue
            self._draw.ellipse([x - r, y - r, x + r, y + r], outline=fill, width=width)

    def to_array(self) -> np.ndarray:
        """Return the surface pixels as a (height, width, 4) uint8 array."""
        return np.asarray(self.image, dtype=np.uint8).copy()


class RecordingSurface(Surface):
    """
    Headless surface that records every drawing call.

    Pixel writes land in a NumPy buffer; stroke operations are appended to
    `calls` as (name, *args) tuples in the order they were issued.
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive")
        self._width = width
        self._height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self.calls: List[Tuple[Any, ...]] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def put_image_data(self, rgba: np.ndarray, dx: int = 0, dy: int = 0) -> None:
        clipped = _clip_block(rgba, dx, dy, self._width, self._height)
        if clipped is not None:
            block, x0, y0 = clipped
            self.pixels[y0:y0 + block.shape[0], x0:x0 + block.shape[1]] = block
        self.calls.append(('put_image_data', dx, dy))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        rgb = parse_color(color)
        x0 = max(0, int(math.floor(x)))
        y0 = max(0, int(math.floor(y)))
        x1 = min(self._width, int(math.ceil(x + w)))
        y1 = min(self._height, int(math.ceil(y + h)))
        if x1 > x0 and y1 > y0:
            self.pixels[y0:y1, x0:x1, :3] = rgb
            self.pixels[y0:y1, x0:x1, 3] = 255
        self.calls.append(('fill_rect', x, y, w, h, rgb))

    def set_stroke_style(self, color: Color) -> None:
        self.calls.append(('set_stroke_style', parse_color(color)))

    def set_line_width(self, width: float) -> None:
        self.calls.append(('set_line_width', width))

    def begin_path(self) -> None:
        self.calls.append(('begin_path',))

    def move_to(self, x: float, y: float) -> None:
        self.calls.append(('move_to', x, y))

    def line_to(self, x: float, y: float) -> None:
        self.calls.append(('line_to', x, y))

    def arc(self, x: float, y: float, r: float) -> None:
        self.calls.append(('arc', x, y, r))

    def close_path(self) -> None:
        self.calls.append(('close_path',))

    def stroke(self) -> None:
        self.calls.append(('stroke',))

    def count(self, name: str) -> int:
        """Number of recorded calls with the given name."""
        return sum(1 for call in self.calls if call[0] == name)

    def calls_named(self, name: str) -> List[Tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]
