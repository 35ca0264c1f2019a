"""
Geometry generators for the recursive fractals.

The functions here only compute shapes; they yield them in the exact order
they have to be drawn, so emitting them onto a surface stays a simple
sequential loop.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

# Child circles sit at 0.4 r from the parent center with radius 0.6 r
APOLLONIAN_OFFSET_RATIO = 0.4
APOLLONIAN_SHRINK_RATIO = 0.6

# Circles smaller than one pixel are not drawn
MIN_CIRCLE_RADIUS = 1.0


@dataclass(frozen=True)
class Vertex:
    x: float
    y: float


@dataclass(frozen=True)
class Circle:
    x: float
    y: float
    r: float


def apollonian_circles(x: float, y: float, r: float, depth: int) -> Iterator[Tuple[Circle, int]]:
    """
    Yield (circle, depth) pairs of the quad-offset circle packing.

    This is an approximation of an Apollonian gasket: every circle spawns
    four children offset right, left, down and up, instead of filling the
    gaps between mutually tangent circles.

    Args:
        x, y: Center of the current circle
        r: Radius of the current circle
        depth: Remaining recursion depth
    """
    if depth <= 0 or r < MIN_CIRCLE_RADIUS:
        return

    yield Circle(x, y, r), depth

    if depth > 1:
        new_r = r * APOLLONIAN_SHRINK_RATIO
        offset = r * APOLLONIAN_OFFSET_RATIO

        yield from apollonian_circles(x + offset, y, new_r, depth - 1)
        yield from apollonian_circles(x - offset, y, new_r, depth - 1)
        yield from apollonian_circles(x, y + offset, new_r, depth - 1)
        yield from apollonian_circles(x, y - offset, new_r, depth - 1)


def koch_points(x1: float, y1: float, x2: float, y2: float, depth: int) -> Iterator[Vertex]:
    """
    Yield the line_to targets of a Koch curve from (x1, y1) to (x2, y2).

    The start point itself is not yielded; a segment at depth d yields
    4 ** d points.
    """
    if depth == 0:
        yield Vertex(x2, y2)
        return

    dx = x2 - x1
    dy = y2 - y1

    x3 = x1 + dx / 3
    y3 = y1 + dy / 3

    x4 = x1 + 2 * dx / 3
    y4 = y1 + 2 * dy / 3

    # Apex of the equilateral bump on the middle third
    px = x3 + (x4 - x3) * 0.5 - (y4 - y3) * math.sqrt(3) / 6
    py = y3 + (y4 - y3) * 0.5 + (x4 - x3) * math.sqrt(3) / 6

    yield from koch_points(x1, y1, x3, y3, depth - 1)
    yield from koch_points(x3, y3, px, py, depth - 1)
    yield from koch_points(px, py, x4, y4, depth - 1)
    yield from koch_points(x4, y4, x2, y2, depth - 1)


def polygon_vertices(cx: float, cy: float, size: float, count: int = 8) -> List[Vertex]:
    """Vertices evenly spaced around (cx, cy), starting at angle 0."""
    vertices = []
    for i in range(count):
        angle = (i * math.pi) / (count / 2)
        vertices.append(Vertex(cx + math.cos(angle) * size,
                               cy + math.sin(angle) * size))
    return vertices


def koch_star_points(vertices: List[Vertex], depth: int) -> Iterator[Vertex]:
    """Yield the line_to targets of a closed Koch polyline through vertices."""
    count = len(vertices)
    for i in range(count):
        start = vertices[i]
        end = vertices[(i + 1) % count]
        yield from koch_points(start.x, start.y, end.x, end.y, depth)
