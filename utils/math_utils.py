"""
Geometry Helpers.

Responsibility boundaries:
- Pure functions over plane coordinates (world units).
- No knowledge of nodes, registries or game state.
"""

import math


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    dx = x2 - x1
    dy = y2 - y1
    return math.sqrt(dx * dx + dy * dy)


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def point_in_circle(px: float, py: float, cx: float, cy: float, radius: float) -> bool:
    """Inclusive test: a point exactly on the boundary is inside."""
    return distance(px, py, cx, cy) <= radius
