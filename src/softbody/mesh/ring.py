# ring.py
"""
Ring mesh generation for 2D soft bodies.

Points are laid out on a circle and connected either as a complete graph
(every unordered pair exactly once) or as a single perimeter cycle.
"""

import math

from softbody.config import SpringParams
from softbody.models import Point, Spring, Vector2


def generate_ring(n: int, radius: float, x: float, y: float) -> list[Point]:
    """
    Place ``n`` points evenly on a circle centred at ``(x, y)``.

    The angle is accumulated step by step, starting at 0, so coordinates are
    the same as a ``for (a = 0; a < 2π; a += 2π/n)`` loop would give. That
    loop can overshoot by one point when rounding leaves the last angle just
    below 2π, so generation stops after exactly ``n`` points.

    Each point records its offset from the centre as ``origin_offset``.
    """
    if n < 2:
        raise ValueError(f"a ring needs at least 2 points, got {n}")
    if not radius > 0:
        raise ValueError(f"ring radius must be positive, got {radius}")

    center = Vector2(x, y)
    step = (2 * math.pi) / n
    points: list[Point] = []

    angle = 0.0
    while angle < 2 * math.pi and len(points) < n:
        px = x + radius * math.cos(angle)
        py = y + radius * math.sin(angle)
        points.append(Point(px, py, origin_offset=Vector2(px, py) - center))
        angle += step

    return points


def complete_springs(
    points: list[Point],
    params: SpringParams | None = None,
    pop_in: bool = True,
) -> list[Spring]:
    """One spring per unordered pair, ordered (0, 1), (0, 2), ... (n-2, n-1)."""
    springs: list[Spring] = []
    added_springs: set[tuple[int, int]] = set()

    for i in range(len(points)):
        for j in range(len(points)):
            if i == j:
                continue
            pair = (min(i, j), max(i, j))
            if pair not in added_springs:
                springs.append(Spring(points[i], points[j], params, pop_in=pop_in))
                added_springs.add(pair)

    return springs


def perimeter_springs(
    points: list[Point],
    params: SpringParams | None = None,
    pop_in: bool = True,
) -> list[Spring]:
    """Springs along the cycle point[i] -> point[i+1], closing back to point[0]."""
    n = len(points)
    if n == 2:
        # A two-point cycle would connect the same pair twice.
        return [Spring(points[0], points[1], params, pop_in=pop_in)]
    return [Spring(points[i], points[(i + 1) % n], params, pop_in=pop_in) for i in range(n)]
