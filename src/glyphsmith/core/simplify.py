"""Ramer-Douglas-Peucker path simplification."""

from glyphsmith.core.geometry import perpendicular_distance
from glyphsmith.domain import Point


def simplify_path(points: list[Point] | tuple[Point, ...], epsilon: float) -> list[Point]:
    """Reduce a dense point sequence to the points that carry its shape.

    Works on an explicit stack of index ranges so very long freehand strokes
    never hit the recursion limit. The result is a subsequence of the input
    that always keeps the first and last point; every discarded point lies
    within ``epsilon`` of the line through its enclosing retained pair.

    Args:
        points: Input points in drawing order
        epsilon: Maximum allowed deviation (negative values act as 0)

    Returns:
        A new list of retained points
    """
    count = len(points)
    if count < 3:
        return list(points)

    epsilon = max(epsilon, 0.0)
    keep = [False] * count
    keep[0] = keep[-1] = True

    stack = [(0, count - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        max_distance = -1.0
        index = start
        for i in range(start + 1, end):
            d = perpendicular_distance(points[i], points[start], points[end])
            if d > max_distance:
                max_distance = d
                index = i

        if max_distance > epsilon:
            keep[index] = True
            stack.append((index, end))
            stack.append((start, index))

    return [p for p, kept in zip(points, keep) if kept]
