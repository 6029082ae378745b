"""Internal Bezier curve flattening algorithms.

This is an internal module containing helper functions for flatten_path.
Not intended for public use.
"""

import math

from glyphsmith.domain import Point

# Subdivision stops here even if the curve is not yet flat.
_MAX_DEPTH = 16


def _midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def sample_quadratic(p0: Point, p1: Point, p2: Point, density: int) -> list[Point]:
    """Sample a quadratic Bezier curve at evenly spaced parameters.

    Args:
        p0: Start point
        p1: Control point
        p2: End point
        density: Number of line segments to produce

    Returns:
        ``density + 1`` points from p0 to p2 inclusive
    """
    points = [p0]
    for j in range(1, density + 1):
        t = j / density
        u = 1 - t
        points.append(
            Point(
                u * u * p0.x + 2 * u * t * p1.x + t * t * p2.x,
                u * u * p0.y + 2 * u * t * p1.y + t * t * p2.y,
            )
        )
    return points


def smooth_stroke_spans(points: list[Point] | tuple[Point, ...]) -> list[tuple[Point, Point, Point]]:
    """Split a freehand stroke into the quadratic spans it is rendered with.

    Interior samples act as control points and the midpoints between
    consecutive samples as on-curve points. The last span ends exactly on the
    final sample.

    Args:
        points: Raw stroke samples (at least 3)

    Returns:
        List of (start, control, end) triples
    """
    spans = []
    start = points[0]
    for i in range(1, len(points) - 2):
        end = _midpoint(points[i], points[i + 1])
        spans.append((start, points[i], end))
        start = end
    spans.append((start, points[-2], points[-1]))
    return spans


def flatten_quadratic(points: list[Point], tolerance: float, _depth: int = 0) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    Args:
        points: List of 3 control points [p0, p1, p2]
        tolerance: Maximum distance from true curve

    Returns:
        List of points approximating the curve
    """
    p0, p1, p2 = points

    # Curve point at t=0.5 against the chord midpoint
    curve_mid = Point(0.25 * p0.x + 0.5 * p1.x + 0.25 * p2.x, 0.25 * p0.y + 0.5 * p1.y + 0.25 * p2.y)
    chord_mid = _midpoint(p0, p2)

    if _depth >= _MAX_DEPTH or math.hypot(curve_mid.x - chord_mid.x, curve_mid.y - chord_mid.y) <= tolerance:
        return [p0, p2]

    left = flatten_quadratic([p0, _midpoint(p0, p1), curve_mid], tolerance, _depth + 1)
    right = flatten_quadratic([curve_mid, _midpoint(p1, p2), p2], tolerance, _depth + 1)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right


def flatten_cubic(points: list[Point], tolerance: float, _depth: int = 0) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve

    Returns:
        List of points approximating the curve
    """
    p0, p1, p2, p3 = points

    # Flat when both handles lie within tolerance of the chord
    chord_x, chord_y = p3.x - p0.x, p3.y - p0.y
    chord_len = math.hypot(chord_x, chord_y)
    if chord_len == 0:
        deviation = max(math.hypot(p1.x - p0.x, p1.y - p0.y), math.hypot(p2.x - p0.x, p2.y - p0.y))
    else:
        deviation = max(
            abs(chord_x * (p0.y - p1.y) - chord_y * (p0.x - p1.x)),
            abs(chord_x * (p0.y - p2.y) - chord_y * (p0.x - p2.x)),
        ) / chord_len

    if _depth >= _MAX_DEPTH or deviation <= tolerance:
        return [p0, p3]

    # First level
    q1 = _midpoint(p0, p1)
    q2 = _midpoint(p1, p2)
    q3 = _midpoint(p2, p3)

    # Second level
    r1 = _midpoint(q1, q2)
    r2 = _midpoint(q2, q3)

    # Third level (midpoint)
    mid = _midpoint(r1, r2)

    left = flatten_cubic([p0, q1, r1, mid], tolerance, _depth + 1)
    right = flatten_cubic([mid, r2, q3, p3], tolerance, _depth + 1)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right
