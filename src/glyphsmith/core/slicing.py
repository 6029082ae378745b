"""Split paths along a straight cut line.

Paths are flattened to dense polylines first, so every fragment comes back
as a point-based ``line`` path regardless of the source type. Outline groups
the cut does not touch survive as an outline with their original segments.
"""

from dataclasses import dataclass

import structlog

from glyphsmith.config import GeometryConfig
from glyphsmith.core.geometry import Polyline, distance, flatten_path, segment_intersection_params
from glyphsmith.domain import Path, PathType, Point

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Hit:
    edge: int
    t: float
    point: Point


def _find_hits(polyline: Polyline, cut_start: Point, cut_end: Point, epsilon: float) -> list[_Hit]:
    points = polyline.points
    edge_count = len(points) if polyline.closed else len(points) - 1
    hits: list[_Hit] = []

    for i in range(edge_count):
        a = points[i]
        b = points[(i + 1) % len(points)]
        if a == b:
            continue
        params = segment_intersection_params(a, b, cut_start, cut_end)
        if params is None:
            continue
        t = params[0]
        point = Point(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y))
        # A cut through a shared vertex is reported by both edges
        if hits and distance(hits[-1].point, point) <= epsilon:
            continue
        hits.append(_Hit(i, t, point))

    if polyline.closed and len(hits) > 1 and distance(hits[0].point, hits[-1].point) <= epsilon:
        hits.pop()
    if not polyline.closed:
        # Touching an open end does not split anything
        hits = [
            h for h in hits
            if distance(h.point, points[0]) > epsilon and distance(h.point, points[-1]) > epsilon
        ]
    return hits


def _append(fragment: list[Point], point: Point) -> None:
    if not fragment or fragment[-1] != point:
        fragment.append(point)


def _split(points: tuple[Point, ...], closed: bool, hits: list[_Hit]) -> list[list[Point]]:
    """Walk the polyline once, starting a new fragment at every hit."""
    walk = list(points) + [points[0]] if closed else list(points)
    by_edge: dict[int, list[_Hit]] = {}
    for hit in hits:
        by_edge.setdefault(hit.edge, []).append(hit)

    fragments: list[list[Point]] = []
    current = [walk[0]]
    for i in range(len(walk) - 1):
        for hit in sorted(by_edge.get(i, []), key=lambda h: h.t):
            _append(current, hit.point)
            fragments.append(current)
            current = [hit.point]
        _append(current, walk[i + 1])
    fragments.append(current)

    if closed:
        # First and last pieces meet at the original start point
        head = fragments.pop(0)
        tail = fragments.pop()
        fragments.append(tail + head[1:])

    return [f for f in fragments if len(f) > 1]


def slice_path(
    path: Path,
    cut_start: Point,
    cut_end: Point,
    config: GeometryConfig | None = None,
    units_per_em: int = 1000,
) -> list[Path]:
    """Split a path wherever it crosses the cut segment.

    - Open path with N crossings: N+1 fragments in traversal order, the cut
      point shared by adjacent fragments
    - Closed path with one crossing: one open path from the crossing, around
      the shape, back to the crossing
    - Closed path with several crossings: one fragment per arc between
      crossings, the arc over the original start point kept whole

    Parallel and zero-length edges never count as crossings. Cuts shorter
    than the configured minimum, cuts that miss, and dots return ``[path]``.

    Args:
        path: Path to split
        cut_start: Cut line start
        cut_end: Cut line end
        config: Geometry tolerances (defaults when None)
        units_per_em: UPM used to scale tolerances

    Returns:
        The resulting paths
    """
    config = config or GeometryConfig()
    if path.type == PathType.DOT or path.is_empty():
        return [path]
    if distance(cut_start, cut_end) < config.get_min_cut_length(units_per_em):
        return [path]

    epsilon = config.get_intersection_epsilon(units_per_em)
    polylines = flatten_path(
        path,
        tolerance=config.get_bezier_tolerance(units_per_em),
        density=config.pen_curve_density,
    )

    groups = [group for group in path.segment_groups if group]
    fragments: list[list[Point]] = []
    untouched_groups = []
    for index, polyline in enumerate(polylines):
        hits = _find_hits(polyline, cut_start, cut_end, epsilon) if len(polyline.points) > 1 else []
        if not hits:
            if path.type == PathType.OUTLINE:
                untouched_groups.append(groups[index])
            continue
        fragments.extend(_split(polyline.points, polyline.closed, hits))

    if not fragments:
        return [path]

    logger.debug("Path sliced", path_id=path.id, fragments=len(fragments))

    result = []
    if untouched_groups:
        result.append(
            Path(id=path.id, type=PathType.OUTLINE, segment_groups=tuple(untouched_groups))
        )
    for i, points in enumerate(fragments):
        result.append(
            Path(id=f"{path.id}-{i + 1}", type=PathType.LINE, points=tuple(points), angle=path.angle)
        )
    return result
