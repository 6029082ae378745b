"""Geometric operations on glyph paths.

This module provides core mathematical utilities for:
- Line segment intersection (parametric form)
- Perpendicular distance to a line
- Flattening paths to polylines
- Ink bounding boxes (exact bezier extrema via fontTools)
- Affine transforms of whole path lists
- Named attachment points on a bounding box

All functions are pure, stateless, and safe to use in worker processes.
"""

import math
from dataclasses import dataclass

from fontTools.misc.bezierTools import calcCubicBounds, calcQuadraticBounds
from fontTools.misc.transform import Transform

from glyphsmith.core._bezier import flatten_cubic as _flatten_cubic
from glyphsmith.core._bezier import sample_quadratic as _sample_quadratic
from glyphsmith.core._bezier import smooth_stroke_spans as _smooth_stroke_spans
from glyphsmith.domain import AttachmentPoint, Path, PathType, Point, Segment

_STROKE_TYPES = (PathType.PEN, PathType.CALLIGRAPHY)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in design units (y grows downward)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def expanded(self, amount: float) -> "BoundingBox":
        """Grow the box outward by ``amount`` on every side."""
        return BoundingBox(
            self.min_x - amount, self.min_y - amount, self.max_x + amount, self.max_y + amount
        )

    def translated(self, dx: float, dy: float) -> "BoundingBox":
        return BoundingBox(self.min_x + dx, self.min_y + dy, self.max_x + dx, self.max_y + dy)


@dataclass(frozen=True)
class Polyline:
    """A flattened path. Closed polylines have an implicit last-to-first edge."""

    points: tuple[Point, ...]
    closed: bool = False


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """Distance from a point to the infinite line through two points.

    Falls back to the point distance when the line has zero length.
    """
    dx = line_end.x - line_start.x
    dy = line_end.y - line_start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return distance(point, line_start)
    return abs(dy * point.x - dx * point.y + line_end.x * line_start.y - line_end.y * line_start.x) / length


def segment_intersection_params(
    p1: Point, p2: Point, p3: Point, p4: Point
) -> tuple[float, float] | None:
    """Parametric intersection of segment p1-p2 with segment p3-p4.

    Returns:
        ``(t, s)`` with ``t`` along p1-p2 and ``s`` along p3-p4, both in
        [0, 1], or None for parallel, zero-length or non-touching segments
    """
    x1, y1 = p1.x, p1.y
    x2, y2 = p2.x, p2.y
    x3, y3 = p3.x, p3.y
    x4, y4 = p4.x, p4.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)

    # Parallel, coincident or degenerate
    if abs(denom) < 1e-10:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    s = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0 <= t <= 1 and 0 <= s <= 1:
        return t, s
    return None


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Find intersection point of two line segments.

    Args:
        p1: First endpoint of segment 1
        p2: Second endpoint of segment 1
        p3: First endpoint of segment 2
        p4: Second endpoint of segment 2

    Returns:
        Point at intersection if segments intersect, None otherwise

    Examples:
        >>> line_intersection(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
        Point(x=1.0, y=1.0)
    """
    params = segment_intersection_params(p1, p2, p3, p4)
    if params is None:
        return None
    t = params[0]
    return Point(p1.x + t * (p2.x - p1.x), p1.y + t * (p2.y - p1.y))


def dot_radius(path: Path, stroke_thickness: float) -> float:
    """Radius of a dot path: distance to its rim point, else half the stroke."""
    if len(path.points) > 1:
        return distance(path.points[0], path.points[1])
    return stroke_thickness / 2


def _segment_loop_cubics(group: tuple[Segment, ...]) -> list[tuple[Point, Point, Point, Point]]:
    cubics = []
    for i, seg in enumerate(group):
        nxt = group[(i + 1) % len(group)]
        cubics.append((seg.point, seg.handle_out, nxt.handle_in, nxt.point))
    return cubics


def flatten_path(path: Path, tolerance: float = 0.5, density: int = 8) -> list[Polyline]:
    """Flatten a path into polylines.

    Pen and calligraphy strokes follow their quadratic midpoint smoothing, a
    three-point ``curve`` is a single quadratic, outline segment groups become
    one closed polyline each, circles and ellipses are closed polygons. A dot
    flattens to its centre point.

    Args:
        path: Path to flatten
        tolerance: Maximum deviation for cubic outline flattening
        density: Samples per quadratic stroke span

    Returns:
        List of polylines (empty for empty paths)
    """
    if path.type == PathType.OUTLINE:
        polylines = []
        for group in path.segment_groups:
            if not group:
                continue
            points: list[Point] = [group[0].point]
            for p0, p1, p2, p3 in _segment_loop_cubics(group):
                if p1 == p0 and p2 == p3:
                    points.append(p3)
                else:
                    points.extend(_flatten_cubic([p0, p1, p2, p3], tolerance)[1:])
            # The loop returns to its first point; the closing edge is implicit
            if len(points) > 1 and points[-1] == points[0]:
                points.pop()
            polylines.append(Polyline(tuple(points), closed=True))
        return polylines

    points = list(path.points)
    if not points:
        return []
    if path.type == PathType.DOT:
        return [Polyline((points[0],))]
    if path.type in _STROKE_TYPES and len(points) > 2:
        flat = [points[0]]
        for p0, p1, p2 in _smooth_stroke_spans(points):
            flat.extend(_sample_quadratic(p0, p1, p2, density)[1:])
        return [Polyline(tuple(flat))]
    if path.type == PathType.CURVE and len(points) == 3:
        return [Polyline(tuple(_sample_quadratic(points[0], points[1], points[2], density)))]
    return [Polyline(tuple(points), closed=path.type.is_closed_shape)]


def path_bounds(path: Path, stroke_thickness: float = 0.0) -> BoundingBox | None:
    """Ink bounding box of a single path.

    Outlines are filled, so their box is the exact bezier extent. Strokes
    and closed point shapes grow by half the stroke thickness. Dots use
    their radius.

    Returns:
        The box, or None for an empty path
    """
    if path.type == PathType.OUTLINE:
        box: BoundingBox | None = None
        for group in path.segment_groups:
            for cubic in _segment_loop_cubics(group):
                xmin, ymin, xmax, ymax = calcCubicBounds(*(p.to_tuple() for p in cubic))
                piece = BoundingBox(xmin, ymin, xmax, ymax)
                box = piece if box is None else box.union(piece)
        return box

    points = path.points
    if not points:
        return None

    if path.type == PathType.DOT:
        center = points[0]
        radius = dot_radius(path, stroke_thickness)
        return BoundingBox(center.x - radius, center.y - radius, center.x + radius, center.y + radius)

    if path.type in _STROKE_TYPES and len(points) > 2:
        quadratics = _smooth_stroke_spans(points)
    elif path.type == PathType.CURVE and len(points) == 3:
        quadratics = [(points[0], points[1], points[2])]
    else:
        quadratics = []

    if quadratics:
        box = None
        for quad in quadratics:
            xmin, ymin, xmax, ymax = calcQuadraticBounds(*(p.to_tuple() for p in quad))
            piece = BoundingBox(xmin, ymin, xmax, ymax)
            box = piece if box is None else box.union(piece)
    else:
        box = BoundingBox(
            min(p.x for p in points),
            min(p.y for p in points),
            max(p.x for p in points),
            max(p.y for p in points),
        )
    return box.expanded(stroke_thickness / 2) if box is not None else None


def paths_bounds(paths: list[Path] | tuple[Path, ...], stroke_thickness: float = 0.0) -> BoundingBox | None:
    """Union ink bounding box of a list of paths, or None when nothing has ink."""
    box: BoundingBox | None = None
    for path in paths:
        piece = path_bounds(path, stroke_thickness)
        if piece is not None:
            box = piece if box is None else box.union(piece)
    return box


def _transform_point(transform: Transform, point: Point) -> Point:
    x, y = transform.transformPoint(point.to_tuple())
    return Point(x, y)


def transform_paths(paths: list[Path] | tuple[Path, ...], transform: Transform) -> list[Path]:
    """Apply an affine transform to every point and handle of every path."""
    result = []
    for path in paths:
        result.append(
            Path(
                id=path.id,
                type=path.type,
                points=tuple(_transform_point(transform, p) for p in path.points),
                segment_groups=tuple(
                    tuple(
                        Segment(
                            _transform_point(transform, seg.point),
                            _transform_point(transform, seg.handle_in),
                            _transform_point(transform, seg.handle_out),
                        )
                        for seg in group
                    )
                    for group in path.segment_groups
                ),
                angle=path.angle,
                group_id=path.group_id,
            )
        )
    return result


def translate_paths(paths: list[Path] | tuple[Path, ...], dx: float, dy: float) -> list[Path]:
    """Move every path by (dx, dy)."""
    return [path.translated(dx, dy) for path in paths]


def scale_about(center: Point, scale: float, dx: float = 0.0, dy: float = 0.0) -> Transform:
    """Uniform scale around ``center`` followed by a (dx, dy) translation."""
    return (
        Transform()
        .translate(dx, dy)
        .translate(center.x, center.y)
        .scale(scale)
        .translate(-center.x, -center.y)
    )


def attachment_point(box: BoundingBox, name: AttachmentPoint) -> Point:
    """Coordinates of a named anchor on a bounding box (y grows downward)."""
    mid_x = box.min_x + box.width / 2
    mid_y = box.min_y + box.height / 2
    anchors = {
        AttachmentPoint.TOP_LEFT: Point(box.min_x, box.min_y),
        AttachmentPoint.TOP_CENTER: Point(mid_x, box.min_y),
        AttachmentPoint.TOP_RIGHT: Point(box.max_x, box.min_y),
        AttachmentPoint.MID_LEFT: Point(box.min_x, mid_y),
        AttachmentPoint.MID_RIGHT: Point(box.max_x, mid_y),
        AttachmentPoint.BOTTOM_LEFT: Point(box.min_x, box.max_y),
        AttachmentPoint.BOTTOM_CENTER: Point(mid_x, box.max_y),
        AttachmentPoint.BOTTOM_RIGHT: Point(box.max_x, box.max_y),
    }
    return anchors[name]
