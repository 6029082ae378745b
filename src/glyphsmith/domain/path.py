"""Core geometric types for glyph drawings.

This module defines the drawable primitives shared by the resolver, the fitter,
the auto-kerning engine and the drawing tools:
- Point: A 2D point in design units
- Segment: A cubic bezier control point with absolute handles
- PathType: Enum for the kind of drawable path
- Path: A single drawable unit (stroke, dot, closed shape or outline)
- GlyphData: The drawing stored in a glyph's unicode slot

Coordinates follow the drawing canvas convention: x grows to the right and
y grows downward.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PathType(str, Enum):
    """Kind of drawable path.

    Strokes (pen, line, curve, calligraphy) keep a flat point list and are
    rendered with the stroke thickness. Circles and ellipses are closed point
    polygons. A dot is a centre point with an optional rim point. Outlines are
    filled compound shapes stored as segment groups.
    """

    PEN = "pen"
    LINE = "line"
    CURVE = "curve"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    DOT = "dot"
    CALLIGRAPHY = "calligraphy"
    OUTLINE = "outline"

    @property
    def is_closed_shape(self) -> bool:
        """Whether the point list describes a closed polygon."""
        return self in (PathType.CIRCLE, PathType.ELLIPSE)


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D design space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in design units
        y: Y coordinate in design units (grows downward)
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def translated(self, dx: float, dy: float) -> "Point":
        """Return a copy moved by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class Segment:
    """A cubic bezier control point.

    Handles are absolute coordinates, not deltas from ``point``. A segment
    whose handles coincide with its point describes a corner.

    Attributes:
        point: On-curve anchor
        handle_in: Incoming control point
        handle_out: Outgoing control point
    """

    point: Point
    handle_in: Point
    handle_out: Point

    @classmethod
    def corner(cls, point: Point) -> "Segment":
        """Create a segment with both handles retracted onto the anchor."""
        return cls(point=point, handle_in=point, handle_out=point)

    def translated(self, dx: float, dy: float) -> "Segment":
        """Return a copy with anchor and handles moved by (dx, dy)."""
        return Segment(
            point=self.point.translated(dx, dy),
            handle_in=self.handle_in.translated(dx, dy),
            handle_out=self.handle_out.translated(dx, dy),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "point": self.point.to_dict(),
            "handleIn": self.handle_in.to_dict(),
            "handleOut": self.handle_out.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from dictionary.

        Missing handles default to the anchor point.
        """
        point = Point.from_dict(data["point"])
        handle_in = Point.from_dict(data["handleIn"]) if data.get("handleIn") else point
        handle_out = Point.from_dict(data["handleOut"]) if data.get("handleOut") else point
        return cls(point=point, handle_in=handle_in, handle_out=handle_out)


@dataclass(frozen=True)
class Path:
    """A drawable unit of a glyph.

    Strokes and closed shapes use ``points``. Outlines use ``segment_groups``:
    an ordered list of closed segment loops, which lets a single path carry a
    compound shape with holes.

    Attributes:
        id: Identifier, unique within a glyph
        type: Kind of path
        points: Flat point list (strokes, dots, closed shapes)
        segment_groups: Closed bezier loops (outlines)
        angle: Nib angle in degrees (calligraphy strokes)
        group_id: Component tag assigned by composition
    """

    id: str
    type: PathType
    points: tuple[Point, ...] = ()
    segment_groups: tuple[tuple[Segment, ...], ...] = ()
    angle: float | None = None
    group_id: str | None = None

    def __post_init__(self) -> None:
        # Accept lists from callers while keeping the stored value immutable.
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))
        if not isinstance(self.segment_groups, tuple) or any(
            not isinstance(group, tuple) for group in self.segment_groups
        ):
            object.__setattr__(
                self, "segment_groups", tuple(tuple(group) for group in self.segment_groups)
            )

    def is_empty(self) -> bool:
        """Check if the path has nothing to draw."""
        return len(self.points) == 0 and len(self.segment_groups) == 0

    def translated(self, dx: float, dy: float) -> "Path":
        """Return a copy of this path moved by (dx, dy)."""
        if dx == 0 and dy == 0:
            return self
        return Path(
            id=self.id,
            type=self.type,
            points=tuple(p.translated(dx, dy) for p in self.points),
            segment_groups=tuple(
                tuple(seg.translated(dx, dy) for seg in group)
                for group in self.segment_groups
            ),
            angle=self.angle,
            group_id=self.group_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "points": [p.to_dict() for p in self.points],
        }
        if self.segment_groups:
            data["segmentGroups"] = [
                [seg.to_dict() for seg in group] for group in self.segment_groups
            ]
        if self.angle is not None:
            data["angle"] = self.angle
        if self.group_id is not None:
            data["groupId"] = self.group_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Path":
        """Deserialize from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            type=PathType(data["type"]),
            points=tuple(Point.from_dict(p) for p in data.get("points") or []),
            segment_groups=tuple(
                tuple(Segment.from_dict(seg) for seg in group)
                for group in data.get("segmentGroups") or []
            ),
            angle=data.get("angle"),
            group_id=data.get("groupId"),
        )


@dataclass(frozen=True)
class GlyphData:
    """The drawing owned by one unicode slot.

    Attributes:
        paths: Paths in drawing order
    """

    paths: tuple[Path, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.paths, tuple):
            object.__setattr__(self, "paths", tuple(self.paths))

    def is_drawn(self) -> bool:
        """A glyph is drawn iff at least one of its paths is non-empty."""
        return any(not path.is_empty() for path in self.paths)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"paths": [p.to_dict() for p in self.paths]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphData":
        """Deserialize from dictionary."""
        return cls(paths=tuple(Path.from_dict(p) for p in data.get("paths") or []))


def is_glyph_drawn(glyph: GlyphData | None) -> bool:
    """Check a possibly missing glyph slot for drawable content."""
    return glyph is not None and glyph.is_drawn()
