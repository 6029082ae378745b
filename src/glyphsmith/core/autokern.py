"""Automatic kerning from glyph silhouettes.

The engine lays a pair out at its default spacing, samples both ink
silhouettes along horizontal scanlines and proposes the smallest shift that
keeps every scanline at least a threshold apart.

Key components:
- KerningPair: One candidate pair with the glyph data it needs
- ink_span: Horizontal ink extent of a path list at one height
- propose_kerning: Pure batch computation
- run_kerning_batch: Top-level picklable worker entry point
- target_distance_for: Turns a recommended-kerning rule into a target gap
- recommended_pairs: Expands recommended-kerning entries into pair requests
"""

import math
import time
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from glyphsmith.config import AutoKernConfig
from glyphsmith.core.geometry import BoundingBox, dot_radius, flatten_path, paths_bounds
from glyphsmith.core.groups import expand_members
from glyphsmith.domain import Character, FontMetrics, GlyphData, Path, PathType, Point
from glyphsmith.exceptions import UnknownGroupError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class KerningPair:
    """A candidate pair for auto-kerning.

    Attributes:
        left: Left glyph unicode
        right: Right glyph unicode
        left_glyph: Left drawing (None when absent)
        right_glyph: Right drawing (None when absent)
        left_rsb: Right side bearing of the left glyph
        right_lsb: Left side bearing of the right glyph
        target_distance: Desired ink gap; None uses the configured gap
    """

    left: int
    right: int
    left_glyph: GlyphData | None
    right_glyph: GlyphData | None
    left_rsb: float
    right_lsb: float
    target_distance: float | None = None

    @property
    def key(self) -> str:
        return f"{self.left}-{self.right}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC (glyphs travel separately)."""
        return {
            "left": self.left,
            "right": self.right,
            "leftRsb": self.left_rsb,
            "rightLsb": self.right_lsb,
            "targetDistance": self.target_distance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], glyphs: dict[int, GlyphData]) -> "KerningPair":
        left = int(data["left"])
        right = int(data["right"])
        return cls(
            left=left,
            right=right,
            left_glyph=glyphs.get(left),
            right_glyph=glyphs.get(right),
            left_rsb=float(data["leftRsb"]),
            right_lsb=float(data["rightLsb"]),
            target_distance=data.get("targetDistance"),
        )


def _disk_span(center: Point, radius: float, y: float) -> tuple[float, float] | None:
    dy = y - center.y
    if abs(dy) > radius:
        return None
    half = math.sqrt(radius * radius - dy * dy)
    return center.x - half, center.x + half


def _capsule_span(a: Point, b: Point, y: float, half: float) -> tuple[float, float] | None:
    """Extent at height ``y`` of segment a-b grown by ``half`` on every side."""
    xs: list[float] = []
    for end in (a, b):
        span = _disk_span(end, half, y)
        if span is not None:
            xs.extend(span)

    length = math.hypot(b.x - a.x, b.y - a.y)
    if length > 0:
        nx = -(b.y - a.y) / length * half
        ny = (b.x - a.x) / length * half
        corners = [
            Point(a.x + nx, a.y + ny),
            Point(b.x + nx, b.y + ny),
            Point(b.x - nx, b.y - ny),
            Point(a.x - nx, a.y - ny),
        ]
        for i in range(4):
            c1, c2 = corners[i], corners[(i + 1) % 4]
            if (c1.y - y) * (c2.y - y) > 0:
                continue
            if c1.y == c2.y:
                xs.extend((c1.x, c2.x))
            else:
                xs.append(c1.x + (y - c1.y) * (c2.x - c1.x) / (c2.y - c1.y))

    if not xs:
        return None
    return min(xs), max(xs)


def _filled_span(points: tuple[Point, ...], y: float) -> tuple[float, float] | None:
    xs: list[float] = []
    count = len(points)
    for i in range(count):
        a, b = points[i], points[(i + 1) % count]
        if (a.y - y) * (b.y - y) > 0:
            continue
        if a.y == b.y:
            xs.extend((a.x, b.x))
        else:
            xs.append(a.x + (y - a.y) * (b.x - a.x) / (b.y - a.y))
    if not xs:
        return None
    return min(xs), max(xs)


def _silhouette(paths: tuple[Path, ...] | list[Path], stroke_thickness: float) -> list[tuple]:
    """Flatten every path once into disks, filled polygons and stroked polylines."""
    half = stroke_thickness / 2
    shapes: list[tuple] = []
    for path in paths:
        if path.type == PathType.DOT:
            if path.points:
                shapes.append(("disk", path.points[0], dot_radius(path, stroke_thickness)))
        elif path.type == PathType.OUTLINE:
            for polyline in flatten_path(path):
                shapes.append(("filled", polyline.points))
        else:
            for polyline in flatten_path(path):
                if len(polyline.points) == 1:
                    shapes.append(("disk", polyline.points[0], half))
                else:
                    shapes.append(("stroke", polyline.points, polyline.closed, half))
    return shapes


def _silhouette_span(shapes: list[tuple], y: float) -> tuple[float, float] | None:
    low = math.inf
    high = -math.inf
    for shape in shapes:
        spans: list[tuple[float, float] | None]
        if shape[0] == "disk":
            spans = [_disk_span(shape[1], shape[2], y)]
        elif shape[0] == "filled":
            spans = [_filled_span(shape[1], y)]
        else:
            _, points, closed, half = shape
            edges = len(points) if closed else len(points) - 1
            spans = [
                _capsule_span(points[i], points[(i + 1) % len(points)], y, half)
                for i in range(edges)
            ]
        for span in spans:
            if span is not None:
                low = min(low, span[0])
                high = max(high, span[1])

    if low > high:
        return None
    return low, high


def ink_span(
    paths: tuple[Path, ...] | list[Path],
    y: float,
    stroke_thickness: float,
) -> tuple[float, float] | None:
    """Left-most and right-most ink x at height ``y``, over all paths.

    Spans are unioned across every path and contour, so glyphs made of
    several disjoint pieces are sampled as one silhouette. Strokes grow by
    half the stroke thickness, outlines are filled.
    """
    return _silhouette_span(_silhouette(paths, stroke_thickness), y)


def _scanlines(
    metrics: FontMetrics,
    count: int,
    left_box: BoundingBox,
    right_box: BoundingBox,
    check_zones: bool,
) -> tuple[list[float], list[float]]:
    """Band scanlines, plus ascender/descender scanlines at the same spacing."""
    top = min(metrics.top_line_y, metrics.base_line_y)
    base = max(metrics.top_line_y, metrics.base_line_y)
    step = (base - top) / (count - 1) if base > top else 0.0
    band = [top + i * step for i in range(count)] if step > 0 else [top]

    zones: list[float] = []
    if check_zones and step > 0:
        highest = min(left_box.min_y, right_box.min_y)
        lowest = max(left_box.max_y, right_box.max_y)
        y = top - step
        while y >= highest:
            zones.append(y)
            y -= step
        y = base + step
        while y <= lowest:
            zones.append(y)
            y += step
    return band, zones


def _pair_kerning(
    pair: KerningPair,
    metrics: FontMetrics,
    stroke_thickness: float,
    config: AutoKernConfig,
) -> int | None:
    left_paths = pair.left_glyph.paths
    right_paths = pair.right_glyph.paths
    left_box = paths_bounds(left_paths, stroke_thickness)
    right_box = paths_bounds(right_paths, stroke_thickness)
    if left_box is None or right_box is None:
        return None

    # Shift that puts the right ink at the default spacing (k = 0)
    delta = left_box.max_x + pair.left_rsb + pair.right_lsb - right_box.min_x
    threshold = pair.target_distance if pair.target_distance is not None else config.minimum_visual_gap

    left_shapes = _silhouette(left_paths, stroke_thickness)
    right_shapes = _silhouette(right_paths, stroke_thickness)
    band, zones = _scanlines(metrics, config.scanline_count, left_box, right_box, config.check_zones)
    requirements: list[float] = []
    for ys, gap_needed in ((band, threshold), (zones, 0.0)):
        for y in ys:
            left_span = _silhouette_span(left_shapes, y)
            right_span = _silhouette_span(right_shapes, y)
            if left_span is None or right_span is None:
                continue
            gap = (right_span[0] + delta) - left_span[1]
            requirements.append(gap_needed - gap)

    if not requirements:
        overlaps_vertically = left_box.min_y < right_box.max_y and right_box.min_y < left_box.max_y
        if not overlaps_vertically:
            return 0
        requirements.append(0.0 - ((right_box.min_x + delta) - left_box.max_x))

    lowest = -metrics.units_per_em * config.max_negative_ratio
    value = max(lowest, min(config.max_positive_kerning, math.ceil(max(requirements))))
    return int(math.ceil(value))


def propose_kerning(
    pairs: list[KerningPair],
    metrics: FontMetrics,
    stroke_thickness: float,
    config: AutoKernConfig | None = None,
) -> dict[str, int]:
    """Propose kerning for a batch of pairs.

    For each pair the minimal shift is the largest, over all scanlines
    between the top line and the baseline, of ``threshold - gap``. When
    ``check_zones`` is on, scanlines above the top line and below the
    baseline must not collide either. Pairs missing a drawing are skipped.

    Args:
        pairs: Candidate pairs
        metrics: Font metrics
        stroke_thickness: Stroke width in design units
        config: Auto-kern settings

    Returns:
        Pair key to proposed kerning value
    """
    config = config or AutoKernConfig()
    results: dict[str, int] = {}
    for pair in pairs:
        if pair.left_glyph is None or pair.right_glyph is None:
            continue
        if not (pair.left_glyph.is_drawn() and pair.right_glyph.is_drawn()):
            continue
        value = _pair_kerning(pair, metrics, stroke_thickness, config)
        if value is not None:
            results[pair.key] = value
    return results


def build_batch_request(
    batch_id: int,
    pairs: list[KerningPair],
    metrics: FontMetrics,
    stroke_thickness: float,
    config: AutoKernConfig,
) -> dict[str, Any]:
    """Serialize a batch, copying each referenced glyph once."""
    glyphs: dict[str, Any] = {}
    for pair in pairs:
        for unicode, glyph in ((pair.left, pair.left_glyph), (pair.right, pair.right_glyph)):
            if glyph is not None and str(unicode) not in glyphs:
                glyphs[str(unicode)] = glyph.to_dict()
    return {
        "batch_id": batch_id,
        "pairs": [pair.to_dict() for pair in pairs],
        "glyphs": glyphs,
        "metrics": metrics.to_dict(),
        "stroke_thickness": stroke_thickness,
        "config": config.model_dump(),
    }


def run_kerning_batch(request: dict[str, Any]) -> dict[str, Any]:
    """Compute one batch of kerning proposals.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor. Everything arrives and leaves by value.

    Args:
        request: Serialized batch (from build_batch_request)

    Returns:
        Dictionary containing either:
        - Success: {"batch_id": int, "results": dict, "duration_ms": float}
        - Error: {"batch_id": int, "error": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()
    batch_id = request.get("batch_id", -1)

    try:
        glyphs = {int(u): GlyphData.from_dict(g) for u, g in request["glyphs"].items()}
        pairs = [KerningPair.from_dict(p, glyphs) for p in request["pairs"]]
        metrics = FontMetrics.from_dict(request["metrics"])
        config = AutoKernConfig(**request.get("config", {}))

        results = propose_kerning(pairs, metrics, float(request["stroke_thickness"]), config)

        duration_ms = (time.time() - start_time) * 1000
        return {"batch_id": batch_id, "results": results, "duration_ms": duration_ms}

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "batch_id": batch_id,
            "error": str(e),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


def target_distance_for(
    left: Character,
    right: Character,
    recommended: float | str | None,
    metrics: FontMetrics,
) -> float:
    """Turn a recommended-kerning rule into a target ink gap.

    - a number: that gap (0 kerns until the glyphs touch)
    - ``"lsb"``: the right glyph's left side bearing
    - ``"rsb"``: the left glyph's right side bearing
    - anything else, or no rule: the sum of both bearings, with negative
      bearings replaced by the font defaults
    """
    rsb = left.rsb_or(metrics.default_rsb)
    lsb = right.lsb_or(metrics.default_lsb)
    if isinstance(recommended, bool):
        recommended = None
    if isinstance(recommended, (int, float)):
        return float(recommended)
    if recommended == "lsb":
        return lsb
    if recommended == "rsb":
        return rsb
    if isinstance(recommended, str):
        try:
            return float(recommended)
        except ValueError:
            pass
    return (rsb if rsb >= 0 else metrics.default_rsb) + (lsb if lsb >= 0 else metrics.default_lsb)


def recommended_pairs(
    recommended: list[list[Any]] | list[tuple[Any, ...]],
    characters_by_name: Mapping[str, Character],
    groups: Mapping[str, Any],
    metrics: FontMetrics,
) -> list[tuple[int, int, float]]:
    """Expand recommended-kerning entries into concrete pair requests.

    Each entry is ``[left, right]`` or ``[left, right, rule]`` where either
    side may be a glyph name or a group reference. Entries naming an
    unknown group are skipped. Characters without a unicode cannot carry
    kerning and are skipped as well.

    Returns:
        ``(left_unicode, right_unicode, target_distance)`` triples, first
        occurrence wins
    """
    requests: dict[tuple[int, int], float] = {}
    for entry in recommended:
        if len(entry) < 2:
            continue
        rule = entry[2] if len(entry) > 2 else None
        try:
            lefts = expand_members([entry[0]], groups)
            rights = expand_members([entry[1]], groups)
        except UnknownGroupError as e:
            logger.warning("Skipping recommended kerning entry", group=e.group_name, entry=list(entry))
            continue
        for left_name in lefts:
            left = characters_by_name.get(left_name)
            if left is None or left.unicode is None:
                continue
            for right_name in rights:
                right = characters_by_name.get(right_name)
                if right is None or right.unicode is None:
                    continue
                key = (left.unicode, right.unicode)
                if key not in requests:
                    requests[key] = target_distance_for(left, right, rule, metrics)
    return [(left, right, target) for (left, right), target in requests.items()]
