"""Fit resolved paths into a square preview frame.

Every renderer (preview tiles, the drawing canvas, export rasterizers) uses
the same transform, so a lone dot, a tall composite and a wide kerned pair
all keep a consistent visual weight.
"""

from dataclasses import dataclass

from glyphsmith.config import FitConfig
from glyphsmith.core.geometry import BoundingBox, paths_bounds
from glyphsmith.domain import Character, FontMetrics, Path, Point
from glyphsmith.exceptions import DegenerateGeometryError


@dataclass(frozen=True)
class FitTransform:
    """Uniform scale followed by a translation.

    ``is_empty`` marks the degenerate case: nothing to draw, the transform
    merely centres the origin.
    """

    scale: float
    tx: float
    ty: float
    is_empty: bool = False

    def apply(self, point: Point) -> Point:
        """Map a design-space point to canvas coordinates."""
        return Point(point.x * self.scale + self.tx, point.y * self.scale + self.ty)


def _framing_box(
    ink: BoundingBox,
    character: Character | None,
    metrics: FontMetrics | None,
    config: FitConfig,
) -> BoundingBox:
    box = ink
    if metrics is not None and config.include_metric_band:
        top = min(metrics.top_line_y, metrics.base_line_y)
        bottom = max(metrics.top_line_y, metrics.base_line_y)
        box = BoundingBox(box.min_x, min(box.min_y, top), box.max_x, max(box.max_y, bottom))
    if character is not None:
        lsb = character.lsb_or(metrics.default_lsb if metrics else 0.0)
        rsb = character.rsb_or(metrics.default_rsb if metrics else 0.0)
        box = BoundingBox(box.min_x - max(lsb, 0.0), box.min_y, box.max_x + max(rsb, 0.0), box.max_y)
    return box


def fit(
    paths: list[Path] | tuple[Path, ...],
    canvas_size: float,
    stroke_thickness: float,
    character: Character | None = None,
    metrics: FontMetrics | None = None,
    config: FitConfig | None = None,
) -> FitTransform:
    """Compute the scale and translation that frame ``paths`` on the canvas.

    The ink box includes half the stroke thickness so strokes are never
    clipped. With metrics the box also spans the top line to baseline band,
    and with a character it also spans the side bearings. The scale is the
    largest that fits the box inside the margins, capped at ``max_scale``,
    and the box is centred.

    Args:
        paths: Resolved paths
        canvas_size: Side length of the square canvas
        stroke_thickness: Stroke width in design units
        character: Character being framed (adds side bearings)
        metrics: Font metrics (adds the metric band)
        config: Fit settings

    Returns:
        The transform. Empty input or a zero-size box gives scale 1 with
        the box (or origin) centred and ``is_empty`` set.

    Raises:
        DegenerateGeometryError: If the canvas size is not positive
    """
    if canvas_size <= 0:
        raise DegenerateGeometryError(f"Canvas size must be positive, got {canvas_size}")
    config = config or FitConfig()
    center = canvas_size / 2

    ink = paths_bounds(paths, stroke_thickness)
    if ink is None or ink.width <= 0 or ink.height <= 0:
        if ink is None:
            return FitTransform(1.0, center, center, is_empty=True)
        mid = ink.center
        return FitTransform(1.0, center - mid.x, center - mid.y, is_empty=True)

    box = _framing_box(ink, character, metrics, config)
    available = max(canvas_size - 2 * config.canvas_margin, 1.0)
    scale = min(available / box.width, available / box.height, config.max_scale)

    mid = box.center
    return FitTransform(scale, center - mid.x * scale, center - mid.y * scale)
