"""Resolve a character definition into concrete paths.

Resolution is a pure function of the character and a RenderContext. It
reports availability, whether the placement was confirmed by hand, and
whether the glyph is constructed, all from one pass.

Components are dereferenced one level only: a component must have drawn
glyph data of its own. A component that is itself a link, composite,
position or kern without a drawing is unavailable, which also makes cyclic
definitions impossible to follow.
"""

from dataclasses import dataclass

import structlog

from glyphsmith.core.context import RenderContext
from glyphsmith.core.geometry import (
    BoundingBox,
    attachment_point,
    paths_bounds,
    scale_about,
    transform_paths,
    translate_paths,
)
from glyphsmith.domain import (
    AttachmentClass,
    AttachmentRule,
    AttachmentPoint,
    Character,
    ComponentMode,
    ComponentTransform,
    Composite,
    Kern,
    Link,
    Movement,
    Path,
    Point,
    Position,
)
from glyphsmith.exceptions import UnknownGroupError
from glyphsmith.store import pair_key

logger = structlog.get_logger(__name__)

NOT_DRAWN = "Not drawn"


@dataclass(frozen=True)
class Resolution:
    """Result of resolving one character.

    Attributes:
        paths: Resolved paths (empty when unavailable)
        is_available: All required drawings exist
        is_manually_set: Placement comes from a drawing or an accepted override
        is_constructed: Character carries construction metadata
        reason: Why the character is unavailable, for display
    """

    paths: tuple[Path, ...]
    is_available: bool
    is_manually_set: bool
    is_constructed: bool
    reason: str | None = None


def _unavailable(constructed: bool, reason: str) -> Resolution:
    return Resolution((), False, False, constructed, reason)


def _missing_reason(missing: list[str]) -> str:
    return f"Missing components: {', '.join(missing)}"


def _lookup(names: tuple[str, ...], context: RenderContext) -> tuple[list[tuple[Character, tuple[Path, ...]]], list[str]]:
    """Find the drawn components, collecting names that are absent or undrawn."""
    found = []
    missing = []
    for name in names:
        component = context.characters_by_name.get(name)
        glyph = context.glyph_for(component) if component is not None else None
        if glyph is None or not glyph.is_drawn():
            missing.append(name)
        else:
            found.append((component, glyph.paths))
    return found, missing


def _apply_transform(
    paths: tuple[Path, ...] | list[Path],
    transform: ComponentTransform,
    stroke_thickness: float,
) -> list[Path]:
    if transform.is_identity():
        return list(paths)
    box = paths_bounds(paths, stroke_thickness)
    center = box.center if box is not None else Point(0.0, 0.0)
    return transform_paths(paths, scale_about(center, transform.scale, transform.x, transform.y))


def _tag(paths: list[Path], group_id: str) -> list[Path]:
    return [
        Path(p.id, p.type, p.points, p.segment_groups, p.angle, group_id) for p in paths
    ]


def _expand(items, context: RenderContext) -> list[str] | None:
    """Expand group references, or None when a group is unknown."""
    try:
        return context.expand_groups(items, context.groups)
    except UnknownGroupError as e:
        logger.warning("Skipping rule with unknown group", group=e.group_name, items=list(items))
        return None


def _class_rule(
    classes: tuple[AttachmentClass, ...],
    member: str,
    other: str,
    context: RenderContext,
) -> AttachmentRule | None:
    for cls in classes:
        if cls.rule is None:
            continue
        members = _expand(cls.members, context)
        if members is None or member not in members:
            continue
        if cls.applies:
            applies = _expand(cls.applies, context)
            if applies is None or other not in applies:
                continue
        if cls.exceptions:
            exceptions = _expand(cls.exceptions, context)
            if exceptions is None or other in exceptions:
                continue
        return cls.rule
    return None


def find_attachment_rule(base: str, mark: str, context: RenderContext) -> AttachmentRule | None:
    """Look up the attachment rule for a base and mark.

    Order: exact names, then group keys in the mark-attachment rules, then
    base attachment classes, then mark attachment classes.
    """
    rules = context.mark_attachment_rules
    exact = rules.get(base, {}).get(mark)
    if exact is not None:
        return exact

    for base_key, by_mark in rules.items():
        if not base_key.startswith(("$", "@")):
            continue
        bases = _expand([base_key], context)
        if bases is None or base not in bases:
            continue
        if mark in by_mark:
            return by_mark[mark]
        for mark_key, rule in by_mark.items():
            if not mark_key.startswith(("$", "@")):
                continue
            marks = _expand([mark_key], context)
            if marks is not None and mark in marks:
                return rule

    return _class_rule(context.base_attachment_classes, base, mark, context) or _class_rule(
        context.mark_attachment_classes, mark, base, context
    )


def _movement(base: str, mark: str, context: RenderContext) -> Movement:
    for rule in context.positioning_rules:
        bases = _expand(rule.base, context)
        if bases is None or base not in bases:
            continue
        marks = _expand(rule.mark, context)
        if marks is not None and mark in marks:
            return rule.movement
    return Movement.BOTH


def default_mark_offset(
    base: str,
    mark: str,
    base_box: BoundingBox,
    mark_box: BoundingBox,
    context: RenderContext,
) -> Point:
    """Offset that places a mark on its base by rule, else centred above it."""
    rule = find_attachment_rule(base, mark, context)
    if rule is None:
        rule = AttachmentRule(
            AttachmentPoint.TOP_CENTER,
            AttachmentPoint.BOTTOM_CENTER,
            0.0,
            -context.positioning.default_mark_clearance,
        )
    anchor = attachment_point(base_box, rule.base_point).translated(rule.dx, rule.dy)
    mark_anchor = attachment_point(mark_box, rule.mark_point)
    dx, dy = anchor.x - mark_anchor.x, anchor.y - mark_anchor.y

    movement = _movement(base, mark, context)
    if movement == Movement.HORIZONTAL:
        dy = 0.0
    elif movement == Movement.VERTICAL:
        dx = 0.0
    return Point(dx, dy)


def _resolve_link(character: Character, link: Link, context: RenderContext) -> Resolution:
    found, missing = _lookup(link.components, context)
    if missing:
        return _unavailable(True, _missing_reason(missing))
    _, paths = found[0]
    return Resolution(
        tuple(_apply_transform(paths, link.transform, context.stroke_thickness)), True, False, True
    )


def _resolve_composite(character: Character, composite: Composite, context: RenderContext) -> Resolution:
    found, missing = _lookup(composite.components, context)
    if missing:
        return _unavailable(True, _missing_reason(missing))

    accumulated: list[Path] = []
    for index, (component, paths) in enumerate(found):
        transform = composite.transform_for(index)
        placed = _apply_transform(paths, transform, context.stroke_thickness)

        if accumulated and transform.mode != ComponentMode.ABSOLUTE:
            previous_box = paths_bounds(accumulated, context.stroke_thickness)
            box = paths_bounds(placed, context.stroke_thickness)
            if previous_box is not None and box is not None:
                if transform.mode == ComponentMode.TOUCHING:
                    placed = translate_paths(placed, previous_box.max_x - box.min_x, 0.0)
                else:
                    offset = default_mark_offset(
                        found[index - 1][0].name, component.name, previous_box, box, context
                    )
                    placed = translate_paths(placed, offset.x, offset.y)

        accumulated.extend(_tag(placed, f"component-{index}"))

    return Resolution(tuple(accumulated), True, False, True)


def _resolve_position(character: Character, position: Position, context: RenderContext) -> Resolution:
    found, missing = _lookup(position.components, context)
    if missing:
        return _unavailable(True, _missing_reason(missing))
    (base, base_paths), (mark, mark_paths) = found

    manual = None
    if base.unicode is not None and mark.unicode is not None:
        manual = context.mark_positioning.get(pair_key(base.unicode, mark.unicode))

    if manual is not None:
        offset = manual
    else:
        base_box = paths_bounds(base_paths, context.stroke_thickness)
        mark_box = paths_bounds(mark_paths, context.stroke_thickness)
        if base_box is None or mark_box is None:
            offset = Point(0.0, 0.0)
        else:
            offset = default_mark_offset(base.name, mark.name, base_box, mark_box, context)

    paths = list(base_paths) + translate_paths(mark_paths, offset.x, offset.y)
    return Resolution(tuple(paths), True, manual is not None, True)


def kern_offset(
    left: Character,
    right: Character,
    left_box: BoundingBox,
    right_box: BoundingBox,
    kerning: float,
    context: RenderContext,
) -> float:
    """Horizontal shift applied to the right glyph of a kerned pair.

    The left glyph's origin is its ink left edge and its advance is the ink
    width plus its right side bearing. The right glyph's origin sits its
    left side bearing before its own ink, and lands at the left origin plus
    the advance plus the kerning value.
    """
    metrics = context.metrics
    left_advance = left_box.width + left.rsb_or(metrics.default_rsb)
    right_origin = right_box.min_x - right.lsb_or(metrics.default_lsb)
    return left_box.min_x + left_advance + kerning - right_origin


def _resolve_kern(character: Character, kern: Kern, context: RenderContext) -> Resolution:
    found, missing = _lookup(kern.components, context)
    if missing:
        return _unavailable(True, _missing_reason(missing))
    (left, left_paths), (right, right_paths) = found

    key = None
    if left.unicode is not None and right.unicode is not None:
        key = pair_key(left.unicode, right.unicode)
    is_manual = key is not None and key in context.kerning
    value = float(context.kerning[key]) if is_manual else 0.0

    left_box = paths_bounds(left_paths, context.stroke_thickness)
    right_box = paths_bounds(right_paths, context.stroke_thickness)
    if left_box is None or right_box is None:
        dx = value
    else:
        dx = kern_offset(left, right, left_box, right_box, value, context)

    paths = list(left_paths) + translate_paths(right_paths, dx, 0.0)
    return Resolution(tuple(paths), True, is_manual, True)


def resolve(character: Character, context: RenderContext) -> Resolution:
    """Resolve a character to paths plus availability flags.

    A drawn glyph in the character's own slot always wins over construction
    metadata. Incomplete data never raises: it produces an unavailable
    result with a reason.

    Args:
        character: Character to resolve
        context: Read-only render context

    Returns:
        Resolution for the character
    """
    constructed = character.construction is not None
    direct = context.glyph_for(character)
    if direct is not None and direct.is_drawn():
        return Resolution(direct.paths, True, True, constructed)

    construction = character.construction
    if construction is None:
        if character.is_invisible:
            return Resolution((), True, False, False)
        return _unavailable(False, NOT_DRAWN)
    if isinstance(construction, Link):
        return _resolve_link(character, construction, context)
    if isinstance(construction, Composite):
        return _resolve_composite(character, construction, context)
    if isinstance(construction, Position):
        return _resolve_position(character, construction, context)
    return _resolve_kern(character, construction, context)


def resolve_paths(character: Character, context: RenderContext) -> list[Path]:
    """Resolved paths only; empty when the character is unavailable."""
    return list(resolve(character, context).paths)


class ResolutionCache:
    """Memoizes resolutions for contexts stamped with store versions.

    Entries are keyed by character name and stroke thickness. Everything
    else a layout depends on is fingerprinted: the store version stamps,
    metrics, positioning settings, character definitions, groups and the
    rule sections. The cache empties itself as soon as it sees a context
    whose fingerprint differs. Contexts without stamps bypass it.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, float], Resolution] = {}
        self._context: RenderContext | None = None
        self._inputs: tuple | None = None
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._context = None
        self._inputs = None

    def _check(self, context: RenderContext) -> None:
        if context is self._context:
            return
        inputs = _layout_inputs(context)
        if inputs != self._inputs:
            self._entries.clear()
            self._inputs = inputs
        self._context = context

    def resolve(self, character: Character, context: RenderContext) -> Resolution:
        if not context.versions:
            return resolve(character, context)

        self._check(context)

        key = (character.name, context.stroke_thickness)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        result = resolve(character, context)
        self._entries[key] = result
        return result


def _layout_inputs(context: RenderContext) -> tuple:
    """Everything besides the name and stroke that can change a resolution."""
    return (
        context.versions,
        context.metrics,
        context.positioning,
        dict(context.characters_by_name),
        dict(context.groups),
        context.positioning_rules,
        {base: dict(marks) for base, marks in context.mark_attachment_rules.items()},
        context.mark_attachment_classes,
        context.base_attachment_classes,
        context.expand_groups,
    )
