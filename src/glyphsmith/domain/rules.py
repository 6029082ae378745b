"""Declarative positioning and attachment rules.

Rules name glyphs directly or through group references (``$group`` or
``@group``). Group references are expanded at read time by the resolver.

Rule sections are parsed entry by entry: a malformed entry is logged and
skipped, the rest of the section is kept.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

# What a malformed rule entry raises while being parsed
_RULE_ERRORS = (AttributeError, IndexError, TypeError, ValueError)


class AttachmentPoint(str, Enum):
    """Named anchor on an ink bounding box."""

    TOP_LEFT = "topLeft"
    TOP_CENTER = "topCenter"
    TOP_RIGHT = "topRight"
    MID_LEFT = "midLeft"
    MID_RIGHT = "midRight"
    BOTTOM_LEFT = "bottomLeft"
    BOTTOM_CENTER = "bottomCenter"
    BOTTOM_RIGHT = "bottomRight"


class Movement(str, Enum):
    """Axis constraint for mark placement."""

    BOTH = "both"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class AttachmentRule:
    """Anchor pairing between a base and a mark.

    The mark's ``mark_point`` is placed on the base's ``base_point``, then
    nudged by ``(dx, dy)``.
    """

    base_point: AttachmentPoint = AttachmentPoint.TOP_CENTER
    mark_point: AttachmentPoint = AttachmentPoint.BOTTOM_CENTER
    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def parse(cls, raw: Any) -> "AttachmentRule":
        """Parse ``[basePoint, markPoint, dx?, dy?]`` or a mapping.

        Raises:
            ValueError: If an anchor name or offset is invalid
            IndexError: If the list form has fewer than two items
        """
        if isinstance(raw, dict):
            return cls(
                base_point=AttachmentPoint(raw.get("basePoint", "topCenter")),
                mark_point=AttachmentPoint(raw.get("markPoint", "bottomCenter")),
                dx=float(raw.get("dx", 0.0)),
                dy=float(raw.get("dy", 0.0)),
            )
        items = list(raw)
        return cls(
            base_point=AttachmentPoint(items[0]),
            mark_point=AttachmentPoint(items[1]),
            dx=float(items[2]) if len(items) > 2 else 0.0,
            dy=float(items[3]) if len(items) > 3 else 0.0,
        )


# base key -> mark key -> rule. Keys are glyph names or group references.
MarkAttachmentRules = dict[str, dict[str, AttachmentRule]]


def parse_mark_attachment_rules(raw: dict[str, Any] | None) -> MarkAttachmentRules:
    """Parse the nested ``{base: {mark: [basePoint, markPoint, dx, dy]}}`` mapping.

    Entries that cannot be parsed are skipped with a warning.
    """
    rules: MarkAttachmentRules = {}
    for base_key, marks in (raw or {}).items():
        if not isinstance(marks, dict):
            logger.warning("Skipping malformed attachment rules", base=base_key)
            continue
        parsed: dict[str, AttachmentRule] = {}
        for mark_key, value in marks.items():
            try:
                parsed[mark_key] = AttachmentRule.parse(value)
            except _RULE_ERRORS as e:
                logger.warning(
                    "Skipping malformed attachment rule", base=base_key, mark=mark_key, error=str(e)
                )
        rules[base_key] = parsed
    return rules


@dataclass(frozen=True)
class AttachmentClass:
    """A named class of bases or marks sharing one attachment rule.

    Attributes:
        name: Class name
        members: Glyph names or group references in the class
        exceptions: Names excluded from the class
        applies: Names or groups on the other side this class applies to
            (empty means all)
        rule: Attachment rule used for members of the class
    """

    name: str
    members: tuple[str, ...] = ()
    exceptions: tuple[str, ...] = ()
    applies: tuple[str, ...] = ()
    rule: AttachmentRule | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttachmentClass":
        raw_rule = data.get("rule")
        return cls(
            name=str(data.get("name", "")),
            members=tuple(data.get("members") or ()),
            exceptions=tuple(data.get("exceptions") or ()),
            applies=tuple(data.get("applies") or ()),
            rule=AttachmentRule.parse(raw_rule) if raw_rule else None,
        )


@dataclass(frozen=True)
class PositioningRule:
    """Declares which base and mark combinations attach to each other.

    Only ``base``, ``mark`` and ``movement`` affect layout. ``ligature_map``,
    ``gpos`` and ``gsub`` are feature-export flags from the project file;
    they are kept as loaded and never read by the engine.

    Attributes:
        base: Base names or group references
        mark: Mark names or group references
        ligature_map: Optional explicit name of the composed glyph per pair
        movement: Axis constraint applied to the default offset
        gpos: Emit as a GPOS mark attachment
        gsub: Emit as a GSUB ligature
    """

    base: tuple[str, ...]
    mark: tuple[str, ...]
    ligature_map: dict[str, str] = field(default_factory=dict)
    movement: Movement = Movement.BOTH
    gpos: bool = True
    gsub: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PositioningRule":
        base = data.get("base") or []
        mark = data.get("mark") or []
        return cls(
            base=tuple([base] if isinstance(base, str) else base),
            mark=tuple([mark] if isinstance(mark, str) else mark),
            ligature_map=dict(data.get("ligatureMap") or {}),
            movement=Movement(data.get("movement", Movement.BOTH.value)),
            gpos=bool(data.get("gpos", True)),
            gsub=bool(data.get("gsub", False)),
        )


def parse_positioning_rules(raw: Iterable[Any] | None) -> list[PositioningRule]:
    """Parse a list of positioning rules, skipping malformed entries."""
    rules: list[PositioningRule] = []
    for index, entry in enumerate(raw or ()):
        try:
            rules.append(PositioningRule.from_dict(entry))
        except _RULE_ERRORS as e:
            logger.warning("Skipping malformed positioning rule", index=index, error=str(e))
    return rules


def parse_attachment_classes(raw: Iterable[Any] | None) -> list[AttachmentClass]:
    """Parse a list of attachment classes, skipping malformed entries."""
    classes: list[AttachmentClass] = []
    for index, entry in enumerate(raw or ()):
        try:
            classes.append(AttachmentClass.from_dict(entry))
        except _RULE_ERRORS as e:
            logger.warning("Skipping malformed attachment class", index=index, error=str(e))
    return classes
