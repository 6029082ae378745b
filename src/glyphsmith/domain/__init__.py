"""Domain models for glyphsmith.

This module contains the records the engine operates on: drawable paths,
character definitions, font metrics and positioning rules. All models are
designed to be:

- Immutable (frozen dataclasses)
- Serializable for inter-process communication (the auto-kern worker)
- Independent of any rendering or persistence layer

Key classes:
- Point, Segment: 2D geometry with absolute bezier handles
- Path, GlyphData: Drawable units and the drawing stored per unicode slot
- Character: Identity plus a Link/Composite/Position/Kern construction
- FontMetrics: Shared reference frame for layout
- PositioningRule, AttachmentRule, AttachmentClass: Mark attachment data
"""

from glyphsmith.domain.character import (
    Character,
    ComponentMode,
    ComponentTransform,
    Composite,
    Construction,
    GlyphClass,
    Kern,
    Link,
    Position,
)
from glyphsmith.domain.metrics import FontMetrics
from glyphsmith.domain.path import (
    GlyphData,
    Path,
    PathType,
    Point,
    Segment,
    is_glyph_drawn,
)
from glyphsmith.domain.rules import (
    AttachmentClass,
    AttachmentPoint,
    AttachmentRule,
    MarkAttachmentRules,
    Movement,
    PositioningRule,
    parse_attachment_classes,
    parse_mark_attachment_rules,
    parse_positioning_rules,
)

__all__: list[str] = [
    # Enums
    "PathType",
    "GlyphClass",
    "ComponentMode",
    "AttachmentPoint",
    "Movement",
    # Geometry
    "Point",
    "Segment",
    "Path",
    "GlyphData",
    "is_glyph_drawn",
    # Characters
    "Character",
    "ComponentTransform",
    "Construction",
    "Link",
    "Composite",
    "Position",
    "Kern",
    # Metrics and rules
    "FontMetrics",
    "AttachmentClass",
    "AttachmentRule",
    "MarkAttachmentRules",
    "PositioningRule",
    "parse_attachment_classes",
    "parse_mark_attachment_rules",
    "parse_positioning_rules",
]
