"""Read-only bundle passed into every resolution call."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from glyphsmith.config import PositioningConfig
from glyphsmith.core.groups import expand_members
from glyphsmith.domain import (
    AttachmentClass,
    Character,
    FontMetrics,
    GlyphData,
    MarkAttachmentRules,
    Point,
    PositioningRule,
)
from glyphsmith.store import GlyphDataStore, KerningStore, MarkPositioningStore

GroupExpander = Callable[[Iterable[str], Mapping[str, Iterable[str]]], list[str]]


@dataclass(frozen=True)
class RenderContext:
    """Everything the resolver may read. Never mutated by the resolver.

    Attributes:
        glyph_data: Drawings keyed by unicode
        characters_by_name: Character definitions keyed by name
        mark_positioning: Manual mark offsets keyed by pair key
        kerning: Accepted kerning keyed by pair key
        metrics: Font metrics
        stroke_thickness: Stroke width used for ink boxes
        groups: Group name to member list
        positioning_rules: Base/mark positioning declarations
        mark_attachment_rules: Nested base/mark attachment rules
        mark_attachment_classes: Classes of marks sharing a rule
        base_attachment_classes: Classes of bases sharing a rule
        positioning: Default attachment settings
        expand_groups: Group expansion function
        versions: Store version stamps the mappings were read at (empty
            for ad hoc contexts, which are never cached)
    """

    glyph_data: Mapping[int, GlyphData]
    characters_by_name: Mapping[str, Character]
    mark_positioning: Mapping[str, Point] = field(default_factory=dict)
    kerning: Mapping[str, float] = field(default_factory=dict)
    metrics: FontMetrics = field(default_factory=FontMetrics)
    stroke_thickness: float = 15.0
    groups: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    positioning_rules: tuple[PositioningRule, ...] = ()
    mark_attachment_rules: MarkAttachmentRules = field(default_factory=dict)
    mark_attachment_classes: tuple[AttachmentClass, ...] = ()
    base_attachment_classes: tuple[AttachmentClass, ...] = ()
    positioning: PositioningConfig = field(default_factory=PositioningConfig)
    expand_groups: GroupExpander = expand_members
    versions: tuple[int, ...] = ()

    @classmethod
    def build(
        cls,
        glyph_data: Mapping[int, GlyphData],
        characters: Iterable[Character] | Mapping[str, Character],
        mark_positioning: Mapping[str, Point] | None = None,
        kerning: Mapping[str, float] | None = None,
        metrics: FontMetrics | None = None,
        stroke_thickness: float = 15.0,
        groups: Mapping[str, Iterable[str]] | None = None,
        positioning_rules: Iterable[PositioningRule] = (),
        mark_attachment_rules: MarkAttachmentRules | None = None,
        mark_attachment_classes: Iterable[AttachmentClass] = (),
        base_attachment_classes: Iterable[AttachmentClass] = (),
        positioning: PositioningConfig | None = None,
        expand_groups: GroupExpander = expand_members,
        versions: tuple[int, ...] = (),
    ) -> "RenderContext":
        """Build a context, wrapping every mapping read-only."""
        if isinstance(characters, Mapping):
            by_name = dict(characters)
        else:
            by_name = {c.name: c for c in characters}
        return cls(
            glyph_data=MappingProxyType(dict(glyph_data)),
            characters_by_name=MappingProxyType(by_name),
            mark_positioning=MappingProxyType(dict(mark_positioning or {})),
            kerning=MappingProxyType(dict(kerning or {})),
            metrics=metrics or FontMetrics(),
            stroke_thickness=stroke_thickness,
            groups=MappingProxyType({k: tuple(v) for k, v in (groups or {}).items()}),
            positioning_rules=tuple(positioning_rules),
            mark_attachment_rules=MappingProxyType(
                {k: MappingProxyType(dict(v)) for k, v in (mark_attachment_rules or {}).items()}
            ),
            mark_attachment_classes=tuple(mark_attachment_classes),
            base_attachment_classes=tuple(base_attachment_classes),
            positioning=positioning or PositioningConfig(),
            expand_groups=expand_groups,
            versions=versions,
        )

    @classmethod
    def from_stores(
        cls,
        glyph_store: GlyphDataStore,
        characters: Iterable[Character] | Mapping[str, Character],
        positioning_store: MarkPositioningStore,
        kerning_store: KerningStore,
        **kwargs,
    ) -> "RenderContext":
        """Build a context from live stores, stamped with their versions."""
        snapshot = glyph_store.snapshot()
        return cls.build(
            snapshot.glyphs,
            characters,
            mark_positioning=positioning_store.snapshot(),
            kerning=kerning_store.snapshot(),
            versions=(snapshot.version, positioning_store.version, kerning_store.version),
            **kwargs,
        )

    def glyph_for(self, character: Character) -> GlyphData | None:
        """Drawing stored in the character's unicode slot, if any."""
        if character.unicode is None:
            return None
        return self.glyph_data.get(character.unicode)
