"""Unit tests for character resolution."""

import pytest

from glyphsmith.core.context import RenderContext
from glyphsmith.core.geometry import BoundingBox, paths_bounds
from glyphsmith.core.resolver import NOT_DRAWN, ResolutionCache, resolve, resolve_paths
from glyphsmith.domain import (
    AttachmentClass,
    AttachmentPoint,
    AttachmentRule,
    Character,
    ComponentMode,
    ComponentTransform,
    Composite,
    FontMetrics,
    GlyphData,
    Kern,
    Link,
    Movement,
    Path,
    PathType,
    Point,
    Position,
    PositioningRule,
    Segment,
)
from glyphsmith.store import GlyphDataStore, KerningStore, MarkPositioningStore


def rect(x0: float, y0: float, x1: float, y1: float, path_id: str = "r") -> Path:
    corners = [Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)]
    return Path(path_id, PathType.OUTLINE, segment_groups=[[Segment.corner(c) for c in corners]])


def glyph(*paths: Path) -> GlyphData:
    return GlyphData(paths)


E = Character("e", unicode=101)
ACUTE = Character("acute", unicode=769)
I = Character("i", unicode=105)
J = Character("j", unicode=106)
A = Character("A", unicode=65)
V = Character("V", unicode=86)

GLYPHS = {
    101: glyph(rect(100, 300, 300, 700, "e")),
    769: glyph(rect(0, 0, 20, 40, "acute")),
    105: glyph(rect(0, 300, 50, 700, "i")),
    106: glyph(rect(0, 300, 60, 700, "j")),
    65: glyph(rect(0, 300, 100, 700, "A")),
    86: glyph(rect(0, 300, 100, 700, "V")),
}

BASES = [E, ACUTE, I, J, A, V]


def make_context(extra: list[Character] = (), glyphs: dict | None = None, **kwargs) -> RenderContext:
    return RenderContext.build(glyphs if glyphs is not None else GLYPHS, BASES + list(extra), **kwargs)


def box_of(paths) -> BoundingBox:
    return paths_bounds(paths)


class TestBaseResolution:
    """Tests for base and directly drawn characters."""

    def test_drawn_base(self) -> None:
        result = resolve(E, make_context())
        assert result.is_available
        assert result.is_manually_set
        assert not result.is_constructed
        assert result.paths == GLYPHS[101].paths

    def test_undrawn_base(self) -> None:
        result = resolve(Character("b", unicode=98), make_context())
        assert not result.is_available
        assert result.reason == NOT_DRAWN
        assert result.paths == ()

    def test_empty_glyph_counts_as_not_drawn(self) -> None:
        glyphs = dict(GLYPHS)
        glyphs[98] = GlyphData([Path("empty", PathType.PEN)])
        result = resolve(Character("b", unicode=98), make_context(glyphs=glyphs))
        assert not result.is_available

    def test_space_is_available_without_ink(self) -> None:
        result = resolve(Character("space", unicode=0x20), make_context())
        assert result.is_available
        assert result.paths == ()

    def test_direct_drawing_wins_over_construction(self) -> None:
        eacute = Character("eacute", unicode=233, construction=Position("e", "acute"))
        glyphs = dict(GLYPHS)
        glyphs[233] = glyph(rect(0, 0, 10, 10, "own"))
        result = resolve(eacute, make_context([eacute], glyphs=glyphs))
        assert result.paths == glyphs[233].paths
        assert result.is_manually_set
        assert result.is_constructed

    def test_resolve_paths_is_empty_when_unavailable(self) -> None:
        assert resolve_paths(Character("b", unicode=98), make_context()) == []


class TestLinkResolution:
    """Tests for link constructions."""

    def test_identity_link_copies_component(self) -> None:
        alias = Character("e.alt", unicode=0xE000, construction=Link("e"))
        result = resolve(alias, make_context([alias]))
        assert result.is_available
        assert not result.is_manually_set
        assert result.is_constructed
        assert box_of(result.paths) == BoundingBox(100, 300, 300, 700)

    def test_scaled_link_scales_about_center(self) -> None:
        alias = Character("e.small", unicode=0xE001, construction=Link("e", ComponentTransform(scale=0.5)))
        result = resolve(alias, make_context([alias]))
        assert box_of(result.paths) == BoundingBox(150, 400, 250, 600)

    def test_scale_then_translate(self) -> None:
        transform = ComponentTransform(scale=0.5, x=10, y=-100)
        alias = Character("e.sup", unicode=0xE002, construction=Link("e", transform))
        result = resolve(alias, make_context([alias]))
        assert box_of(result.paths) == BoundingBox(160, 300, 260, 500)

    def test_missing_component(self) -> None:
        alias = Character("x.alt", unicode=0xE003, construction=Link("x"))
        result = resolve(alias, make_context([alias]))
        assert not result.is_available
        assert result.reason == "Missing components: x"

    def test_dereference_is_one_level(self) -> None:
        first = Character("e.alt", unicode=0xE000, construction=Link("e"))
        second = Character("e.alt2", unicode=0xE001, construction=Link("e.alt"))
        result = resolve(second, make_context([first, second]))
        assert not result.is_available
        assert result.reason == "Missing components: e.alt"


class TestCompositeResolution:
    """Tests for composite constructions."""

    def test_absolute_components_keep_positions(self) -> None:
        ij = Character("ij", unicode=0x133, construction=Composite(("i", "j")))
        result = resolve(ij, make_context([ij]))
        assert result.is_available
        assert [p.group_id for p in result.paths] == ["component-0", "component-1"]
        assert box_of(result.paths) == BoundingBox(0, 300, 60, 700)

    def test_touching_component_starts_at_previous_edge(self) -> None:
        transforms = (ComponentTransform(), ComponentTransform(mode=ComponentMode.TOUCHING))
        ij = Character("ij", unicode=0x133, construction=Composite(("i", "j"), transforms))
        result = resolve(ij, make_context([ij]))
        j_paths = [p for p in result.paths if p.group_id == "component-1"]
        assert box_of(j_paths) == BoundingBox(50, 300, 110, 700)

    def test_relative_component_uses_attachment(self) -> None:
        transforms = (ComponentTransform(), ComponentTransform(mode=ComponentMode.RELATIVE))
        eacute = Character("eacute", unicode=233, construction=Composite(("e", "acute"), transforms))
        result = resolve(eacute, make_context([eacute]))
        mark_paths = [p for p in result.paths if p.group_id == "component-1"]
        # Centred above the base with the default clearance
        assert box_of(mark_paths) == BoundingBox(190, 240, 210, 280)

    def test_any_missing_component_makes_composite_unavailable(self) -> None:
        broken = Character("ix", unicode=0xE010, construction=Composite(("i", "x", "y")))
        result = resolve(broken, make_context([broken]))
        assert not result.is_available
        assert result.reason == "Missing components: x, y"


class TestPositionResolution:
    """Tests for mark positioning."""

    EACUTE = Character("eacute", unicode=233, construction=Position("e", "acute"))

    def mark_box(self, result) -> BoundingBox:
        return box_of([p for p in result.paths if p.id == "acute"])

    def test_default_placement_above_base(self) -> None:
        result = resolve(self.EACUTE, make_context([self.EACUTE]))
        assert result.is_available
        assert not result.is_manually_set
        assert self.mark_box(result) == BoundingBox(190, 240, 210, 280)

    def test_manual_offset_wins(self) -> None:
        context = make_context([self.EACUTE], mark_positioning={"101-769": Point(5, 7)})
        result = resolve(self.EACUTE, context)
        assert result.is_manually_set
        assert self.mark_box(result) == BoundingBox(5, 7, 25, 47)

    def test_exact_rule(self) -> None:
        rule = AttachmentRule(AttachmentPoint.TOP_RIGHT, AttachmentPoint.BOTTOM_LEFT, 0, 0)
        context = make_context([self.EACUTE], mark_attachment_rules={"e": {"acute": rule}})
        assert self.mark_box(resolve(self.EACUTE, context)) == BoundingBox(300, 260, 320, 300)

    def test_group_rule(self) -> None:
        rule = AttachmentRule(AttachmentPoint.TOP_LEFT, AttachmentPoint.BOTTOM_LEFT, 0, -10)
        context = make_context(
            [self.EACUTE],
            groups={"bases": ["e"], "marks": ["acute"]},
            mark_attachment_rules={"$bases": {"@marks": rule}},
        )
        assert self.mark_box(resolve(self.EACUTE, context)) == BoundingBox(100, 250, 120, 290)

    def test_base_attachment_class(self) -> None:
        rule = AttachmentRule(AttachmentPoint.TOP_RIGHT, AttachmentPoint.BOTTOM_RIGHT, 0, 0)
        classes = [AttachmentClass("tall", members=("e",), rule=rule)]
        context = make_context([self.EACUTE], base_attachment_classes=classes)
        assert self.mark_box(resolve(self.EACUTE, context)) == BoundingBox(280, 260, 300, 300)

    def test_class_exceptions_skip_rule(self) -> None:
        rule = AttachmentRule(AttachmentPoint.TOP_RIGHT, AttachmentPoint.BOTTOM_RIGHT, 0, 0)
        classes = [AttachmentClass("tall", members=("e",), exceptions=("acute",), rule=rule)]
        context = make_context([self.EACUTE], base_attachment_classes=classes)
        assert self.mark_box(resolve(self.EACUTE, context)) == BoundingBox(190, 240, 210, 280)

    def test_unknown_group_rule_is_skipped(self) -> None:
        rule = AttachmentRule(AttachmentPoint.TOP_RIGHT, AttachmentPoint.BOTTOM_LEFT, 0, 0)
        context = make_context([self.EACUTE], mark_attachment_rules={"$nope": {"acute": rule}})
        assert self.mark_box(resolve(self.EACUTE, context)) == BoundingBox(190, 240, 210, 280)

    def test_vertical_movement_keeps_mark_x(self) -> None:
        rules = [PositioningRule(base=("e",), mark=("acute",), movement=Movement.VERTICAL)]
        context = make_context([self.EACUTE], positioning_rules=rules)
        assert self.mark_box(resolve(self.EACUTE, context)) == BoundingBox(0, 240, 20, 280)

    def test_missing_mark(self) -> None:
        broken = Character("eogonek", unicode=0x119, construction=Position("e", "ogonek"))
        result = resolve(broken, make_context([broken]))
        assert not result.is_available
        assert result.reason == "Missing components: ogonek"


class TestKernResolution:
    """Tests for kerned pair layout."""

    AV = Character("AV", unicode=0xE020, construction=Kern("A", "V"))

    def right_box(self, result) -> BoundingBox:
        return box_of([p for p in result.paths if p.id == "V"])

    def test_default_spacing(self) -> None:
        result = resolve(self.AV, make_context([self.AV]))
        assert result.is_available
        assert not result.is_manually_set
        # 100 ink + 50 rsb + 50 lsb
        assert self.right_box(result).min_x == pytest.approx(200)

    def test_accepted_kerning_applies(self) -> None:
        context = make_context([self.AV], kerning={"65-86": -30})
        result = resolve(self.AV, context)
        assert result.is_manually_set
        assert self.right_box(result).min_x == pytest.approx(170)

    def test_character_bearings_override_defaults(self) -> None:
        left = Character("A", unicode=65, rsb=10)
        context = RenderContext.build(GLYPHS, [left, V, self.AV])
        result = resolve(self.AV, context)
        assert self.right_box(result).min_x == pytest.approx(160)


class TestResolutionCache:
    """Tests for the version-keyed cache."""

    def stores(self):
        glyph_store = GlyphDataStore(GLYPHS)
        return glyph_store, MarkPositioningStore(), KerningStore()

    def test_hits_while_versions_match(self) -> None:
        glyph_store, positioning, kerning = self.stores()
        context = RenderContext.from_stores(glyph_store, BASES, positioning, kerning)
        cache = ResolutionCache()
        first = cache.resolve(E, context)
        second = cache.resolve(E, context)
        assert first is second
        assert (cache.hits, cache.misses) == (1, 1)

    def test_version_change_clears_entries(self) -> None:
        glyph_store, positioning, kerning = self.stores()
        cache = ResolutionCache()
        cache.resolve(E, RenderContext.from_stores(glyph_store, BASES, positioning, kerning))
        glyph_store.set(101, glyph(rect(0, 0, 10, 10, "e")))
        context = RenderContext.from_stores(glyph_store, BASES, positioning, kerning)
        result = cache.resolve(E, context)
        assert box_of(result.paths) == BoundingBox(0, 0, 10, 10)
        assert cache.misses == 2
        assert len(cache) == 1

    def test_unversioned_context_bypasses_cache(self) -> None:
        cache = ResolutionCache()
        cache.resolve(E, make_context())
        assert len(cache) == 0

    def test_metrics_change_with_same_versions_clears_entries(self) -> None:
        av = Character("AV", unicode=0xE020, construction=Kern("A", "V"))
        spaced = make_context([av], versions=(1, 0, 0))
        tight = make_context(
            [av], versions=(1, 0, 0), metrics=FontMetrics(default_lsb=0.0, default_rsb=0.0)
        )
        cache = ResolutionCache()

        cache.resolve(av, spaced)
        result = cache.resolve(av, tight)

        assert result == resolve(av, tight)
        assert box_of([p for p in result.paths if p.id == "V"]).min_x == pytest.approx(100)

    def test_rule_change_with_same_versions_clears_entries(self) -> None:
        eacute = Character("eacute", unicode=0xE9, construction=Position("e", "acute"))
        plain = make_context([eacute], versions=(1, 0, 0))
        ruled = make_context(
            [eacute],
            versions=(1, 0, 0),
            mark_attachment_rules={"e": {"acute": AttachmentRule(dy=-100.0)}},
        )
        cache = ResolutionCache()

        cache.resolve(eacute, plain)
        assert cache.resolve(eacute, ruled) == resolve(eacute, ruled)
        assert cache.misses == 2

    def test_equal_rebuilt_context_keeps_entries(self) -> None:
        cache = ResolutionCache()
        first = cache.resolve(E, make_context(versions=(1, 0, 0)))
        second = cache.resolve(E, make_context(versions=(1, 0, 0)))
        assert first is second
        assert cache.hits == 1


class TestResolutionPurity:
    """Resolving never mutates the context and always gives the same answer."""

    CONSTRUCTED = [
        Character("e.alt", unicode=0xE000, construction=Link("e")),
        Character("ij", unicode=0x133, construction=Composite(("i", "j"))),
        Character("eacute", unicode=0xE9, construction=Position("e", "acute")),
        Character("AV", unicode=0xE020, construction=Kern("A", "V")),
    ]

    @pytest.mark.parametrize("character", CONSTRUCTED, ids=lambda c: c.construction_kind)
    def test_idempotent_and_side_effect_free(self, character: Character) -> None:
        context = make_context(
            self.CONSTRUCTED,
            kerning={"65-86": -20},
            mark_positioning={"101-769": Point(5, -40)},
            groups={"marks": ["acute"]},
        )
        glyphs = dict(context.glyph_data)
        characters = dict(context.characters_by_name)
        kerning = dict(context.kerning)
        offsets = dict(context.mark_positioning)

        first = resolve(character, context)
        second = resolve(character, context)

        assert first.is_available
        assert first == second
        assert dict(context.glyph_data) == glyphs
        assert dict(context.characters_by_name) == characters
        assert dict(context.kerning) == kerning
        assert dict(context.mark_positioning) == offsets
