"""Unit tests for the versioned stores."""

import typing

from glyphsmith.domain import GlyphData, Path, PathType, Point
from glyphsmith.store import GlyphDataStore, KerningStore, MarkPositioningStore, pair_key


def drawn_glyph() -> GlyphData:
    return GlyphData([Path("p", PathType.LINE, points=[Point(0, 0), Point(10, 0)])])


class TestGlyphDataStore:
    """Tests for GlyphDataStore."""

    def test_every_mutation_bumps_version(self) -> None:
        store = GlyphDataStore()
        assert store.version == 0
        assert store.set(65, drawn_glyph()) == 1
        assert store.update({66: drawn_glyph()}) == 2
        assert store.delete(65) == 3
        assert store.delete(65) == 4
        assert store.replace({}) == 5
        assert store.reset() == 6

    def test_snapshot_is_read_only_view(self) -> None:
        store = GlyphDataStore({65: drawn_glyph()})
        snapshot = store.snapshot()
        assert snapshot.version == store.version
        assert 65 in snapshot.glyphs
        try:
            snapshot.glyphs[66] = drawn_glyph()  # type: ignore[index]
        except TypeError:
            pass
        else:
            raise AssertionError("snapshot must be read-only")

    def test_stale_snapshot_detectable(self) -> None:
        store = GlyphDataStore()
        snapshot = store.snapshot()
        store.set(65, drawn_glyph())
        assert snapshot.version != store.version

    def test_copy_subset(self) -> None:
        store = GlyphDataStore({65: drawn_glyph(), 66: drawn_glyph()})
        assert set(store.copy_subset({65, 99})) == {65}

    def test_copy_subset_accepts_any_iterable(self) -> None:
        store = GlyphDataStore({65: drawn_glyph(), 66: drawn_glyph()})
        assert list(store.copy_subset([66, 65, 99])) == [66, 65]

    def test_method_annotations_resolve(self) -> None:
        """Annotations name builtins, not same-named store methods."""
        for name in ("set", "update", "copy_subset", "snapshot"):
            hints = typing.get_type_hints(getattr(GlyphDataStore, name))
            assert "return" in hints

    def test_serialization(self) -> None:
        store = GlyphDataStore({65: drawn_glyph()})
        restored = GlyphDataStore.from_dict(store.to_dict())
        assert restored.get(65) == store.get(65)
        assert len(restored) == 1


class TestMarkPositioningStore:
    """Tests for MarkPositioningStore."""

    def test_batch_update_and_snapshot(self) -> None:
        store = MarkPositioningStore()
        store.batch_update({pair_key(101, 769): Point(5, -40)})
        assert store.get("101-769") == Point(5, -40)
        assert store.version == 1
        assert "101-769" in store.snapshot()

    def test_replace(self) -> None:
        store = MarkPositioningStore({"1-2": Point(0, 0)})
        store.replace({"3-4": Point(1, 1)})
        assert "1-2" not in store
        assert len(store) == 1

    def test_serialization(self) -> None:
        store = MarkPositioningStore({"1-2": Point(3, 4)})
        assert MarkPositioningStore.from_dict(store.to_dict()).get("1-2") == Point(3, 4)


class TestKerningStore:
    """Tests for KerningStore."""

    def test_pair_key(self) -> None:
        assert pair_key(65, 86) == "65-86"

    def test_accepted_and_suggested_are_disjoint(self) -> None:
        store = KerningStore()
        store.merge_suggestions({"65-86": -40})
        assert store.get("65-86") is None
        assert store.get_suggestion("65-86") == -40

        assert store.accept_suggestion("65-86") == -40
        assert store.get("65-86") == -40
        assert store.get_suggestion("65-86") is None

    def test_accept_missing_suggestion(self) -> None:
        store = KerningStore()
        assert store.accept_suggestion("1-2") is None
        assert store.version == 0

    def test_accept_all(self) -> None:
        store = KerningStore(suggestions={"1-2": 10, "3-4": -5})
        assert store.accept_all_suggestions() == {"1-2": 10, "3-4": -5}
        assert store.suggestions == {}
        assert store.version == 1

    def test_suggestions_do_not_bump_version(self) -> None:
        store = KerningStore()
        store.merge_suggestions({"1-2": 10})
        assert store.version == 0

    def test_ignored_pairs_never_get_suggestions(self) -> None:
        store = KerningStore(suggestions={"1-2": 10})
        store.ignore_pair("1-2")
        assert store.get_suggestion("1-2") is None
        store.merge_suggestions({"1-2": 20, "3-4": 5})
        assert store.get_suggestion("1-2") is None
        assert store.get_suggestion("3-4") == 5

        store.unignore_pair("1-2")
        assert not store.is_ignored("1-2")

    def test_replace_suggestions_filters_ignored(self) -> None:
        store = KerningStore(ignored=["1-2"])
        store.replace_suggestions({"1-2": 10, "3-4": 5})
        assert dict(store.suggestions) == {"3-4": 5}

    def test_remove_suggestions(self) -> None:
        store = KerningStore(suggestions={"1-2": 10, "3-4": 5})
        store.remove_suggestions(["1-2", "9-9"])
        assert dict(store.suggestions) == {"3-4": 5}

    def test_reset(self) -> None:
        store = KerningStore({"1-2": 1}, {"3-4": 2}, ["5-6"])
        store.reset()
        assert store.to_dict() == {"kerning": {}, "suggestions": {}, "ignored": []}

    def test_serialization(self) -> None:
        store = KerningStore({"1-2": 1}, {"3-4": 2}, ["6-7", "5-6"])
        data = store.to_dict()
        assert data["ignored"] == ["5-6", "6-7"]
        restored = KerningStore.from_dict(data)
        assert restored.get("1-2") == 1
        assert restored.is_ignored("6-7")
