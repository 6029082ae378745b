"""Reader for JSON project snapshots.

A snapshot holds everything the engine needs to resolve and kern a font:
character definitions, drawings, accepted overrides, metrics and the rule
sections. Stores are built from it so callers get the same versioned state
an interactive session would have.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from glyphsmith.core.context import RenderContext
from glyphsmith.domain import (
    Character,
    FontMetrics,
    parse_attachment_classes,
    parse_mark_attachment_rules,
    parse_positioning_rules,
)
from glyphsmith.exceptions import ContextLoadError, GlyphsmithError
from glyphsmith.store import GlyphDataStore, KerningStore, MarkPositioningStore

DEFAULT_STROKE_THICKNESS = 15.0


@dataclass
class ContextSnapshot:
    """Loaded project state.

    Attributes:
        context: Render context stamped with the store versions
        characters: Character definitions in file order
        recommended_kerning: Raw ``[left, right, rule?]`` entries
        glyph_store: Drawings
        positioning_store: Manual mark offsets
        kerning_store: Accepted kerning, suggestions and ignored pairs
    """

    context: RenderContext
    characters: list[Character]
    recommended_kerning: list[list[Any]] = field(default_factory=list)
    glyph_store: GlyphDataStore = field(default_factory=GlyphDataStore)
    positioning_store: MarkPositioningStore = field(default_factory=MarkPositioningStore)
    kerning_store: KerningStore = field(default_factory=KerningStore)


class ContextReader:
    """Loads a JSON project snapshot into stores and a render context.

    Example:
        snapshot = ContextReader(Path("project.json")).load()
        for character in snapshot.characters:
            print(character.name, resolve(character, snapshot.context).is_available)
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def _read_json(self) -> dict[str, Any]:
        if not self._path.exists():
            raise ContextLoadError(str(self._path), "file not found")
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ContextLoadError(str(self._path), str(e)) from e
        if not isinstance(data, dict):
            raise ContextLoadError(str(self._path), "top level must be an object")
        return data

    def load(self) -> ContextSnapshot:
        """Parse the snapshot.

        Returns:
            The loaded snapshot

        Raises:
            ContextLoadError: If the file is missing, is not valid JSON, or
                contains a record that cannot be parsed
        """
        data = self._read_json()
        try:
            return self._build(data)
        except GlyphsmithError as e:
            raise ContextLoadError(str(self._path), str(e)) from e
        except (KeyError, TypeError, ValueError) as e:
            raise ContextLoadError(str(self._path), f"malformed record: {e}") from e

    def _build(self, data: dict[str, Any]) -> ContextSnapshot:
        characters = [Character.from_dict(c) for c in data.get("characters") or []]
        glyph_store = GlyphDataStore.from_dict(data.get("glyphs") or {})
        positioning_store = MarkPositioningStore.from_dict(data.get("markPositioning") or {})
        kerning_store = KerningStore.from_dict(
            {
                "kerning": data.get("kerning") or {},
                "suggestions": data.get("suggestedKerning") or {},
                "ignored": data.get("ignoredKerning") or [],
            }
        )
        settings = data.get("settings") or {}

        context = RenderContext.from_stores(
            glyph_store,
            characters,
            positioning_store,
            kerning_store,
            metrics=FontMetrics.from_dict(data.get("metrics") or {}),
            stroke_thickness=float(settings.get("strokeThickness", DEFAULT_STROKE_THICKNESS)),
            groups=data.get("groups") or {},
            positioning_rules=parse_positioning_rules(data.get("positioning")),
            mark_attachment_rules=parse_mark_attachment_rules(data.get("markAttachment")),
            mark_attachment_classes=parse_attachment_classes(data.get("markAttachmentClasses")),
            base_attachment_classes=parse_attachment_classes(data.get("baseAttachmentClasses")),
        )

        return ContextSnapshot(
            context=context,
            characters=characters,
            recommended_kerning=[list(entry) for entry in data.get("recommendedKerning") or []],
            glyph_store=glyph_store,
            positioning_store=positioning_store,
            kerning_store=kerning_store,
        )
