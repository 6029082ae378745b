"""Versioned owner of the unicode-to-drawing mapping."""

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from glyphsmith.domain import GlyphData


@dataclass(frozen=True)
class GlyphSnapshot:
    """Read-only view of the glyph store plus the version it was taken at.

    The view is not a copy. Readers compare ``version`` with the store's
    current version to know whether anything they derived from it is stale,
    and take a fresh snapshot when it is.
    """

    glyphs: Mapping[int, GlyphData]
    version: int


class GlyphDataStore:
    """Holds the mutable ``unicode -> GlyphData`` mapping.

    Every mutation advances ``version`` by one so that caches keyed on it
    are invalidated precisely. The mapping is mutated in place rather than
    cloned.
    """

    def __init__(self, glyphs: Mapping[int, GlyphData] | None = None) -> None:
        self._glyphs: dict[int, GlyphData] = dict(glyphs or {})
        self._version = 0
        self._lock = threading.Lock()

    @property
    def version(self) -> int:
        return self._version

    def get(self, unicode: int) -> GlyphData | None:
        return self._glyphs.get(unicode)

    def __contains__(self, unicode: object) -> bool:
        return unicode in self._glyphs

    def __len__(self) -> int:
        return len(self._glyphs)

    def set(self, unicode: int, glyph: GlyphData) -> int:
        """Store the drawing for one slot and return the new version."""
        with self._lock:
            self._glyphs[unicode] = glyph
            self._version += 1
            return self._version

    def update(self, glyphs: Mapping[int, GlyphData]) -> int:
        """Store several drawings as one mutation."""
        with self._lock:
            self._glyphs.update(glyphs)
            self._version += 1
            return self._version

    def delete(self, unicode: int) -> int:
        """Clear one slot. Deleting an empty slot still advances the version."""
        with self._lock:
            self._glyphs.pop(unicode, None)
            self._version += 1
            return self._version

    def replace(self, glyphs: Mapping[int, GlyphData]) -> int:
        """Swap in a whole new mapping (project load)."""
        with self._lock:
            self._glyphs = dict(glyphs)
            self._version += 1
            return self._version

    def reset(self) -> int:
        return self.replace({})

    def snapshot(self) -> GlyphSnapshot:
        """Read-only view plus version stamp."""
        with self._lock:
            return GlyphSnapshot(MappingProxyType(self._glyphs), self._version)

    def copy_subset(self, unicodes: Iterable[int]) -> dict[int, GlyphData]:
        """Copy only the requested slots (for handing to a worker)."""
        with self._lock:
            return {u: self._glyphs[u] for u in unicodes if u in self._glyphs}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary keyed by unicode string."""
        return {str(u): g.to_dict() for u, g in self._glyphs.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GlyphDataStore":
        return cls({int(u): GlyphData.from_dict(g) for u, g in data.items()})
