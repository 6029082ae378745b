"""Mark-positioning and kerning override maps.

Both stores are plain key-value caches keyed by ordered pair
(``"{left_unicode}-{right_unicode}"``). They perform no validation; the
resolver decides at read time whether a stored entry is usable.
"""

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from glyphsmith.domain import Point


def pair_key(first: int, second: int) -> str:
    """Ordered pair key used by both override maps."""
    return f"{first}-{second}"


class MarkPositioningStore:
    """Manual mark offsets keyed by ``"{base_unicode}-{mark_unicode}"``."""

    def __init__(self, offsets: Mapping[str, Point] | None = None) -> None:
        self._offsets: dict[str, Point] = dict(offsets or {})
        self._version = 0
        self._lock = threading.Lock()

    @property
    def version(self) -> int:
        return self._version

    def get(self, key: str) -> Point | None:
        return self._offsets.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._offsets

    def __len__(self) -> int:
        return len(self._offsets)

    def batch_update(self, offsets: Mapping[str, Point]) -> None:
        """Upsert several offsets at once."""
        with self._lock:
            self._offsets.update(offsets)
            self._version += 1

    def replace(self, offsets: Mapping[str, Point]) -> None:
        """Replace the whole map (project load or reset)."""
        with self._lock:
            self._offsets = dict(offsets)
            self._version += 1

    def snapshot(self) -> Mapping[str, Point]:
        """Read-only copy of the current offsets."""
        with self._lock:
            return MappingProxyType(dict(self._offsets))

    def to_dict(self) -> dict[str, Any]:
        return {key: offset.to_dict() for key, offset in self._offsets.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MarkPositioningStore":
        return cls({key: Point.from_dict(value) for key, value in data.items()})


class KerningStore:
    """Accepted kerning, pending suggestions and ignored pairs.

    Accepted and suggested values live in disjoint maps. Suggestions are
    written by the auto-kern queue from a worker callback, so every mutation
    takes the store lock.
    """

    def __init__(
        self,
        kerning: Mapping[str, float] | None = None,
        suggestions: Mapping[str, float] | None = None,
        ignored: Iterable[str] | None = None,
    ) -> None:
        self._kerning: dict[str, float] = dict(kerning or {})
        self._suggestions: dict[str, float] = dict(suggestions or {})
        self._ignored: set[str] = set(ignored or ())
        self._version = 0
        self._lock = threading.RLock()

    @property
    def version(self) -> int:
        """Advances whenever the accepted map changes."""
        return self._version

    # Accepted kerning

    def get(self, key: str) -> float | None:
        return self._kerning.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._kerning

    def batch_update(self, values: Mapping[str, float]) -> None:
        """Upsert accepted values."""
        with self._lock:
            self._kerning.update(values)
            self._version += 1

    def replace(self, values: Mapping[str, float]) -> None:
        """Replace the accepted map."""
        with self._lock:
            self._kerning = dict(values)
            self._version += 1

    def snapshot(self) -> Mapping[str, float]:
        """Read-only copy of the accepted map."""
        with self._lock:
            return MappingProxyType(dict(self._kerning))

    # Suggestions

    def get_suggestion(self, key: str) -> float | None:
        return self._suggestions.get(key)

    @property
    def suggestions(self) -> Mapping[str, float]:
        with self._lock:
            return MappingProxyType(dict(self._suggestions))

    def merge_suggestions(self, values: Mapping[str, float]) -> None:
        """Overwrite suggestions for the given keys, skipping ignored pairs."""
        with self._lock:
            for key, value in values.items():
                if key not in self._ignored:
                    self._suggestions[key] = value

    def replace_suggestions(self, values: Mapping[str, float]) -> None:
        with self._lock:
            self._suggestions = {k: v for k, v in values.items() if k not in self._ignored}

    def remove_suggestions(self, keys: Iterable[str]) -> None:
        with self._lock:
            for key in keys:
                self._suggestions.pop(key, None)

    def accept_suggestion(self, key: str) -> float | None:
        """Promote one suggestion into the accepted map.

        Returns:
            The promoted value, or None when there was no suggestion
        """
        with self._lock:
            value = self._suggestions.pop(key, None)
            if value is None:
                return None
            self._kerning[key] = value
            self._version += 1
            return value

    def accept_all_suggestions(self) -> dict[str, float]:
        """Promote every suggestion and return what was promoted."""
        with self._lock:
            accepted = dict(self._suggestions)
            if accepted:
                self._kerning.update(accepted)
                self._suggestions.clear()
                self._version += 1
            return accepted

    # Ignored pairs

    def ignore_pair(self, key: str) -> None:
        """Exclude a pair from auto-kerning and drop its suggestion."""
        with self._lock:
            self._ignored.add(key)
            self._suggestions.pop(key, None)

    def unignore_pair(self, key: str) -> None:
        with self._lock:
            self._ignored.discard(key)

    def is_ignored(self, key: str) -> bool:
        return key in self._ignored

    @property
    def ignored(self) -> frozenset[str]:
        return frozenset(self._ignored)

    def reset(self) -> None:
        """Clear accepted, suggested and ignored state."""
        with self._lock:
            self._kerning.clear()
            self._suggestions.clear()
            self._ignored.clear()
            self._version += 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "kerning": dict(self._kerning),
            "suggestions": dict(self._suggestions),
            "ignored": sorted(self._ignored),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KerningStore":
        return cls(
            kerning=data.get("kerning") or {},
            suggestions=data.get("suggestions") or {},
            ignored=data.get("ignored") or (),
        )
