"""Mutable state owned outside the resolver.

- GlyphDataStore: unicode to drawing, with a monotonic version counter
- MarkPositioningStore: manual base/mark offsets
- KerningStore: accepted kerning, suggestions and ignored pairs
"""

from glyphsmith.store.glyphs import GlyphDataStore, GlyphSnapshot
from glyphsmith.store.overrides import KerningStore, MarkPositioningStore, pair_key

__all__ = [
    "GlyphDataStore",
    "GlyphSnapshot",
    "KerningStore",
    "MarkPositioningStore",
    "pair_key",
]
