"""Snapshot I/O layer for glyphsmith.

This module reads JSON project snapshots into stores and a render context,
and writes kerning suggestions back out. It is used by the CLI; the engine
itself never touches the filesystem.

Key classes:
- ContextReader: Load a project snapshot
- ContextSnapshot: Loaded stores, characters and context

Key functions:
- write_suggestions: Save a kerning map
"""

from glyphsmith.io.reader import ContextReader, ContextSnapshot
from glyphsmith.io.writer import write_suggestions

__all__ = [
    "ContextReader",
    "ContextSnapshot",
    "write_suggestions",
]
