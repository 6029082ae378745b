"""Glyphsmith - Glyph construction, layout and auto-kerning engine.

Glyphsmith resolves characters defined as links, composites, mark positions
and kerned pairs into drawable paths, frames them for preview, and proposes
kerning from glyph silhouettes in a background worker.

Example:
    $ glyphsmith inspect project.json
    $ glyphsmith autokern project.json -o suggestions.json
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
