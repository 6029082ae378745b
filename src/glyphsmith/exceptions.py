"""Exception hierarchy for Glyphsmith.

Expected incompleteness (undrawn or missing components, pairs without data)
is reported through availability flags and empty results, never through
these exceptions.
"""


class GlyphsmithError(Exception):
    """Base exception for all Glyphsmith errors."""

    pass


class DefinitionError(GlyphsmithError):
    """Errors in declarative character or rule data."""

    pass


class CharacterDefinitionError(DefinitionError):
    """A character definition violates the construction contract."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid definition for character '{name}': {reason}")


class UnknownGroupError(DefinitionError):
    """A rule references a group that does not exist."""

    def __init__(self, group_name: str) -> None:
        self.group_name = group_name
        super().__init__(f"Unknown group '{group_name}'")


class GeometryError(GlyphsmithError):
    """Errors in geometric calculations."""

    pass


class DegenerateGeometryError(GeometryError):
    """Geometry too small or malformed to operate on."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class KerningError(GlyphsmithError):
    """Errors related to automatic kerning."""

    pass


class WorkerUnavailableError(KerningError):
    """The kerning worker could not accept or complete a batch."""

    def __init__(self, batch_id: int, reason: str) -> None:
        self.batch_id = batch_id
        self.reason = reason
        super().__init__(f"Kerning batch {batch_id} failed: {reason}")


class ContextLoadError(GlyphsmithError):
    """Error loading a context snapshot file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load context '{path}': {reason}")
