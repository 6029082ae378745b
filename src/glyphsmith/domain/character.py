"""Character identity and construction model.

A character is either a base glyph, drawn directly into its unicode slot, or
is derived from other characters by name. The derivation is a tagged union:
exactly one of Link, Composite, Position or Kern, or none for a base glyph.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from glyphsmith.exceptions import CharacterDefinitionError


class GlyphClass(str, Enum):
    """OpenType-style glyph class."""

    BASE = "base"
    LIGATURE = "ligature"
    MARK = "mark"
    VIRTUAL = "virtual"


class ComponentMode(str, Enum):
    """How a component is laid out relative to earlier components.

    - ABSOLUTE: stays where its own transform puts it
    - TOUCHING: starts at the right edge of the accumulated shape
    - RELATIVE: attaches to the accumulated shape like a positioned mark
    """

    ABSOLUTE = "absolute"
    TOUCHING = "touching"
    RELATIVE = "relative"


@dataclass(frozen=True)
class ComponentTransform:
    """Stored transform for one component of a link or composite.

    Scale is applied around the component's ink-box centre, then the
    translation is added.

    Attributes:
        scale: Uniform scale factor
        x: Horizontal translation in design units
        y: Vertical translation in design units
        mode: Layout mode relative to previous components
    """

    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0
    mode: ComponentMode = ComponentMode.ABSOLUTE

    def is_identity(self) -> bool:
        """Check whether the transform leaves geometry untouched."""
        return self.scale == 1.0 and self.x == 0.0 and self.y == 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"scale": self.scale, "x": self.x, "y": self.y, "mode": self.mode.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComponentTransform":
        """Deserialize from dictionary."""
        return cls(
            scale=float(data.get("scale", 1.0)),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            mode=ComponentMode(data.get("mode", ComponentMode.ABSOLUTE.value)),
        )

    @classmethod
    def parse(cls, config: Any, index: int) -> "ComponentTransform":
        """Normalize any stored transform encoding for the component at ``index``.

        Supported encodings:
        - ``[{"scale": .., "x": .., "y": .., "mode": ..}, ...]``
        - ``[[scale, y, "touching" | "absolute"], ...]``
        - ``[scale, y]``, applied to every component

        Args:
            config: Raw transform configuration
            index: Component index

        Returns:
            The transform for that component (identity when absent)
        """
        if not isinstance(config, (list, tuple)) or not config:
            return cls()

        first = config[0]
        if isinstance(first, dict):
            entry = config[index] if index < len(config) else None
            return cls.from_dict(entry) if isinstance(entry, dict) else cls()

        if isinstance(first, (list, tuple)):
            entry = config[index] if index < len(config) else None
            if not isinstance(entry, (list, tuple)):
                return cls()
            scale = entry[0] if entry and isinstance(entry[0], (int, float)) else 1.0
            y = entry[1] if len(entry) > 1 and isinstance(entry[1], (int, float)) else 0.0
            if "touching" in entry:
                mode = ComponentMode.TOUCHING
            elif "relative" in entry:
                mode = ComponentMode.RELATIVE
            else:
                mode = ComponentMode.ABSOLUTE
            return cls(scale=float(scale), y=float(y), mode=mode)

        if isinstance(first, (int, float)):
            y = config[1] if len(config) > 1 and isinstance(config[1], (int, float)) else 0.0
            return cls(scale=float(first), y=float(y))

        return cls()


@dataclass(frozen=True)
class Link:
    """Single-component alias of another character."""

    component: str
    transform: ComponentTransform = field(default_factory=ComponentTransform)

    @property
    def components(self) -> tuple[str, ...]:
        return (self.component,)


@dataclass(frozen=True)
class Composite:
    """Merge of several characters, each under its own transform."""

    components: tuple[str, ...]
    transforms: tuple[ComponentTransform, ...] = ()

    def transform_for(self, index: int) -> ComponentTransform:
        """Transform of the component at ``index`` (identity when absent)."""
        if index < len(self.transforms):
            return self.transforms[index]
        return ComponentTransform()


@dataclass(frozen=True)
class Position:
    """A mark attached to a base."""

    base: str
    mark: str

    @property
    def components(self) -> tuple[str, ...]:
        return (self.base, self.mark)


@dataclass(frozen=True)
class Kern:
    """A virtual kerned pair."""

    left: str
    right: str

    @property
    def components(self) -> tuple[str, ...]:
        return (self.left, self.right)


Construction = Union[Link, Composite, Position, Kern]

CONSTRUCTION_KEYS = ("link", "composite", "position", "kern")

# Always renderable even though they carry no ink.
INVISIBLE_UNICODES = frozenset({0x0020, 0x200C, 0x200D})


@dataclass(frozen=True)
class Character:
    """Identity and construction of one glyph.

    Attributes:
        name: Unique name
        unicode: Code point of the glyph's drawing slot
        lsb: Left side bearing override
        rsb: Right side bearing override
        glyph_class: Glyph class, when declared
        construction: How the glyph derives from others (None for base glyphs)
        hidden: Hidden from the editor grid
    """

    name: str
    unicode: int | None = None
    lsb: float | None = None
    rsb: float | None = None
    glyph_class: GlyphClass | None = None
    construction: Construction | None = None
    hidden: bool = False

    def __post_init__(self) -> None:
        if self.construction is not None and self.name in self.construction.components:
            raise CharacterDefinitionError(self.name, "construction references itself")

    @property
    def is_base(self) -> bool:
        """True when the glyph has no construction."""
        return self.construction is None

    @property
    def construction_kind(self) -> str | None:
        """Name of the construction variant ('link', 'composite', 'position', 'kern')."""
        if self.construction is None:
            return None
        return type(self.construction).__name__.lower()

    @property
    def is_invisible(self) -> bool:
        """Space and joiners render nothing but are always available."""
        return self.unicode in INVISIBLE_UNICODES

    def lsb_or(self, default: float) -> float:
        return self.lsb if self.lsb is not None else default

    def rsb_or(self, default: float) -> float:
        return self.rsb if self.rsb is not None else default

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the editor's flat dictionary form."""
        data: dict[str, Any] = {"name": self.name}
        if self.unicode is not None:
            data["unicode"] = self.unicode
        if self.lsb is not None:
            data["lsb"] = self.lsb
        if self.rsb is not None:
            data["rsb"] = self.rsb
        if self.glyph_class is not None:
            data["glyphClass"] = self.glyph_class.value
        if self.hidden:
            data["hidden"] = True

        construction = self.construction
        if isinstance(construction, Link):
            data["link"] = [construction.component]
            if not construction.transform.is_identity():
                data["compositeTransform"] = [construction.transform.to_dict()]
        elif isinstance(construction, Composite):
            data["composite"] = list(construction.components)
            if construction.transforms:
                data["compositeTransform"] = [t.to_dict() for t in construction.transforms]
        elif isinstance(construction, Position):
            data["position"] = [construction.base, construction.mark]
        elif isinstance(construction, Kern):
            data["kern"] = [construction.left, construction.right]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Character":
        """Deserialize from the editor's flat dictionary form.

        Raises:
            CharacterDefinitionError: If several construction keys are present,
                a construction has the wrong arity, or it references itself
        """
        name = data.get("name")
        if not name:
            raise CharacterDefinitionError(str(name), "missing name")

        present = [key for key in CONSTRUCTION_KEYS if data.get(key)]
        if len(present) > 1:
            raise CharacterDefinitionError(
                name, f"conflicting constructions: {', '.join(present)}"
            )

        construction: Construction | None = None
        raw_transform = data.get("compositeTransform")
        if present:
            kind = present[0]
            names = [str(n) for n in data[kind]]
            if kind == "link":
                if len(names) != 1:
                    raise CharacterDefinitionError(name, "link must name exactly one component")
                construction = Link(names[0], ComponentTransform.parse(raw_transform, 0))
            elif kind == "composite":
                transforms = tuple(
                    ComponentTransform.parse(raw_transform, i) for i in range(len(names))
                )
                if all(t.is_identity() and t.mode == ComponentMode.ABSOLUTE for t in transforms):
                    transforms = ()
                construction = Composite(tuple(names), transforms)
            elif kind == "position":
                if len(names) != 2:
                    raise CharacterDefinitionError(name, "position must name a base and a mark")
                construction = Position(names[0], names[1])
            else:
                if len(names) != 2:
                    raise CharacterDefinitionError(name, "kern must name a left and a right glyph")
                construction = Kern(names[0], names[1])

        glyph_class = data.get("glyphClass")
        return cls(
            name=name,
            unicode=data.get("unicode"),
            lsb=data.get("lsb"),
            rsb=data.get("rsb"),
            glyph_class=GlyphClass(glyph_class) if glyph_class else None,
            construction=construction,
            hidden=bool(data.get("hidden", False)),
        )
