"""Font metrics shared by every resolution pass."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FontMetrics:
    """Reference frame for layout, fitting and kerning.

    ``top_line_y`` and ``base_line_y`` are canvas coordinates, so the top line
    has the smaller value. Immutable for the duration of a resolution pass.

    Attributes:
        units_per_em: Design units per em
        ascender: Ascender height in font units
        descender: Descender depth in font units (negative)
        top_line_y: Canvas y of the top guide (x-height / cap line)
        base_line_y: Canvas y of the baseline guide
        default_lsb: Left side bearing used when a character has none
        default_rsb: Right side bearing used when a character has none
        default_advance_width: Advance width used for empty glyphs
        space_advance_width: Advance width of the space glyph
        style_name: Style name of the font
    """

    units_per_em: int = 1000
    ascender: int = 800
    descender: int = -200
    top_line_y: float = 300.0
    base_line_y: float = 700.0
    default_lsb: float = 50.0
    default_rsb: float = 50.0
    default_advance_width: float = 600.0
    space_advance_width: float = 400.0
    style_name: str = "Regular"

    @property
    def band_height(self) -> float:
        """Distance between the top line and the baseline."""
        return abs(self.base_line_y - self.top_line_y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "unitsPerEm": self.units_per_em,
            "ascender": self.ascender,
            "descender": self.descender,
            "topLineY": self.top_line_y,
            "baseLineY": self.base_line_y,
            "defaultLSB": self.default_lsb,
            "defaultRSB": self.default_rsb,
            "defaultAdvanceWidth": self.default_advance_width,
            "spaceAdvanceWidth": self.space_advance_width,
            "styleName": self.style_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontMetrics":
        """Deserialize from dictionary, falling back to defaults for missing keys."""
        defaults = cls()
        return cls(
            units_per_em=int(data.get("unitsPerEm", defaults.units_per_em)),
            ascender=int(data.get("ascender", defaults.ascender)),
            descender=int(data.get("descender", defaults.descender)),
            top_line_y=float(data.get("topLineY", defaults.top_line_y)),
            base_line_y=float(data.get("baseLineY", defaults.base_line_y)),
            default_lsb=float(data.get("defaultLSB", defaults.default_lsb)),
            default_rsb=float(data.get("defaultRSB", defaults.default_rsb)),
            default_advance_width=float(
                data.get("defaultAdvanceWidth", defaults.default_advance_width)
            ),
            space_advance_width=float(
                data.get("spaceAdvanceWidth", defaults.space_advance_width)
            ),
            style_name=str(data.get("styleName", defaults.style_name)),
        )
