"""Project snapshot builders shared by the I/O, pipeline and CLI tests."""

import json
from pathlib import Path
from typing import Any


def rect_path(x0: float, y0: float, x1: float, y1: float, path_id: str = "r") -> dict[str, Any]:
    corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
    return {
        "id": path_id,
        "type": "outline",
        "points": [],
        "segmentGroups": [[{"point": {"x": x, "y": y}} for x, y in corners]],
    }


def snapshot_data() -> dict[str, Any]:
    """A small Latin project: stems, a tee, a round, an accent and constructions."""
    return {
        "characters": [
            {"name": "A", "unicode": 65},
            {"name": "V", "unicode": 86},
            {"name": "T", "unicode": 84},
            {"name": "o", "unicode": 111},
            {"name": "e", "unicode": 101},
            {"name": "acute", "unicode": 769, "glyphClass": "mark"},
            {"name": "eacute", "unicode": 233, "position": ["e", "acute"]},
            {"name": "e.alt", "unicode": 57344, "link": ["e"]},
            {"name": "b", "unicode": 98},
            {"name": "space", "unicode": 32},
        ],
        "glyphs": {
            "65": {"paths": [rect_path(0, 300, 100, 700)]},
            "86": {"paths": [rect_path(0, 300, 100, 700)]},
            "84": {"paths": [rect_path(0, 300, 300, 340, "bar"), rect_path(130, 300, 170, 700, "stem")]},
            "111": {"paths": [rect_path(0, 500, 100, 700)]},
            "101": {"paths": [rect_path(0, 500, 200, 700, "e")]},
            "769": {"paths": [rect_path(0, 0, 20, 40, "acute")]},
        },
        "kerning": {"65-86": -30},
        "markPositioning": {},
        "metrics": {"unitsPerEm": 1000, "topLineY": 300, "baseLineY": 700},
        "settings": {"strokeThickness": 20},
        "groups": {"round": ["o"]},
        "positioning": [{"base": ["e"], "mark": ["acute"]}],
        "markAttachment": {"e": {"acute": ["topCenter", "bottomCenter", 0, -30]}},
        "recommendedKerning": [["A", "V"], ["T", "$round", 20]],
    }


def write_snapshot(path: Path, data: dict[str, Any] | None = None) -> Path:
    path.write_text(json.dumps(data if data is not None else snapshot_data()), encoding="utf-8")
    return path
