"""Writer for kerning suggestion files."""

import json
from collections.abc import Mapping
from pathlib import Path


def write_suggestions(path: Path, suggestions: Mapping[str, float]) -> None:
    """Write a ``{"left-right": value}`` kerning map as JSON.

    Keys are sorted so repeated runs produce identical files. Parent
    directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {key: suggestions[key] for key in sorted(suggestions)}
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
