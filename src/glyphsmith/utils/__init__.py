"""Utility functions for glyphsmith.

This module provides utility functions including:

- Logging setup and configuration
- Auto-kerning session statistics
"""

from glyphsmith.utils.logging import (
    KerningRunLogger,
    KerningStats,
    configure_logging,
)

__all__ = [
    "KerningRunLogger",
    "KerningStats",
    "configure_logging",
]
