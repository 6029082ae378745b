"""Configuration management for glyphsmith.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Flattening and slicing tolerances
- FitConfig: Preview fitting settings
- AutoKernConfig: Automatic kerning settings
- PositioningConfig: Default mark attachment settings
- LoggingConfig: Logging settings
- GlyphsmithSettings: Main application settings
"""

from glyphsmith.config.settings import (
    AutoKernConfig,
    FitConfig,
    GeometryConfig,
    GlyphsmithSettings,
    LoggingConfig,
    PositioningConfig,
    get_default_settings,
)

__all__ = [
    "AutoKernConfig",
    "FitConfig",
    "GeometryConfig",
    "GlyphsmithSettings",
    "LoggingConfig",
    "PositioningConfig",
    "get_default_settings",
]
