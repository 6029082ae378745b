"""Configuration settings for Glyphsmith."""

from pathlib import Path

from pydantic import BaseModel, Field


class GeometryConfig(BaseModel):
    """Configuration for geometry operations with scale-relative tolerances.

    All tolerance values are specified at a reference UPM of 1000 and will be
    scaled proportionally for fonts with different UPM values.
    """

    reference_upm: int = Field(
        default=1000,
        description="Reference UPM for tolerance values",
    )
    bezier_flatten_tolerance: float = Field(
        default=0.5,
        ge=0.05,
        le=10.0,
        description="Tolerance for Bezier curve flattening (at reference UPM)",
    )
    pen_curve_density: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Samples per smoothed pen-stroke span when flattening",
    )
    slice_min_cut_length: float = Field(
        default=2.0,
        ge=0.0,
        le=100.0,
        description="Cuts shorter than this are ignored (at reference UPM)",
    )
    intersection_epsilon: float = Field(
        default=0.001,
        ge=0.0,
        le=1.0,
        description="Hits closer than this to the previous hit are merged (at reference UPM)",
    )

    def scale_tolerance(self, base_value: float, upm: int) -> float:
        """Scale a tolerance value for the given UPM.

        Args:
            base_value: The tolerance value at reference UPM
            upm: The actual UPM of the font

        Returns:
            Scaled tolerance value
        """
        return base_value * (upm / self.reference_upm)

    def get_bezier_tolerance(self, upm: int) -> float:
        """Get Bezier flattening tolerance scaled for UPM."""
        return self.scale_tolerance(self.bezier_flatten_tolerance, upm)

    def get_min_cut_length(self, upm: int) -> float:
        """Get minimum slice cut length scaled for UPM."""
        return self.scale_tolerance(self.slice_min_cut_length, upm)

    def get_intersection_epsilon(self, upm: int) -> float:
        """Get intersection merge epsilon scaled for UPM."""
        return self.scale_tolerance(self.intersection_epsilon, upm)


class FitConfig(BaseModel):
    """Configuration for fitting resolved paths into a preview frame."""

    canvas_margin: float = Field(
        default=40.0,
        ge=0.0,
        description="Margin kept free on each side of the canvas",
    )
    max_scale: float = Field(
        default=4.0,
        gt=0.0,
        le=100.0,
        description="Upper bound on the fitted scale so tiny marks are not blown up",
    )
    include_metric_band: bool = Field(
        default=True,
        description="Extend the ink box to the top line / baseline band when metrics are given",
    )


class AutoKernConfig(BaseModel):
    """Configuration for automatic kerning."""

    scanline_count: int = Field(
        default=40,
        ge=2,
        le=1000,
        description="Number of horizontal scanlines between the top line and the baseline",
    )
    minimum_visual_gap: float = Field(
        default=100.0,
        ge=0.0,
        description="Minimum horizontal ink distance kept at every scanline",
    )
    max_negative_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Largest negative kerning as a fraction of UPM",
    )
    max_positive_kerning: float = Field(
        default=200.0,
        ge=0.0,
        description="Largest positive kerning in design units",
    )
    debounce_seconds: float = Field(
        default=2.0,
        ge=0.0,
        le=60.0,
        description="Quiet period after the last enqueue before a batch is dispatched",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=32,
        description="Worker processes used by the default executor",
    )
    check_zones: bool = Field(
        default=True,
        description="Also check ascender and descender zones for hard collisions",
    )


class PositioningConfig(BaseModel):
    """Configuration for default mark attachment."""

    default_mark_clearance: float = Field(
        default=20.0,
        ge=0.0,
        le=500.0,
        description="Vertical gap between a base and a mark placed with the fallback anchor",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class GlyphsmithSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    fit: FitConfig = Field(default_factory=FitConfig)
    autokern: AutoKernConfig = Field(default_factory=AutoKernConfig)
    positioning: PositioningConfig = Field(default_factory=PositioningConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> GlyphsmithSettings:
    """Get default application settings."""
    return GlyphsmithSettings()
