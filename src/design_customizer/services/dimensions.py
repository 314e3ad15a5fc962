"""Physical size derivation from image pixels."""

from typing import Protocol

from design_customizer.domain.images import Dimensions, DisplayHandle

DPI = 300
DIMENSION_MIN = 0.5
DIMENSION_MAX = 22.5


class DimensionReader(Protocol):
    """Interface for reading the physical size of a displayed image."""

    async def read_dimensions(self, handle: DisplayHandle) -> Dimensions:
        """Return the clamped size in inches or raise `DimensionReadError`."""


def clamp_inches(value: float) -> float:
    """Round to two decimals and clamp to the printable inch range."""
    return min(DIMENSION_MAX, max(DIMENSION_MIN, round(value, 2)))


def pixels_to_dimensions(width_px: int, height_px: int, dpi: int = DPI) -> Dimensions:
    """Convert pixel size to clamped inches at a fixed pixel density."""
    return Dimensions(
        width_inches=clamp_inches(width_px / dpi),
        height_inches=clamp_inches(height_px / dpi),
    )
