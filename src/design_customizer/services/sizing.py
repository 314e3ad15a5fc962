"""Aspect-locked adjustments of the declared design size."""

from design_customizer.domain.images import Dimensions
from design_customizer.services.dimensions import (
    DIMENSION_MAX,
    DIMENSION_MIN,
    clamp_inches,
)

STEP_INCHES = 1.0


def aspect_ratio(dimensions: Dimensions) -> float:
    """Height over width, or 1 for a degenerate width."""
    if dimensions.width_inches <= 0:
        return 1.0
    return dimensions.height_inches / dimensions.width_inches


def resize_width(dimensions: Dimensions, width: float) -> Dimensions:
    """Set the width and follow with the height at the current aspect ratio."""
    ratio = aspect_ratio(dimensions)
    new_width = min(DIMENSION_MAX, max(DIMENSION_MIN, width))
    new_height = new_width * ratio
    if new_height > DIMENSION_MAX:
        new_height = DIMENSION_MAX
        new_width = new_height / ratio
    elif new_height < DIMENSION_MIN:
        new_height = DIMENSION_MIN
        new_width = new_height / ratio
    return Dimensions(clamp_inches(new_width), clamp_inches(new_height))


def resize_height(dimensions: Dimensions, height: float) -> Dimensions:
    """Set the height and follow with the width at the current aspect ratio."""
    ratio = aspect_ratio(dimensions)
    new_height = min(DIMENSION_MAX, max(DIMENSION_MIN, height))
    new_width = new_height / ratio
    if new_width > DIMENSION_MAX:
        new_width = DIMENSION_MAX
        new_height = new_width * ratio
    elif new_width < DIMENSION_MIN:
        new_width = DIMENSION_MIN
        new_height = new_width * ratio
    return Dimensions(clamp_inches(new_width), clamp_inches(new_height))


def step_width(dimensions: Dimensions, steps: int = 1) -> Dimensions:
    """Grow or shrink the width by whole steps, keeping the aspect ratio."""
    return resize_width(dimensions, dimensions.width_inches + steps * STEP_INCHES)


def step_height(dimensions: Dimensions, steps: int = 1) -> Dimensions:
    """Grow or shrink the height by whole steps, keeping the aspect ratio."""
    return resize_height(dimensions, dimensions.height_inches + steps * STEP_INCHES)
