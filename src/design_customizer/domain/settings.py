"""Models for storefront customizer feature flags."""

from pydantic import BaseModel, Field


class PredefinedSize(BaseModel):
    """Preset width/height offered as a quick size choice."""

    width: float = Field(gt=0)
    height: float = Field(gt=0)


class CustomizerSettings(BaseModel):
    """Feature flags controlling which customizer controls are shown."""

    enable_size: bool = True
    enable_precut: bool = True
    enable_quantity: bool = True
    enable_placement: bool = True
    predefined_sizes: list[PredefinedSize] = Field(default_factory=list)
