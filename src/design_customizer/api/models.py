"""Pydantic models for the customizer HTTP API."""

from uuid import UUID

from pydantic import BaseModel, Field

from design_customizer.domain.images import SessionSnapshot
from design_customizer.domain.pricing import PriceQuote


class DimensionsModel(BaseModel):
    """Physical design size in inches."""

    width: float
    height: float


class SessionResponse(BaseModel):
    """Session view returned by every session route."""

    session_id: UUID
    current: str | None
    display_handle: str | None
    image_path: str | None
    cart_image_url: str | None
    auto_process_enabled: bool
    in_flight: str | None
    errors: dict[str, str]
    warnings: list[str]
    dimensions: DimensionsModel
    can_checkout: bool

    @classmethod
    def from_snapshot(
        cls, session_id: UUID, snapshot: SessionSnapshot
    ) -> "SessionResponse":
        """Build the response from a session snapshot."""
        return cls(
            session_id=session_id,
            current=snapshot.current,
            display_handle=snapshot.displayed_handle,
            image_path=(
                f"/sessions/{session_id}/image" if snapshot.displayed_handle else None
            ),
            cart_image_url=snapshot.cart_remote_handle,
            auto_process_enabled=snapshot.auto_process_enabled,
            in_flight=snapshot.in_flight,
            errors={str(op): message for op, message in snapshot.errors.items()},
            warnings=snapshot.warnings,
            dimensions=DimensionsModel(
                width=snapshot.dimensions.width_inches,
                height=snapshot.dimensions.height_inches,
            ),
            can_checkout=snapshot.can_checkout,
        )


class AutoProcessRequest(BaseModel):
    """Toggle for automatic background removal."""

    enabled: bool


class DimensionsRequest(BaseModel):
    """Requested size; a single side or a step keeps the aspect ratio.

    Steps grow or shrink one side by whole inches.
    """

    width: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    width_steps: int | None = None
    height_steps: int | None = None


class CartRequest(BaseModel):
    """Options for adding the current design to the cart."""

    pre_cut: bool = False
    quantity: int = Field(default=1, ge=1)


class PriceResponse(BaseModel):
    """Price estimate for the current design size."""

    area_sq_in: float
    area_price: float
    pre_cut_price: float
    unit_price: float
    discounted_unit_price: float
    total_price: float
    discount: float
    tier_label: str
    quantity: int
    savings: float

    @classmethod
    def from_quote(cls, quote: PriceQuote) -> "PriceResponse":
        """Build the response with amounts rounded to cents."""
        return cls(
            area_sq_in=round(quote.area_sq_in, 2),
            area_price=round(quote.area_price, 2),
            pre_cut_price=round(quote.pre_cut_price, 2),
            unit_price=round(quote.unit_price, 2),
            discounted_unit_price=round(quote.discounted_unit_price, 2),
            total_price=round(quote.total_price, 2),
            discount=quote.discount,
            tier_label=quote.tier_label,
            quantity=quote.quantity,
            savings=round(quote.savings, 2),
        )
