"""Models for design price estimates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DiscountTier:
    """Volume discount applied to a quantity range."""

    min_quantity: int
    max_quantity: int | None
    discount: float
    label: str

    def matches(self, quantity: int) -> bool:
        """Return true when the quantity falls inside this tier."""
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity


@dataclass(frozen=True)
class PriceQuote:
    """Price breakdown for a sized design line item."""

    area_sq_in: float
    area_price: float
    pre_cut_price: float
    unit_price: float
    discounted_unit_price: float
    total_price: float
    discount: float
    tier_label: str
    quantity: int

    @property
    def savings(self) -> float:
        """Total saved through the volume discount."""
        return (self.unit_price - self.discounted_unit_price) * self.quantity
