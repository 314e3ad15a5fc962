"""Live price estimates for sized designs."""

from dataclasses import dataclass

from design_customizer.domain.pricing import DiscountTier, PriceQuote

PRICE_PER_SQ_IN = 0.0416
PRE_CUT_FEE = 0.24

DISCOUNT_TIERS: tuple[DiscountTier, ...] = (
    DiscountTier(1, 14, 0.0, "1-14 pcs"),
    DiscountTier(15, 49, 0.2, "15-49 pcs (20% off)"),
    DiscountTier(50, 99, 0.3, "50-99 pcs (30% off)"),
    DiscountTier(100, 249, 0.4, "100-249 pcs (40% off)"),
    DiscountTier(250, None, 0.5, "250+ pcs (50% off)"),
)


@dataclass
class PricingService:
    """Computes unit and total prices with volume discounts."""

    base_price: float = 0.0
    price_per_sq_in: float = PRICE_PER_SQ_IN
    pre_cut_fee: float = PRE_CUT_FEE
    tiers: tuple[DiscountTier, ...] = DISCOUNT_TIERS

    def quote(
        self, width: float, height: float, pre_cut: bool, quantity: int
    ) -> PriceQuote:
        """Return the price breakdown for a design line item."""
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        area = width * height
        area_price = area * self.price_per_sq_in
        pre_cut_price = self.pre_cut_fee if pre_cut else 0.0
        unit_price = self.base_price + area_price + pre_cut_price
        tier = self.tier_for(quantity)
        discounted = unit_price * (1 - tier.discount)
        return PriceQuote(
            area_sq_in=area,
            area_price=area_price,
            pre_cut_price=pre_cut_price,
            unit_price=unit_price,
            discounted_unit_price=discounted,
            total_price=discounted * quantity,
            discount=tier.discount,
            tier_label=tier.label,
            quantity=quantity,
        )

    def tier_for(self, quantity: int) -> DiscountTier:
        """Return the discount tier for a quantity."""
        for tier in self.tiers:
            if tier.matches(quantity):
                return tier
        return self.tiers[0]
