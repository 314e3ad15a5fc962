"""Cart submission for customized designs."""

import logging
from dataclasses import dataclass
from typing import Protocol

from design_customizer.domain.cart import CartLineItem
from design_customizer.domain.images import Dimensions
from design_customizer.errors import InvalidArtifactError
from design_customizer.services.projection import LOCAL_HANDLE_PREFIX

_logger = logging.getLogger(__name__)


class CartClient(Protocol):
    """Interface for the storefront cart endpoint."""

    async def add_line_item(self, payload: dict[str, object]) -> dict[str, object]:
        """Add a line item and return the storefront response."""


@dataclass
class CartService:
    """Validates and submits design line items."""

    client: CartClient
    variant_id: str | None

    def build_line_item(
        self,
        image_url: str | None,
        dimensions: Dimensions,
        pre_cut: bool,
        quantity: int,
    ) -> CartLineItem:
        """Build a line item or raise if the design cannot be checked out."""
        if not image_url or image_url.startswith(LOCAL_HANDLE_PREFIX):
            raise InvalidArtifactError("No processed image is ready for checkout")
        if dimensions.width_inches <= 0 or dimensions.height_inches <= 0:
            raise ValueError("Design dimensions must be positive")
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        if not self.variant_id:
            raise ValueError("No product variant configured")
        return CartLineItem(
            variant_id=self.variant_id,
            quantity=quantity,
            image_url=image_url,
            width_inches=dimensions.width_inches,
            height_inches=dimensions.height_inches,
            pre_cut=pre_cut,
        )

    async def add_to_cart(
        self,
        image_url: str | None,
        dimensions: Dimensions,
        pre_cut: bool,
        quantity: int,
    ) -> dict[str, object]:
        """Submit the design to the storefront cart."""
        item = self.build_line_item(image_url, dimensions, pre_cut, quantity)
        response = await self.client.add_line_item(item.to_payload())
        _logger.info(
            "Added design to cart",
            extra={"variant_id": item.variant_id, "quantity": item.quantity},
        )
        return response
