"""Domain models for cart submissions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineItem:
    """A sized custom design ready for the storefront cart."""

    variant_id: str
    quantity: int
    image_url: str
    width_inches: float
    height_inches: float
    pre_cut: bool

    def to_payload(self) -> dict[str, object]:
        """Build the storefront `cart/add.js` request body."""
        return {
            "id": self.variant_id,
            "quantity": self.quantity,
            "properties": {
                "_Area_x": f"{self.width_inches:.2f}",
                "_Area_y": f"{self.height_inches:.2f}",
                "_PreCut": "Yes" if self.pre_cut else "No",
                "CustomImage": self.image_url,
            },
        }
