"""Storefront cart API client."""

from dataclasses import dataclass

import httpx

from design_customizer.errors import CartSubmissionError
from design_customizer.services.cart import CartClient


@dataclass
class HttpxCartClient(CartClient):
    """Cart client calling the storefront `cart/add.js` endpoint."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(cls, base_url: str, timeout: float = 15) -> "HttpxCartClient":
        """Create a cart client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def add_line_item(self, payload: dict[str, object]) -> dict[str, object]:
        """Add a line item to the cart."""
        url = f"{self.base_url.rstrip('/')}/cart/add.js"
        try:
            response = await self.http_client.post(
                url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise CartSubmissionError("Failed to add to cart") from exc
        if response.is_error:
            raise CartSubmissionError(_error_description(response))
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_description(response: httpx.Response) -> str:
    """Return the storefront's error description, if it sent one."""
    try:
        data = response.json()
    except ValueError:
        return "Failed to add to cart"
    if isinstance(data, dict) and data.get("description"):
        return str(data["description"])
    return "Failed to add to cart"
