"""Client for the admin-configured customizer settings."""

from dataclasses import dataclass

import httpx

from design_customizer.services.customizer_settings import SettingsClient


@dataclass
class HttpxSettingsClient(SettingsClient):
    """Fetches customizer settings JSON with httpx."""

    settings_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, settings_url: str) -> "HttpxSettingsClient":
        """Create a settings client with a managed httpx session."""
        return cls(settings_url=settings_url, http_client=httpx.AsyncClient())

    async def fetch_settings(self) -> dict[str, object]:
        """Fetch the raw settings payload."""
        response = await self.http_client.get(self.settings_url, timeout=10)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
