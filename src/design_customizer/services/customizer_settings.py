"""Feature flags for the storefront customizer."""

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from design_customizer.domain.settings import CustomizerSettings, PredefinedSize
from design_customizer.services.cache import Cache

_CACHE_KEY = "customizer:settings"

_logger = logging.getLogger(__name__)


class SettingsClient(Protocol):
    """Interface for fetching admin-configured customizer settings."""

    async def fetch_settings(self) -> dict[str, object]:
        """Return the raw settings payload."""


@dataclass
class CustomizerSettingsService:
    """Loads feature flags, falling back to defaults on any failure."""

    client: SettingsClient | None
    cache: Cache
    ttl_seconds: int = 300

    async def get_settings(self) -> CustomizerSettings:
        """Return cached settings, fetching them when needed."""
        if self.client is None:
            return CustomizerSettings()
        cached = self.cache.get(_CACHE_KEY)
        if isinstance(cached, CustomizerSettings):
            return cached
        try:
            payload = await self.client.fetch_settings()
        except Exception:
            _logger.warning("Failed to fetch customizer settings", exc_info=True)
            return CustomizerSettings()
        settings = parse_settings(payload)
        self.cache.set(_CACHE_KEY, settings, ttl_seconds=self.ttl_seconds)
        return settings


def parse_settings(payload: object) -> CustomizerSettings:
    """Parse an admin payload; flags are on only when literally true."""
    if not isinstance(payload, dict):
        return CustomizerSettings()
    return CustomizerSettings(
        enable_size=payload.get("enableSize") is True,
        enable_precut=payload.get("enablePrecut") is True,
        enable_quantity=payload.get("enableQuantity") is True,
        enable_placement=payload.get("enablePlacement") is True,
        predefined_sizes=_parse_sizes(payload.get("predefinedSizes")),
    )


def _parse_sizes(raw: object) -> list[PredefinedSize]:
    if not isinstance(raw, list):
        return []
    sizes: list[PredefinedSize] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        width = _to_number(entry.get("width"))
        height = _to_number(entry.get("height"))
        if width is None or height is None or width <= 0 or height <= 0:
            continue
        sizes.append(PredefinedSize(width=width, height=height))
    return sizes


def _to_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None
