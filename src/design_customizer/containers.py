"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from design_customizer.adapters.cart_client import HttpxCartClient
from design_customizer.adapters.memory_blob_store import InMemoryBlobStore
from design_customizer.adapters.pillow_dimension_reader import PillowDimensionReader
from design_customizer.adapters.processing_client import HttpxProcessingClient
from design_customizer.adapters.settings_client import HttpxSettingsClient
from design_customizer.config import Settings
from design_customizer.domain.images import ImageSessionState
from design_customizer.services.artifacts import ArtifactStore
from design_customizer.services.cache import InMemoryCache
from design_customizer.services.cart import CartService
from design_customizer.services.customizer_settings import CustomizerSettingsService
from design_customizer.services.dimensions import DimensionReader
from design_customizer.services.handles import BlobStore, HandleLifecycle
from design_customizer.services.pricing import PricingService
from design_customizer.services.processing import RemoteProcessingService
from design_customizer.services.registry import SessionRegistry
from design_customizer.services.sessions import ImageSessionController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    blob_store: BlobStore
    session_registry: SessionRegistry
    pricing_service: PricingService
    cart_service: CartService
    customizer_settings_service: CustomizerSettingsService
    close_resources: Callable[[], Awaitable[None]]


def session_factory(
    blob_store: BlobStore,
    processing_service: RemoteProcessingService,
    dimension_reader: DimensionReader,
    auto_process_default: bool = True,
) -> Callable[[], ImageSessionController]:
    """Build a factory for fresh, empty session controllers."""

    def create_session() -> ImageSessionController:
        return ImageSessionController(
            artifacts=ArtifactStore(HandleLifecycle(blob_store)),
            processing=processing_service,
            dimension_reader=dimension_reader,
            state=ImageSessionState(auto_process_enabled=auto_process_default),
        )

    return create_session


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    blob_store = InMemoryBlobStore()
    processing_client = HttpxProcessingClient.create(
        resolved_settings.processing_api_base,
        timeout=resolved_settings.processing_timeout_seconds,
    )
    session_registry = SessionRegistry(
        session_factory(
            blob_store=blob_store,
            processing_service=RemoteProcessingService(processing_client),
            dimension_reader=PillowDimensionReader(blob_store),
            auto_process_default=resolved_settings.auto_process_default,
        ),
        ttl_seconds=resolved_settings.session_ttl_seconds,
    )
    cart_client = HttpxCartClient.create(
        resolved_settings.storefront_base_url,
        timeout=resolved_settings.cart_timeout_seconds,
    )
    settings_client = (
        HttpxSettingsClient.create(resolved_settings.settings_url)
        if resolved_settings.settings_url
        else None
    )
    customizer_settings_service = CustomizerSettingsService(
        client=settings_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.settings_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        session_registry.close_all()
        await processing_client.close()
        await cart_client.close()
        if settings_client is not None:
            await settings_client.close()

    return AppContainer(
        settings=resolved_settings,
        blob_store=blob_store,
        session_registry=session_registry,
        pricing_service=PricingService(base_price=resolved_settings.base_price),
        cart_service=CartService(cart_client, resolved_settings.variant_id),
        customizer_settings_service=customizer_settings_service,
        close_resources=close_resources,
    )
