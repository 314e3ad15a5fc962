"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from design_customizer.api.sessions import router as sessions_router
from design_customizer.app_logging import configure_logging
from design_customizer.containers import AppContainer
from design_customizer.domain.settings import CustomizerSettings


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Customizer API starting",
            extra={"environment": app.state.container.settings.environment},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(sessions_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/settings")
    async def customizer_settings(request: Request) -> CustomizerSettings:
        """Feature flags for the storefront customizer."""
        state_container: AppContainer = request.app.state.container
        return await state_container.customizer_settings_service.get_settings()

    return app
