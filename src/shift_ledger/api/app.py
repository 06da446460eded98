"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from shift_ledger.api.errors import register_exception_handlers
from shift_ledger.api.worker import router as worker_router
from shift_ledger.app_logging import configure_logging
from shift_ledger.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Shift ledger started: environment=%s timezone=%s",
            container.settings.environment,
            container.settings.business_timezone,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    register_exception_handlers(app)
    app.include_router(worker_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/services")
    async def list_services(request: Request) -> dict[str, object]:
        """Return the service catalog with current prices."""
        state_container: AppContainer = request.app.state.container
        entries = state_container.pricing_resolver.list_services()
        return {
            "services": [
                {"name": entry.name, "price": str(entry.price)} for entry in entries
            ]
        }

    return app
