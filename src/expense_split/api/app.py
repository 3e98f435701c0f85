"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from expense_split.api.auth import router as auth_router
from expense_split.api.errors import register_error_handlers
from expense_split.api.sessions import router as sessions_router
from expense_split.app_logging import configure_logging
from expense_split.containers import AppContainer

_SHUTDOWN_TIMEOUT_SECONDS = 10


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        cleanup_task = None
        if state_container.settings.cleanup_enabled:
            cleanup_task = asyncio.create_task(
                state_container.cleanup_scheduler.start()
            )
        yield
        state_container.cleanup_scheduler.stop()
        if cleanup_task:
            try:
                await asyncio.wait_for(cleanup_task, timeout=_SHUTDOWN_TIMEOUT_SECONDS)
            except TimeoutError:
                logger.warning("Cleanup task did not complete in time")
        await state_container.close_resources()

    app = FastAPI(title="Expense Split", lifespan=lifespan)
    app.state.container = container

    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(sessions_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
