"""FastAPI host application.

Serves the health endpoint and carries the NiceGUI pages once they are
mounted. Closes the shared HTTP client on shutdown.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from albert_chat import __version__
from albert_chat.services import ChatServices

logger = logging.getLogger(__name__)


def create_app(services: ChatServices) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        services: Configured service container shared with the UI.

    Returns:
        Configured FastAPI application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application startup and shutdown lifecycle."""
        logger.info("Starting Albert Chat...")
        yield
        logger.info("Shutting down Albert Chat...")
        await services.aclose()

    application = FastAPI(
        title="Albert Chat",
        description="Authenticated chat client for a webhook-based AI assistant.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.services = services

    application.add_middleware(
        CORSMiddleware,
        allow_origins=[services.config.site_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/health")
    async def health_check() -> dict[str, str | int]:
        """Check service health status."""
        return {
            "status": "healthy",
            "service": "albert-chat",
            "store_failures": sum(services.monitor.failures.values()),
        }

    return application
