"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from routerscope.core.coordinator import ConnectionLifecycleCoordinator
from routerscope.utils.logging import get_logger

logger = get_logger(__name__)


def get_coordinator(request: Request) -> ConnectionLifecycleCoordinator:
    """FastAPI dependency returning the coordinator bound to the app."""
    return request.app.state.coordinator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("routerscope_api_starting")
    yield
    # Close any sessions still open
    coordinator: ConnectionLifecycleCoordinator = app.state.coordinator
    for target in coordinator.targets:
        if not target.is_connected:
            continue
        try:
            coordinator.device_api.disconnect(target)
        except Exception:
            logger.warning("target_close_error", target_id=target.id)
    logger.info("routerscope_api_stopped")


def create_app(coordinator: ConnectionLifecycleCoordinator) -> FastAPI:
    """Create the FastAPI application around one coordinator.

    Args:
        coordinator: The coordinator every route operates on.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="RouterScope API",
        description="Router registry and connection lifecycle control",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.coordinator = coordinator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from routerscope.api.routes import actions, targets
    app.include_router(targets.router, prefix="/api")
    app.include_router(actions.router, prefix="/api")

    return app
