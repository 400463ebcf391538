"""FastAPI application for the Delivery Service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.errors import register_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from services.delivery_service.realtime.notifier import RealtimeNotifier
from services.delivery_service.routers import (
    deliveries_router,
    products_router,
    realtime_router,
    stores_router,
    tracking_router,
    vendors_router,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Delivery service starting")
    yield
    await app.state.notifier.close()
    logger.info("Delivery service stopped")


def create_app() -> FastAPI:
    """Create and configure the Delivery Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Delivery Service",
        version="0.1.0",
        description="Vendor-to-store delivery matching, tracking and live updates.",
        lifespan=lifespan,
    )
    app.state.notifier = RealtimeNotifier(queue_size=settings.NOTIFIER_QUEUE_SIZE)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Structured logging + request tracing
    add_observability_middleware(app)

    # Domain errors -> {"detail", "kind"} responses
    register_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "delivery"}

    # WebSocket first so /deliveries/ws never reaches the /{delivery_id} routes.
    app.include_router(realtime_router)
    app.include_router(tracking_router)
    app.include_router(deliveries_router)
    app.include_router(vendors_router)
    app.include_router(stores_router)
    app.include_router(products_router)

    return app


app = create_app()
