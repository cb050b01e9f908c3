import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import (
    admin_orders_router,
    estimate_router,
    handshake_router,
    orders_router,
)
from config import settings
from repositories.order_repository import InMemoryOrderRepository
from schemas import HealthResponse
from services.delivery_fees import load_tiers
from services.handshake_store import HandshakeStateStore
from services.handshake_sweeper import HandshakeSweepWorker
from services.orders_service import OrdersService

logger = logging.getLogger("food-orders")


def create_app(
    store: Optional[HandshakeStateStore] = None,
    orders_service: Optional[OrdersService] = None,
    admin_api_token: Optional[str] = None,
    payment_webhook_token: Optional[str] = None,
) -> FastAPI:
    if store is None:
        store = HandshakeStateStore(ttl_ms=settings.oauth_state_ttl_ms)
    if orders_service is None:
        orders_service = OrdersService(
            store=store,
            repository=InMemoryOrderRepository(),
            tiers=load_tiers(settings.delivery_tiers_json),
        )
    sweep_worker = HandshakeSweepWorker(
        store, interval_seconds=settings.handshake_sweep_interval_seconds
    )

    app = FastAPI(title="Food Orders API")
    app.state.handshake_store = store
    app.state.orders_service = orders_service
    app.state.sweep_worker = sweep_worker
    app.state.admin_api_token = admin_api_token or settings.admin_api_token
    app.state.payment_webhook_token = payment_webhook_token or settings.payment_webhook_token

    if settings.allowed_origins == ["*"]:
        allow_origins = ["*"]
    else:
        allow_origins = settings.allowed_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(handshake_router)
    app.include_router(orders_router)
    app.include_router(admin_orders_router)
    app.include_router(estimate_router)

    @app.on_event("startup")
    async def _on_startup() -> None:
        await sweep_worker.start()
        if allow_origins == ["*"]:
            logger.warning(
                "CORS is set to allow all origins with credentials; set ALLOWED_ORIGINS to explicit values outside local dev."
            )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        await sweep_worker.stop()

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(ok=True, handshake_sweep=sweep_worker.get_status())

    return app


app = create_app()
