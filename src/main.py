"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.auc_bidding.api.router import router as bids_router
from src.auc_bidding.engine.engine import BiddingEngine
from src.auc_common.errors import AppError
from src.auc_common.redis_client import build_redis, close_redis
from src.auc_common.response import app_error_response
from src.auc_common.store import LedgerStore
from src.auc_gateway.api.router import router as auth_router
from src.auc_gateway.middleware.request_log import RequestLogMiddleware, get_request_id
from src.auc_listing.api.router import me_router
from src.auc_listing.api.router import router as listing_router
from src.auc_settlement.api.router import router as settlement_router
from src.auc_settlement.application.sweeper import SettlementSweeper
from src.auc_settlement.infrastructure.lease import SweepLease

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build store, engine and sweeper; verify DB. Shutdown: stop and dispose."""
    # Startup
    store = LedgerStore.from_settings(settings)
    await store.ping()
    redis_client = build_redis(settings)
    lease = (
        SweepLease(redis_client, ttl_seconds=settings.SWEEP_LEASE_TTL_SECONDS)
        if settings.SWEEP_LEASE_ENABLED
        else None
    )

    app.state.store = store
    app.state.bidding_engine = BiddingEngine(store)
    app.state.sweeper = SettlementSweeper(
        store,
        interval_seconds=settings.SWEEP_INTERVAL_SECONDS,
        lease=lease,
    )
    if settings.SWEEP_ENABLED:
        app.state.sweeper.start()
    else:
        logger.info("Settlement sweeper disabled; use POST /api/v1/admin/settlement/sweep")

    yield

    # Shutdown
    await app.state.sweeper.stop()
    await store.dispose()
    await close_redis(redis_client)


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = app_error_response(exc, get_request_id(request))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(listing_router, prefix="/api/v1")
app.include_router(me_router, prefix="/api/v1")
app.include_router(bids_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
