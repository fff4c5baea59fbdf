"""
FastAPI application factory for the Hydro Query Gateway.

Usage:
    uvicorn --factory hydro_gateway.api.app:create_app

or through the CLI (`hydro-gateway serve`), which probes the database first.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import hydro_gateway
from hydro_gateway.api.routes import router
from hydro_gateway.config import Settings, get_settings
from hydro_gateway.errors import GatewayError
from hydro_gateway.gateway import build_queries
from hydro_gateway.infrastructure.db_factory import PoolManager, get_pool_manager
from hydro_gateway.utils.logging import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager: opens the pool on startup, drains it on shutdown.
    """
    settings: Settings = app.state.settings
    pool: PoolManager = app.state.pool_manager
    log.info(
        "Starting gateway",
        extra={"env": settings.app_env, "match_mode": settings.type_match_mode.value},
    )
    await pool.open()
    try:
        yield
    finally:
        await pool.close()


def _error_status(settings: Settings, exc: GatewayError) -> int:
    return 200 if settings.legacy_error_status else exc.status_code


def create_app(
    settings: Optional[Settings] = None,
    pool_manager: Optional[PoolManager] = None,
) -> FastAPI:
    """
    Build the application with its settings, pool and query catalog attached.

    Parameters
    ----------
    settings : Settings, optional
        Defaults to the cached environment settings.
    pool_manager : PoolManager, optional
        Defaults to the process-wide manager, or a new one when explicit
        `settings` are given; tests pass a fake.
    """
    if pool_manager is None:
        pool_manager = get_pool_manager() if settings is None else PoolManager(settings=settings)
    settings = settings or get_settings()

    app = FastAPI(
        title="Hydro Query Gateway",
        version=hydro_gateway.__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pool_manager = pool_manager
    app.state.queries = build_queries(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        return JSONResponse(status_code=_error_status(settings, exc), content=exc.to_body())

    app.include_router(router)
    return app


__all__ = ["create_app", "lifespan"]
