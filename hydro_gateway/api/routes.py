"""
HTTP routes of the Hydro Query Gateway.

Each route delegates to its registered query through `run_query`; failures
propagate as GatewayError and are rendered by the handler installed in
`hydro_gateway.api.app`.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from hydro_gateway.domain.models import ChartRow, ErrorResponse, RainfallReading, StationCount
from hydro_gateway.errors import QueryFailedError
from hydro_gateway.gateway import run_query
from hydro_gateway.infrastructure.db_factory import PoolManager
from hydro_gateway.queries.abstract import QueryParams
from hydro_gateway.utils.logging import get_logger

log = get_logger(__name__)

router = APIRouter(tags=["Hydro"])

_ERRORS = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def get_pool(request: Request) -> PoolManager:
    """Dependency returning the PoolManager owned by the application."""
    return request.app.state.pool_manager


def _encode_float(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _encode_decimal(value: Decimal) -> Optional[Any]:
    if not value.is_finite():
        return None
    return int(value) if value.as_tuple().exponent >= 0 else float(value)


# NaN and infinity (valid in numeric and double precision columns) become null.
_ROW_ENCODERS = {float: _encode_float, Decimal: _encode_decimal}


async def _serve(request: Request, name: str, pool: PoolManager, params: QueryParams) -> JSONResponse:
    query = request.app.state.queries[name]
    result: Any = await run_query(query, pool, params)
    try:
        return JSONResponse(content=jsonable_encoder(result, custom_encoder=_ROW_ENCODERS))
    except (TypeError, ValueError) as exc:
        log.exception("Error encoding %s data", query.name)
        raise QueryFailedError(query.error_message) from exc


@router.get("/infrastruc", responses=_ERRORS)
async def get_infrastruc(request: Request, pool: PoolManager = Depends(get_pool)):
    """Sluice gates."""
    return await _serve(request, "infrastruc", pool, {})


@router.get("/waterlevel_province", responses=_ERRORS)
async def get_waterlevel_province(request: Request, pool: PoolManager = Depends(get_pool)):
    """Province water levels, unfiltered."""
    return await _serve(request, "waterlevel_province", pool, {})


@router.get("/weir", responses=_ERRORS)
async def get_weir(request: Request, pool: PoolManager = Depends(get_pool)):
    """Weirs."""
    return await _serve(request, "weir", pool, {})


@router.get("/pumpstation", responses=_ERRORS)
async def get_pumpstation(request: Request, pool: PoolManager = Depends(get_pool)):
    """Pump stations and pump houses."""
    return await _serve(request, "pumpstation", pool, {})


@router.get("/station_count", response_model=StationCount, responses=_ERRORS)
async def get_station_count(request: Request, pool: PoolManager = Depends(get_pool)):
    """Record counts per infrastructure kind."""
    return await _serve(request, "station_count", pool, {})


@router.get("/latitude", responses=_ERRORS)
async def get_latitude(request: Request, pool: PoolManager = Depends(get_pool)):
    """Records inside the configured bounding box."""
    return await _serve(request, "latitude", pool, {})


@router.get("/rainfall_daily", response_model=List[RainfallReading], responses=_ERRORS)
async def get_rainfall_daily(
    request: Request,
    start_date: Optional[str] = Query(None, alias="startDate", description="Range start, e.g. 2024-01-01"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Range end, e.g. 2024-01-31"),
    pool: PoolManager = Depends(get_pool),
):
    """Daily rainfall in a timestamp range, oldest first."""
    return await _serve(
        request, "rainfall_daily", pool, {"startDate": start_date, "endDate": end_date}
    )


@router.get("/infrastructest_chart", response_model=List[ChartRow], responses=_ERRORS)
async def get_infrastructest_chart(request: Request, pool: PoolManager = Depends(get_pool)):
    """Per-id type counts for the dashboard chart."""
    return await _serve(request, "infrastructest_chart", pool, {})


@router.get("/health", tags=["Health"])
async def health_check(request: Request, pool: PoolManager = Depends(get_pool)):
    settings = request.app.state.settings
    if await pool.ping():
        return {"status": "ok", "database": "ok"}
    status_code = 200 if settings.legacy_error_status else 503
    return JSONResponse(
        status_code=status_code, content={"status": "degraded", "database": "unavailable"}
    )


__all__ = ["router", "get_pool"]
