"""
Query gateway: registry of route queries and their execution.

Usage (example from the HTTP layer):
    from hydro_gateway.gateway import build_queries, run_query

    queries = build_queries(settings)
    rows = await run_query(queries["weir"], pool_manager, {})

`run_query` is the single place where query failures are logged and mapped to
the GatewayError taxonomy; callers never see raw driver exceptions.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import psycopg
from psycopg_pool import PoolTimeout

from hydro_gateway.config import Settings, get_settings
from hydro_gateway.errors import (
    DatabaseUnavailableError,
    GatewayError,
    QueryFailedError,
)
from hydro_gateway.infrastructure.db_factory import PoolManager
from hydro_gateway.queries.abstract import GatewayQuery, QueryParams
from hydro_gateway.queries.aggregates import InfrastructureChartQuery, StationCountQuery
from hydro_gateway.queries.infrastructure import (
    LatitudeQuery,
    PumpStationQuery,
    SluiceGateQuery,
    WaterLevelProvinceQuery,
    WeirQuery,
)
from hydro_gateway.queries.rainfall import RainfallDailyQuery
from hydro_gateway.utils.logging import get_logger
from hydro_gateway.utils.profiler import query_timer

log = get_logger(__name__)

# Errors meaning "could not talk to the database" rather than "the query failed".
_UNAVAILABLE_ERRORS = (psycopg.OperationalError, psycopg.InterfaceError, PoolTimeout)


def _query_factories(settings: Settings) -> Dict[str, Callable[[], GatewayQuery]]:
    """Registry of available route queries, in route declaration order."""
    mode = settings.type_match_mode
    return {
        "infrastruc": lambda: SluiceGateQuery(),
        "waterlevel_province": lambda: WaterLevelProvinceQuery(),
        "weir": lambda: WeirQuery(match_mode=mode),
        "pumpstation": lambda: PumpStationQuery(match_mode=mode),
        "station_count": lambda: StationCountQuery(match_mode=mode),
        "latitude": lambda: LatitudeQuery(settings=settings),
        "rainfall_daily": lambda: RainfallDailyQuery(),
        "infrastructest_chart": lambda: InfrastructureChartQuery(match_mode=mode),
    }


def available_routes(settings: Optional[Settings] = None) -> List[str]:
    """Return the route names the gateway serves, in declaration order."""
    return list(_query_factories(settings or get_settings()))


def build_queries(settings: Optional[Settings] = None) -> Dict[str, GatewayQuery]:
    """Instantiate every registered query with the given settings."""
    return {name: factory() for name, factory in _query_factories(settings or get_settings()).items()}


async def run_query(query: GatewayQuery, pool: PoolManager, params: QueryParams) -> Any:
    """
    Validate input, borrow a pooled connection and execute `query`.

    Raises
    ------
    MissingParameterError
        Required parameters are absent; no connection is borrowed.
    DatabaseUnavailableError
        The pool could not provide a working connection.
    QueryFailedError
        Any other failure while running the query.
    """
    try:
        query.validate(params)
    except GatewayError as exc:
        log.warning("Rejected %s request: %s", query.name, exc.message)
        raise

    try:
        with query_timer(query.name) as stats:
            async with pool.connection() as conn:
                result = await query.execute(conn, params)
    except _UNAVAILABLE_ERRORS as exc:
        log.exception(
            "Error fetching %s data: database unavailable",
            stats.label,
            extra={"route": stats.label, "duration_ms": stats.duration_ms},
        )
        raise DatabaseUnavailableError(query.error_message) from exc
    except Exception as exc:
        log.exception(
            "Error fetching %s data",
            stats.label,
            extra={"route": stats.label, "duration_ms": stats.duration_ms},
        )
        raise QueryFailedError(query.error_message) from exc

    stats.rows = len(result) if isinstance(result, list) else 1
    log.debug(
        "Fetched %s",
        stats.label,
        extra={"route": stats.label, "rows": stats.rows, "duration_ms": stats.duration_ms},
    )
    return result


__all__ = ["available_routes", "build_queries", "run_query"]
