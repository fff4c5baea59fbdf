"""
Hydro Query Gateway - read-only HTTP API over hydrological infrastructure data.

This package exposes fixed, parameterized PostgreSQL queries as JSON endpoints:

- Infrastructure rows by type (sluice gates, weirs, pump stations)
- Records inside a latitude/longitude bounding box
- Per-type counts and per-record chart aggregates
- Province water levels and daily rainfall by date range

Every route runs one predetermined query on a shared async connection pool and
answers either the raw rows or an `{"error": ...}` object.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from hydro_gateway.config import MatchMode, Settings, get_settings
from hydro_gateway.errors import (
    DatabaseUnavailableError,
    GatewayError,
    MissingParameterError,
    QueryFailedError,
)
from hydro_gateway.gateway import available_routes, build_queries, run_query
from hydro_gateway.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "MatchMode",
    "Settings",
    "get_settings",
    # Errors
    "DatabaseUnavailableError",
    "GatewayError",
    "MissingParameterError",
    "QueryFailedError",
    # Gateway
    "available_routes",
    "build_queries",
    "run_query",
    # Logging
    "configure_logging",
    "get_logger",
]
