"""
Query catalog for the Hydro Query Gateway.

This module re-exports the abstract interfaces and the concrete route queries
so downstream code can import from `hydro_gateway.queries` directly.
"""

from hydro_gateway.queries.abstract import (
    AbstractGatewayQuery,
    GatewayQuery,
    QueryParams,
)
from hydro_gateway.queries.aggregates import InfrastructureChartQuery, StationCountQuery
from hydro_gateway.queries.infrastructure import (
    LatitudeQuery,
    PumpStationQuery,
    SluiceGateQuery,
    WaterLevelProvinceQuery,
    WeirQuery,
)
from hydro_gateway.queries.rainfall import RainfallDailyQuery

__all__ = [
    # Abstracts
    "AbstractGatewayQuery",
    "GatewayQuery",
    "QueryParams",
    # Concrete queries
    "InfrastructureChartQuery",
    "LatitudeQuery",
    "PumpStationQuery",
    "RainfallDailyQuery",
    "SluiceGateQuery",
    "StationCountQuery",
    "WaterLevelProvinceQuery",
    "WeirQuery",
]
