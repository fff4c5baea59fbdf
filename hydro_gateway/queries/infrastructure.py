"""
Row queries over the `infrastruc` table.

All of them return matching rows verbatim (`SELECT *`). The weir and pump
station filters follow the configured match mode; the sluice gate filter is
always an exact match.
"""

from __future__ import annotations

from typing import List, Optional

from psycopg import AsyncConnection

from hydro_gateway.config import MatchMode, Settings, get_settings
from hydro_gateway.domain.models import (
    PUMP_STATION_LABELS,
    SLUICE_GATE,
    WEIR_LABELS,
    type_predicate,
)
from hydro_gateway.queries.abstract import AbstractGatewayQuery, QueryParams, Row


class SluiceGateQuery(AbstractGatewayQuery):
    name = "infrastruc"
    description = "Sluice gates (exact type match)."
    error_message = "Failed to fetch infrastruc data from the database"

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> List[Row]:
        return await self.fetch_all(
            conn,
            "SELECT * FROM infrastruc WHERE infrastruc_type = %s",
            (SLUICE_GATE,),
        )


class _TypeFilterQuery(AbstractGatewayQuery):
    """Shared body for queries selecting rows by one or more type labels."""

    labels: tuple[str, ...] = ()

    def __init__(self, match_mode: MatchMode = MatchMode.SUBSTRING) -> None:
        self.match_mode = match_mode

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> List[Row]:
        clause, args = type_predicate(self.labels, self.match_mode)
        return await self.fetch_all(conn, f"SELECT * FROM infrastruc WHERE {clause}", args)


class WeirQuery(_TypeFilterQuery):
    name = "weir"
    description = "Weirs (type contains or equals the weir label)."
    error_message = "Failed to fetch weir data from the database"
    labels = WEIR_LABELS


class PumpStationQuery(_TypeFilterQuery):
    name = "pumpstation"
    description = "Pump stations and pump houses."
    error_message = "Failed to fetch pumpstation data from the database"
    labels = PUMP_STATION_LABELS


class LatitudeQuery(AbstractGatewayQuery):
    """
    Records inside a fixed latitude/longitude bounding box, bounds inclusive.
    """

    name = "latitude"
    description = "Records inside the configured lat/long bounding box."
    error_message = "Failed to fetch latitude data from the database"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.bounds = (settings.lat_min, settings.lat_max, settings.long_min, settings.long_max)

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> List[Row]:
        return await self.fetch_all(
            conn,
            "SELECT * FROM infrastruc "
            "WHERE coordinates_lat BETWEEN %s AND %s AND coordinates_long BETWEEN %s AND %s",
            self.bounds,
        )


class WaterLevelProvinceQuery(AbstractGatewayQuery):
    name = "waterlevel_province"
    description = "All province water-level rows, unfiltered."
    error_message = "Failed to fetch waterlevel data from the database"

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> List[Row]:
        return await self.fetch_all(conn, "SELECT * FROM waterlevel_province")


__all__ = [
    "LatitudeQuery",
    "PumpStationQuery",
    "SluiceGateQuery",
    "WaterLevelProvinceQuery",
    "WeirQuery",
]
