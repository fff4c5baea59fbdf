"""
Aggregate queries over the `infrastruc` table.
"""

from __future__ import annotations

from typing import Any, List

from psycopg import AsyncConnection

from hydro_gateway.config import MatchMode
from hydro_gateway.domain.models import (
    PUMP_STATION_LABELS,
    SLUICE_GATE,
    SLUICE_GATE_ABBREVIATION,
    WEIR_LABELS,
    StationCount,
    contains,
    ends_with,
    type_predicate,
)
from hydro_gateway.queries.abstract import AbstractGatewayQuery, QueryParams, Row

CHART_ID_RANGE = ("1", "17")


class StationCountQuery(AbstractGatewayQuery):
    """
    Count records per infrastructure kind.

    Issues three independent COUNT(*) round trips on the same connection,
    one per kind.
    """

    name = "station_count"
    description = "Counts of sluice gates, weirs and pump stations."
    error_message = "Failed to fetch station count from the database"

    def __init__(self, match_mode: MatchMode = MatchMode.SUBSTRING) -> None:
        self.match_mode = match_mode

    def _gate_predicate(self) -> tuple[str, tuple[str, ...]]:
        if self.match_mode is MatchMode.EXACT:
            return type_predicate((SLUICE_GATE, SLUICE_GATE_ABBREVIATION), MatchMode.EXACT)
        # The abbreviation is only recognised as a suffix.
        return (
            "infrastruc_type LIKE %s OR infrastruc_type LIKE %s",
            (contains(SLUICE_GATE), ends_with(SLUICE_GATE_ABBREVIATION)),
        )

    async def _count(self, conn: AsyncConnection, clause: str, args: tuple[str, ...]) -> int:
        value = await self.fetch_scalar(
            conn, f"SELECT COUNT(*) AS count FROM infrastruc WHERE {clause}", args
        )
        return int(value or 0)

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> dict[str, Any]:
        gates = await self._count(conn, *self._gate_predicate())
        weirs = await self._count(conn, *type_predicate(WEIR_LABELS, self.match_mode))
        pumps = await self._count(conn, *type_predicate(PUMP_STATION_LABELS, self.match_mode))
        return StationCount(infrastruc=gates, weir=weirs, pumpstation=pumps).model_dump()


class InfrastructureChartQuery(AbstractGatewayQuery):
    """
    Per-record conditional counts feeding the dashboard chart.

    `infrastruc_id` is compared as text, so '10'..'17' sort between '1' and '2'.
    """

    name = "infrastructest_chart"
    description = "Per-id weir/pump/gate counts for ids '1'..'17'."
    error_message = "Failed to fetch infrastructest chart data from the database"

    def __init__(self, match_mode: MatchMode = MatchMode.SUBSTRING) -> None:
        self.match_mode = match_mode

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> List[Row]:
        weir_clause, weir_args = type_predicate(WEIR_LABELS, self.match_mode)
        pump_clause, pump_args = type_predicate(PUMP_STATION_LABELS, self.match_mode)
        gate_clause, gate_args = type_predicate((SLUICE_GATE,), self.match_mode)
        sql = f"""
            SELECT
                infrastruc_id,
                COUNT(CASE WHEN {weir_clause} THEN 1 END) AS weir_count,
                COUNT(CASE WHEN {pump_clause} THEN 1 END) AS pumpstation_count,
                COUNT(CASE WHEN {gate_clause} THEN 1 END) AS infrastruc_count
            FROM infrastruc
            WHERE infrastruc_id BETWEEN %s AND %s
            GROUP BY infrastruc_id
            ORDER BY infrastruc_id
        """
        args = (*weir_args, *pump_args, *gate_args, *CHART_ID_RANGE)
        return await self.fetch_all(conn, sql, args)


__all__ = ["CHART_ID_RANGE", "InfrastructureChartQuery", "StationCountQuery"]
