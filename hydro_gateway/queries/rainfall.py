"""
Daily rainfall readings within a caller-supplied timestamp range.
"""

from __future__ import annotations

from typing import List

from psycopg import AsyncConnection

from hydro_gateway.queries.abstract import AbstractGatewayQuery, QueryParams, Row

RAINFALL_DAILY_SQL = """
    SELECT
        rainfall_value AS value,
        rainfall_datetime AS date,
        station_id
    FROM rainfall_daily
    WHERE rainfall_datetime BETWEEN %s AND %s
    ORDER BY rainfall_datetime ASC
"""


class RainfallDailyQuery(AbstractGatewayQuery):
    """
    Rows between `startDate` and `endDate` (inclusive), oldest first.

    The dates are bound as untyped parameters and cast by PostgreSQL against
    `rainfall_datetime`, so any literal the server accepts works.
    """

    name = "rainfall_daily"
    description = "Daily rainfall between startDate and endDate, ascending."
    error_message = "Failed to fetch rainfall data from the database"
    required_params = ("startDate", "endDate")
    missing_params_message = "Please provide startDate and endDate"

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> List[Row]:
        return await self.fetch_all(
            conn, RAINFALL_DAILY_SQL, (params["startDate"], params["endDate"])
        )


__all__ = ["RAINFALL_DAILY_SQL", "RainfallDailyQuery"]
