"""
Abstract query interfaces for the Hydro Query Gateway.

Each HTTP route is backed by exactly one query object implementing the
GatewayQuery protocol: a fixed, parameterized SQL pattern plus the static
error message callers receive when it fails. Concrete queries live in the
sibling modules and are registered in `hydro_gateway.gateway`.
"""

from __future__ import annotations

import abc
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from psycopg import AsyncConnection
from psycopg.rows import dict_row

from hydro_gateway.errors import MissingParameterError

QueryParams = Mapping[str, Optional[str]]
Row = dict[str, Any]


@runtime_checkable
class GatewayQuery(Protocol):
    """
    Common interface all route queries must implement.

    Attributes
    ----------
    name : str
        Route name, also the URL path without the leading slash.
    description : str
        A human-friendly summary of the query.
    error_message : str
        Static message returned as `{"error": ...}` when the query fails.
    """

    name: str
    description: str
    error_message: str

    def validate(self, params: QueryParams) -> None:
        """Raise MissingParameterError before any database work if input is incomplete."""
        ...

    async def execute(self, conn: AsyncConnection, params: QueryParams) -> Any:
        """
        Run the query on a borrowed connection and return a JSON-ready result.
        """
        ...


class AbstractGatewayQuery(abc.ABC):
    """
    ABC helper for class-based queries.

    Subclasses set `name`, `description`, `error_message` and, when the route
    takes query-string input, `required_params` and `missing_params_message`.
    """

    name: str
    description: str
    error_message: str
    required_params: Sequence[str] = ()
    missing_params_message: str = ""

    def validate(self, params: QueryParams) -> None:
        # Empty strings count as missing, like absent keys.
        if any(not params.get(key) for key in self.required_params):
            raise MissingParameterError(self.missing_params_message)

    @abc.abstractmethod
    async def execute(self, conn: AsyncConnection, params: QueryParams) -> Any:  # pragma: no cover
        """Run the query and return its result."""
        raise NotImplementedError

    @staticmethod
    async def fetch_all(conn: AsyncConnection, sql: str, args: Iterable[Any] = ()) -> List[Row]:
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(sql, tuple(args))
            return await cur.fetchall()

    @staticmethod
    async def fetch_scalar(conn: AsyncConnection, sql: str, args: Iterable[Any] = ()) -> Any:
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(sql, tuple(args))
            row = await cur.fetchone()
        if row is None:
            return None
        return next(iter(row.values()))


__all__ = [
    "AbstractGatewayQuery",
    "GatewayQuery",
    "QueryParams",
    "Row",
]
