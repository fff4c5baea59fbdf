"""
Error taxonomy for the Hydro Query Gateway.

Every failure a route can produce is one of these exceptions. Each carries the
route's static, caller-facing message and the HTTP status it maps to; the API
layer renders all of them as `{"error": message}`.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for errors surfaced to HTTP callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, str]:
        return {"error": self.message}


class MissingParameterError(GatewayError):
    """A required query-string parameter was absent or empty."""

    status_code = 400


class DatabaseUnavailableError(GatewayError):
    """The database could not be reached or no pooled connection was free."""

    status_code = 503


class QueryFailedError(GatewayError):
    """The database was reachable but the query itself failed."""

    status_code = 500


__all__ = [
    "GatewayError",
    "MissingParameterError",
    "DatabaseUnavailableError",
    "QueryFailedError",
]
