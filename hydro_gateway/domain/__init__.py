"""
Domain package for the Hydro Query Gateway.

Exports the type labels and response models used by the query catalog and
the HTTP layer. Keep this package focused on data definitions.
"""

from hydro_gateway.domain.models import (
    ChartRow,
    ErrorResponse,
    RainfallReading,
    StationCount,
    type_predicate,
)

__all__ = [
    "ChartRow",
    "ErrorResponse",
    "RainfallReading",
    "StationCount",
    "type_predicate",
]
