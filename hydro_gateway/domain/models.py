"""
Domain models for the Hydro Query Gateway.

Defines the infrastructure type labels stored in `infrastruc.infrastruc_type`
and the shapes of the few responses the gateway builds itself (aggregates and
error bodies). Rows of `infrastruc` and `waterlevel_province` are returned
verbatim and have no model here.
"""
from __future__ import annotations

from datetime import date as _date, datetime
from decimal import Decimal
from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field

from hydro_gateway.config import MatchMode

# Labels as recorded in the production database (Thai).
SLUICE_GATE = "ประตูระบายน้ำ"
SLUICE_GATE_ABBREVIATION = "ปตร."
WEIR = "ฝาย"
PUMP_STATION = "สถานีสูบน้ำ"
PUMP_HOUSE = "โรงสูบน้ำ"

WEIR_LABELS: Tuple[str, ...] = (WEIR,)
PUMP_STATION_LABELS: Tuple[str, ...] = (PUMP_STATION, PUMP_HOUSE)


def contains(label: str) -> str:
    """LIKE pattern matching `label` anywhere in the column."""
    return f"%{label}%"


def ends_with(label: str) -> str:
    """LIKE pattern matching `label` at the end of the column."""
    return f"%{label}"


def type_predicate(labels: Tuple[str, ...], mode: MatchMode) -> Tuple[str, Tuple[str, ...]]:
    """
    Build a WHERE fragment on `infrastruc_type` for one or more labels.

    Substring mode ORs `LIKE '%label%'` terms; exact mode ORs equality terms.

    >>> type_predicate(("a", "b"), MatchMode.SUBSTRING)
    ('infrastruc_type LIKE %s OR infrastruc_type LIKE %s', ('%a%', '%b%'))
    """
    if mode is MatchMode.EXACT:
        clause = " OR ".join("infrastruc_type = %s" for _ in labels)
        return clause, tuple(labels)
    clause = " OR ".join("infrastruc_type LIKE %s" for _ in labels)
    return clause, tuple(contains(label) for label in labels)


class StationCount(BaseModel):
    """
    Number of infrastructure records per kind.
    """

    infrastruc: int = Field(..., ge=0, description="Sluice gates (including the ปตร. abbreviation).")
    weir: int = Field(..., ge=0, description="Weirs.")
    pumpstation: int = Field(..., ge=0, description="Pump stations and pump houses.")

    model_config = {"frozen": True}


class RainfallReading(BaseModel):
    """
    One row of `/rainfall_daily`.
    """

    value: Optional[Union[Decimal, float]] = Field(None, description="Rainfall amount.")
    date: Union[datetime, _date] = Field(..., description="Observation timestamp.")
    station_id: Optional[Union[str, int]] = Field(None, description="Reporting station.")


class ChartRow(BaseModel):
    """
    One row of `/infrastructest_chart`.
    """

    infrastruc_id: str
    weir_count: int = Field(..., ge=0)
    pumpstation_count: int = Field(..., ge=0)
    infrastruc_count: int = Field(..., ge=0)


class ErrorResponse(BaseModel):
    """
    Body returned for every failed request.
    """

    error: str = Field(..., examples=["Failed to fetch weir data from the database"])


__all__ = [
    "SLUICE_GATE",
    "SLUICE_GATE_ABBREVIATION",
    "WEIR",
    "PUMP_STATION",
    "PUMP_HOUSE",
    "WEIR_LABELS",
    "PUMP_STATION_LABELS",
    "contains",
    "ends_with",
    "type_predicate",
    "StationCount",
    "RainfallReading",
    "ChartRow",
    "ErrorResponse",
]
