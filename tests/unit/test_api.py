from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal

import psycopg
import pytest
from fastapi.testclient import TestClient

from hydro_gateway.api.app import create_app
from hydro_gateway.domain.models import SLUICE_GATE, WEIR
from tests.fakes import FakeConnection, FakePoolManager

ROUTE_ERRORS = {
    "/infrastruc": "Failed to fetch infrastruc data from the database",
    "/waterlevel_province": "Failed to fetch waterlevel data from the database",
    "/weir": "Failed to fetch weir data from the database",
    "/pumpstation": "Failed to fetch pumpstation data from the database",
    "/station_count": "Failed to fetch station count from the database",
    "/latitude": "Failed to fetch latitude data from the database",
    "/rainfall_daily?startDate=2024-01-01&endDate=2024-01-31": (
        "Failed to fetch rainfall data from the database"
    ),
    "/infrastructest_chart": "Failed to fetch infrastructest chart data from the database",
}
MISSING_DATES = {"error": "Please provide startDate and endDate"}


@pytest.fixture
def client_for(settings):
    def _client(pool: FakePoolManager, app_settings=None) -> TestClient:
        return TestClient(create_app(app_settings or settings, pool_manager=pool))

    return _client


def test_lifespan_opens_and_closes_pool(settings) -> None:
    pool = FakePoolManager()

    with TestClient(create_app(settings, pool_manager=pool)):
        assert pool.open_calls == 1
        assert pool.close_calls == 0

    assert pool.close_calls == 1


def test_infrastruc_returns_rows_verbatim(client_for) -> None:
    rows = [
        {
            "infrastruc_id": "1",
            "infrastruc_type": SLUICE_GATE,
            "coordinates_lat": 13.75,
            "coordinates_long": 100.5,
            "province": "อยุธยา",
        }
    ]
    client = client_for(FakePoolManager(conn=FakeConnection(results=[rows])))

    response = client.get("/infrastruc")

    assert response.status_code == 200
    assert response.json() == rows


def test_weir_returns_json_array(client_for) -> None:
    rows = [{"infrastruc_id": "2", "infrastruc_type": f"{WEIR}น้ำล้น"}]
    client = client_for(FakePoolManager(conn=FakeConnection(results=[rows])))

    response = client.get("/weir")

    assert response.status_code == 200
    assert response.json() == rows


def test_station_count_has_exactly_three_keys(client_for) -> None:
    conn = FakeConnection(results=[[{"count": 5}], [{"count": 0}], [{"count": 12}]])
    client = client_for(FakePoolManager(conn=conn))

    response = client.get("/station_count")

    assert response.status_code == 200
    assert response.json() == {"infrastruc": 5, "weir": 0, "pumpstation": 12}
    assert len(conn.executed) == 3


def test_rainfall_daily_serializes_dates_and_decimals(client_for) -> None:
    rows = [
        {"value": Decimal("12.50"), "date": datetime(2024, 1, 1), "station_id": "ST001"},
        {"value": Decimal("0.00"), "date": datetime(2024, 1, 2), "station_id": "ST001"},
    ]
    conn = FakeConnection(results=[rows])
    client = client_for(FakePoolManager(conn=conn))

    response = client.get("/rainfall_daily", params={"startDate": "2024-01-01", "endDate": "2024-01-31"})

    assert response.status_code == 200
    body = response.json()
    assert [row["date"] for row in body] == ["2024-01-01T00:00:00", "2024-01-02T00:00:00"]
    assert set(body[0]) == {"value", "date", "station_id"}
    assert conn.executed[0][1] == ("2024-01-01", "2024-01-31")


@pytest.mark.parametrize(
    "level",
    [Decimal("NaN"), Decimal("Infinity"), math.nan, math.inf],
    ids=["numeric-nan", "numeric-infinity", "float-nan", "float-infinity"],
)
def test_non_finite_values_are_returned_as_null(client_for, level) -> None:
    rows = [
        {"province": "อยุธยา", "waterlevel_value": level},
        {"province": "ชัยนาท", "waterlevel_value": Decimal("3.25")},
    ]
    client = client_for(FakePoolManager(conn=FakeConnection(results=[rows])))

    response = client.get("/waterlevel_province")

    assert response.status_code == 200
    assert response.json() == [
        {"province": "อยุธยา", "waterlevel_value": None},
        {"province": "ชัยนาท", "waterlevel_value": 3.25},
    ]


def test_unencodable_row_returns_route_error(client_for) -> None:
    rows = [{"province": "อยุธยา", "waterlevel_value": object()}]
    client = client_for(FakePoolManager(conn=FakeConnection(results=[rows])))

    response = client.get("/waterlevel_province")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch waterlevel data from the database"}


@pytest.mark.parametrize(
    "query_string",
    ["", "?startDate=2024-01-01", "?endDate=2024-01-31", "?startDate=&endDate=2024-01-31"],
)
def test_rainfall_daily_requires_both_dates(client_for, query_string) -> None:
    pool = FakePoolManager()
    client = client_for(pool)

    response = client.get(f"/rainfall_daily{query_string}")

    assert response.status_code == 400
    assert response.json() == MISSING_DATES
    assert pool.borrowed == 0


def test_legacy_status_answers_200_for_missing_dates(client_for, make_settings) -> None:
    client = client_for(FakePoolManager(), make_settings(legacy_error_status=True))

    response = client.get("/rainfall_daily")

    assert response.status_code == 200
    assert response.json() == MISSING_DATES


@pytest.mark.parametrize("path,message", list(ROUTE_ERRORS.items()))
def test_unreachable_database_returns_route_message(client_for, path, message) -> None:
    client = client_for(FakePoolManager(connect_error=psycopg.OperationalError("refused")))

    response = client.get(path)

    assert response.status_code == 503
    assert response.json() == {"error": message}


@pytest.mark.parametrize("path,message", list(ROUTE_ERRORS.items()))
def test_legacy_status_keeps_200_on_database_errors(client_for, make_settings, path, message) -> None:
    client = client_for(
        FakePoolManager(connect_error=psycopg.OperationalError("refused")),
        make_settings(legacy_error_status=True),
    )

    response = client.get(path)

    assert response.status_code == 200
    assert response.json() == {"error": message}


def test_query_failure_returns_500(client_for) -> None:
    conn = FakeConnection(error=psycopg.ProgrammingError("column does not exist"))
    client = client_for(FakePoolManager(conn=conn))

    response = client.get("/latitude")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch latitude data from the database"}


def test_cors_allows_any_origin(client_for) -> None:
    client = client_for(FakePoolManager())

    response = client.get("/waterlevel_province", headers={"Origin": "https://dashboard.example"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_health_reports_database_state(client_for) -> None:
    healthy = client_for(FakePoolManager()).get("/health")
    degraded = client_for(FakePoolManager(connect_error=psycopg.OperationalError("down"))).get(
        "/health"
    )

    assert healthy.status_code == 200
    assert healthy.json() == {"status": "ok", "database": "ok"}
    assert degraded.status_code == 503
    assert degraded.json() == {"status": "degraded", "database": "unavailable"}
