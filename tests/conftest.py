"""
Pytest configuration for the Hydro Query Gateway.

Provides fixtures for:
- Isolated settings (no `.env`, no leaking environment variables)
- Fake pool managers and connections recording the SQL they receive
- Database connection management and seeding for integration tests
"""

from __future__ import annotations

import os
from typing import Any, Callable, Generator

import psycopg
import pytest

from hydro_gateway.config import Settings, get_settings
from hydro_gateway.infrastructure.db_factory import build_dsn
from tests.fakes import FakeConnection, FakePoolManager

_ENV_VARS = (
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "PORT",
    "HOST",
    "LOG_LEVEL",
    "LOG_JSON",
    "TYPE_MATCH_MODE",
    "LEGACY_ERROR_STATUS",
    "POOL_MIN_SIZE",
    "POOL_MAX_SIZE",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Keep unit tests independent from the developer's environment and `.env`.

    Integration tests read DB_* through `test_settings` before this runs.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory building Settings without reading `.env`."""

    def _make(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def fake_pool(fake_conn: FakeConnection) -> FakePoolManager:
    return FakePoolManager(conn=fake_conn)


# Integration fixtures ---------------------------------------------------------

_DB_ENV = {name: os.getenv(name) for name in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME")}


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Captured at import time so the autouse env isolation does not hide the
    database coordinates CI provides.
    """
    return Settings(
        _env_file=None,
        db_host=_DB_ENV["DB_HOST"] or "localhost",
        db_port=int(_DB_ENV["DB_PORT"] or "5432"),
        db_user=_DB_ENV["DB_USER"] or "postgres",
        db_password=_DB_ENV["DB_PASSWORD"] or "postgres",
        db_name=_DB_ENV["DB_NAME"] or "hydro",
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def seeded_db(test_dsn: str, db_connection_available: bool) -> dict[str, int]:
    """
    Create the schema and load the deterministic sample dataset once.

    Returns the number of rows loaded per table.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    from scripts.seed_data import seed

    return seed(test_dsn, infrastruc_rows=40, rainfall_days=31, stations=3, seed_value=42)


@pytest.fixture
def db_connection(
    test_dsn: str, seeded_db: dict[str, int]
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a database connection to the seeded dataset for cross-checks.
    """
    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()
