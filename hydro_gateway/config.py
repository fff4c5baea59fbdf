"""
Configuration settings for the Hydro Query Gateway.

Uses Pydantic Settings to load environment variables for the database
connection, the HTTP listener, logging, and the fixed query parameters
(type match mode, latitude/longitude bounding box).
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchMode(str, Enum):
    """How infrastructure type labels are compared against `infrastruc_type`."""

    SUBSTRING = "substring"
    EXACT = "exact"


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("hydro", alias="DB_NAME")
    db_connect_timeout: int = Field(10, alias="DB_CONNECT_TIMEOUT", gt=0)

    # Pool
    pool_min_size: int = Field(1, alias="POOL_MIN_SIZE", ge=0)
    pool_max_size: int = Field(10, alias="POOL_MAX_SIZE", gt=0)
    pool_timeout: float = Field(30.0, alias="POOL_TIMEOUT", gt=0)

    # HTTP listener
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3002, alias="PORT")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    legacy_error_status: bool = Field(False, alias="LEGACY_ERROR_STATUS")

    # Query parameters
    type_match_mode: MatchMode = Field(MatchMode.SUBSTRING, alias="TYPE_MATCH_MODE")
    lat_min: float = Field(5.61, alias="LAT_MIN")
    lat_max: float = Field(20.46, alias="LAT_MAX")
    long_min: float = Field(97.35, alias="LONG_MIN")
    long_max: float = Field(105.65, alias="LONG_MAX")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.pool_min_size > self.pool_max_size:
            raise ValueError("POOL_MIN_SIZE must not exceed POOL_MAX_SIZE")
        if self.lat_min > self.lat_max:
            raise ValueError("LAT_MIN must not exceed LAT_MAX")
        if self.long_min > self.long_max:
            raise ValueError("LONG_MIN must not exceed LONG_MAX")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["MatchMode", "Settings", "get_settings"]
