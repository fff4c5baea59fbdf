from __future__ import annotations

import sys
from typing import Optional

import psycopg
import typer
import uvicorn

from hydro_gateway.config import get_settings
from hydro_gateway.gateway import build_queries
from hydro_gateway.infrastructure.db_factory import probe_database
from hydro_gateway.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Hydro Query Gateway CLI.")
log = get_logger("hydro_gateway")


def _probe_or_exit() -> None:
    """Check database connectivity; exit with status 1 when it is unreachable."""
    try:
        probe_database()
    except psycopg.Error as exc:
        log.error("Failed to connect to the database: %s", exc)
        raise typer.Exit(code=1)
    log.info("Database connected successfully")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}:***@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"listen={settings.host}:{settings.port} "
        f"pool=({settings.pool_min_size},{settings.pool_max_size}) "
        f"match={settings.type_match_mode.value} "
        f"legacy_status={settings.legacy_error_status}"
    )


@app.command()
def routes() -> None:
    """
    List the routes the gateway serves.
    """
    for name, query in build_queries().items():
        typer.echo(f"/{name:<22} {query.description}")


@app.command()
def probe() -> None:
    """
    Check database connectivity and exit 0 (reachable) or 1 (unreachable).
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    _probe_or_exit()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Listen address (default from HOST)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port (default from PORT)."),
    reload: bool = typer.Option(False, "--reload/--no-reload", help="Restart on code changes."),
) -> None:
    """
    Probe the database, then serve the HTTP API with uvicorn.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    _probe_or_exit()

    listen_host = host or settings.host
    listen_port = port or settings.port
    log.info("API is running at http://localhost:%s", listen_port)
    uvicorn.run(
        "hydro_gateway.api.app:create_app",
        factory=True,
        host=listen_host,
        port=listen_port,
        reload=reload,
        log_config=None,
    )


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
