"""
Infrastructure package for the Hydro Query Gateway.

Centralizes database connectivity concerns (DSN, pooling, startup probe).
Keep this layer focused on I/O and resource management, decoupled from
query and HTTP logic.
"""

from hydro_gateway.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    get_pool_manager,
    probe_database,
)

__all__ = [
    "PoolManager",
    "build_dsn",
    "get_pool_manager",
    "probe_database",
]
