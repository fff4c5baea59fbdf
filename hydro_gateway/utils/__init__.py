"""
Utilities package for the Hydro Query Gateway.

Exports shared helpers for logging, timing, and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from hydro_gateway.utils.logging import configure_logging, get_logger
from hydro_gateway.utils.profiler import ProfileStats, query_timer

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "query_timer",
]
