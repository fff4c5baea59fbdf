"""
HTTP layer for the Hydro Query Gateway.
"""

from hydro_gateway.api.app import create_app

__all__ = ["create_app"]
