"""HTTP layer for the comparison API."""

from compare_api.api.app import create_app

__all__ = ["create_app"]
