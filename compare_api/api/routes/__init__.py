"""Routes for the comparison API."""

from compare_api.api.routes import posts, share, system

__all__ = ["posts", "share", "system"]
