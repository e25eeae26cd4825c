"""API models for the comparison API."""

from compare_api.api.models.requests import PostUpdateRequest

__all__ = ["PostUpdateRequest"]
