"""Middleware for the comparison API."""

from compare_api.api.middleware.rate_limit import rate_limit_headers_middleware
from compare_api.api.middleware.request_id import request_id_middleware

__all__ = ["rate_limit_headers_middleware", "request_id_middleware"]
