"""Request ID middleware for the comparison API."""

import uuid

import structlog
from fastapi import Request


async def request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request's log context and response headers."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

    with structlog.contextvars.bound_contextvars(
        request_id=request_id, method=request.method, path=request.url.path
    ):
        response = await call_next(request)

    response.headers["X-Request-ID"] = request_id
    return response
