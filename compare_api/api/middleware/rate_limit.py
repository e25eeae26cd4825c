"""Rate limit header middleware for the comparison API."""

from fastapi import Request


async def rate_limit_headers_middleware(request: Request, call_next):
    """Copy the X-RateLimit-* headers computed by enforce_rate_limit onto the response.

    Applies to admitted and rejected (429) requests alike. Requests that never
    reached the limiter (e.g. rejected with 401 first) carry no headers.
    """
    response = await call_next(request)

    headers = getattr(request.state, "rate_limit_headers", None)
    if headers:
        for name, value in headers.items():
            response.headers[name] = value

    return response
