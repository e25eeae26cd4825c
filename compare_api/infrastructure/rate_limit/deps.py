"""FastAPI rate limiting dependencies.

Provides reusable rate limiting dependencies for route protection.
"""

import math
import time
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import Request

from compare_api.config import config
from compare_api.core.errors import RateLimited
from compare_api.core.logging import logger
from compare_api.infrastructure.rate_limit.identity import UNKNOWN_CLIENT, resolve_client_identity
from compare_api.infrastructure.rate_limit.limiter import RateLimitDecision, RateLimiter
from compare_api.infrastructure.rate_limit.policies import OperationClass


def rate_limit_headers(decision: RateLimitDecision, now: Optional[float] = None) -> Dict[str, str]:
    """Build X-RateLimit-* headers, plus Retry-After once the allowance is spent."""
    now = time.time() if now is None else now
    reset_in = max(0, math.ceil(decision.reset_at - now))
    reset_iso = datetime.fromtimestamp(decision.reset_at, tz=timezone.utc).isoformat()

    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": reset_iso,
        "X-RateLimit-Reset-In": str(reset_in),
    }

    if decision.remaining <= 0:
        retry_after = decision.retry_after if decision.retry_after is not None else reset_in
        headers["Retry-After"] = str(retry_after)

    return headers


def get_rate_limiter(request: Request) -> RateLimiter:
    """Get the RateLimiter created by the app factory."""
    return request.app.state.rate_limiter


def client_identity(request: Request) -> str:
    """Resolve the rate limit identity of a request, never failing."""
    try:
        return resolve_client_identity(request.headers, development=config.is_development())
    except Exception as e:
        logger.warning("rate_limit_identity_failed", error=str(e))
        return UNKNOWN_CLIENT


def enforce_rate_limit(operation: OperationClass):
    """Create a dependency that counts the request against an operation class.

    Usage:
        @router.get("/posts")
        async def list_posts(
            user: AuthenticatedUser = Depends(require_user),
            _: None = Depends(enforce_rate_limit(OperationClass.READ)),
        ):
            ...

    The decision's headers are stored on request.state for the response
    middleware to copy onto the outgoing response.

    Raises:
        RateLimited: 429 if the allowance for the window is spent
    """

    async def dependency(request: Request) -> None:
        if not config.rate_limit_enabled():
            return None

        limiter = get_rate_limiter(request)
        decision = await limiter.check(operation, client_identity(request))
        headers = rate_limit_headers(decision, now=limiter.now())
        request.state.rate_limit_headers = headers

        if not decision.admitted:
            raise RateLimited(retry_after=decision.retry_after or 1, headers=headers)

        return None

    return dependency
