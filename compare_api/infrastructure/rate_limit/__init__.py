"""Rate limiting module for the comparison API.

Provides an in-process fixed-window limiter keyed by operation class and
client identity, plus FastAPI dependencies for route protection.
"""

from compare_api.infrastructure.rate_limit.deps import (
    enforce_rate_limit,
    get_rate_limiter,
    rate_limit_headers,
)
from compare_api.infrastructure.rate_limit.identity import resolve_client_identity
from compare_api.infrastructure.rate_limit.limiter import (
    RateLimitDecision,
    RateLimiter,
    RateLimitStatus,
    RateLimitWindow,
)
from compare_api.infrastructure.rate_limit.policies import (
    DEFAULT_POLICIES,
    OperationClass,
    RateLimitPolicy,
)

__all__ = [
    "DEFAULT_POLICIES",
    "OperationClass",
    "RateLimitDecision",
    "RateLimitPolicy",
    "RateLimitStatus",
    "RateLimitWindow",
    "RateLimiter",
    "enforce_rate_limit",
    "get_rate_limiter",
    "rate_limit_headers",
    "resolve_client_identity",
]
