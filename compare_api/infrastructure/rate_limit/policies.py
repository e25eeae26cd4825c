"""Rate limit policies per operation class."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class OperationClass(str, Enum):
    """Buckets of requests sharing one rate limit ceiling.

    - READ: listing and viewing posts
    - UPLOAD: creating posts (two file uploads each)
    - DELETE: removing posts
    - UPDATE: toggling favorite/shared flags
    - STRICT: sensitive operations
    - BURST: short-window guard for high-frequency endpoints
    """

    READ = "read"
    UPLOAD = "upload"
    DELETE = "delete"
    UPDATE = "update"
    STRICT = "strict"
    BURST = "burst"


@dataclass(frozen=True)
class RateLimitPolicy:
    """Fixed window length and request ceiling."""

    window_seconds: float
    max_requests: int


DEFAULT_POLICIES: Dict[OperationClass, RateLimitPolicy] = {
    OperationClass.READ: RateLimitPolicy(window_seconds=60, max_requests=100),
    OperationClass.UPLOAD: RateLimitPolicy(window_seconds=60, max_requests=10),
    OperationClass.DELETE: RateLimitPolicy(window_seconds=60, max_requests=5),
    OperationClass.UPDATE: RateLimitPolicy(window_seconds=60, max_requests=20),
    OperationClass.STRICT: RateLimitPolicy(window_seconds=60, max_requests=5),
    OperationClass.BURST: RateLimitPolicy(window_seconds=10, max_requests=30),
}
