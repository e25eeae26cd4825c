"""Error taxonomy for the comparison API.

Every failure a handler can surface is one of these types. Exception handlers
registered by the app factory turn them into JSON responses.
"""

from typing import Dict, List, Optional


class ApiError(Exception):
    """Base class for errors rendered as HTTP responses."""

    status_code: int = 500

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers or {}

    def to_dict(self) -> Dict[str, object]:
        return {"error": self.message}


class Unauthorized(ApiError):
    """No verified identity on a request that requires one."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidInput(ApiError):
    """Payload failed validation. Carries every violation, not only the first."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]

    def to_dict(self) -> Dict[str, object]:
        return {"error": self.message, "errors": self.errors}


class PostNotFound(ApiError):
    """Post is absent or owned by someone else (deliberately indistinguishable)."""

    status_code = 404

    def __init__(self, message: str = "Post not found"):
        super().__init__(message)


class RateLimited(ApiError):
    """Request rejected by the rate limiter."""

    status_code = 429

    def __init__(self, retry_after: int, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            f"Rate limit exceeded. Try again in {retry_after} seconds.", headers=headers
        )
        self.retry_after = retry_after


class UpstreamFailure(ApiError):
    """A Supabase call (table, storage or auth) failed."""

    status_code = 500

    def __init__(self, operation: str, detail: str):
        super().__init__(detail)
        self.operation = operation
        self.detail = detail

    def public_message(self, expose: bool) -> str:
        """Message returned to the caller; the raw detail only when exposed."""
        if expose:
            return self.detail
        return f"Failed to {self.operation.replace('_', ' ')}"
