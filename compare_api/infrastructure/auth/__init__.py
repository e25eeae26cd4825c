"""Authentication module for the comparison API.

Verifies Supabase access tokens and exposes FastAPI dependencies.
"""

from compare_api.infrastructure.auth.deps import get_current_user, require_user
from compare_api.infrastructure.auth.jwt import AuthenticatedUser, verify_jwt_token

__all__ = [
    "AuthenticatedUser",
    "verify_jwt_token",
    "get_current_user",
    "require_user",
]
