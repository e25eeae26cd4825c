"""FastAPI authentication dependencies for the comparison API.

Provides reusable authentication dependencies for route protection.
"""

from typing import Optional

from fastapi import Cookie, Depends, Header

from compare_api.core.errors import Unauthorized
from compare_api.infrastructure.auth.jwt import AuthenticatedUser, verify_jwt_token

ACCESS_TOKEN_COOKIE = "sb-access-token"


async def get_current_user(
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None, alias=ACCESS_TOKEN_COOKIE),
) -> Optional[AuthenticatedUser]:
    """Resolve the caller from a Supabase access token, or None if anonymous.

    Priority order:
    1. Authorization: Bearer <token>
    2. sb-access-token cookie set by the web client

    Raises:
        Unauthorized: 401 if a token is present but malformed, invalid or expired
    """
    if authorization:
        if not authorization.startswith("Bearer "):
            raise Unauthorized(
                "Invalid Authorization header format. Use: Authorization: Bearer <token>"
            )
        return verify_jwt_token(authorization[len("Bearer "):].strip())

    if access_token:
        return verify_jwt_token(access_token)

    return None


async def require_user(
    user: Optional[AuthenticatedUser] = Depends(get_current_user),
) -> AuthenticatedUser:
    """Like get_current_user, but anonymous callers are rejected.

    Raises:
        Unauthorized: 401 if no identity is present
    """
    if user is None:
        raise Unauthorized()
    return user
