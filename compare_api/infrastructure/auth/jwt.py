"""JWT authentication for the comparison API.

Handles verification of Supabase-issued access tokens.
"""

from dataclasses import dataclass

import jwt

from compare_api.config import config
from compare_api.core.errors import Unauthorized, UpstreamFailure
from compare_api.core.logging import logger


@dataclass(frozen=True)
class AuthenticatedUser:
    """Verified caller identity."""

    id: str
    access_token: str
    email: str = ""


def verify_jwt_token(token: str) -> AuthenticatedUser:
    """Verify JWT token locally using Supabase JWT secret.

    Args:
        token: JWT token string (without "Bearer " prefix)

    Returns:
        AuthenticatedUser with the user ID from the token's sub claim

    Raises:
        Unauthorized: 401 if token invalid or expired
        UpstreamFailure: 500 if the JWT secret is not configured
    """
    jwt_secret = config.supabase_jwt_secret()

    if not jwt_secret:
        logger.error("jwt_verification_failed", reason="SUPABASE_JWT_SECRET not configured")
        raise UpstreamFailure("verify credentials", "JWT authentication not configured")

    try:
        payload = jwt.decode(token, jwt_secret, algorithms=["HS256"], audience="authenticated")
    except jwt.ExpiredSignatureError:
        logger.warning("jwt_token_expired")
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError as e:
        logger.warning("jwt_token_invalid", error=str(e))
        raise Unauthorized("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid token: missing user ID")

    logger.debug("jwt_token_verified", user_id=user_id)
    return AuthenticatedUser(id=user_id, access_token=token, email=payload.get("email") or "")
