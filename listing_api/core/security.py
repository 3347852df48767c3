"""Bearer token verification and the caller-context dependency.

Tokens are issued by the identity service; this module only verifies them
and turns their claims into a ``CallerContext``.
"""

from typing import Any, Dict

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from listing_api.core.config import settings
from listing_api.core.exceptions import (
    AuthenticationError,
    TokenExpiredError,
    TokenInvalidError,
)
from listing_api.core.logging import get_auth_logger
from listing_api.search.context import CallerContext

logger = get_auth_logger()

# Security scheme for authentication
security = HTTPBearer(auto_error=False)

# Claims consumed directly; everything else is passed through as attributes
RESERVED_CLAIMS = {"sub", "org_id", "role", "token_type", "type", "exp", "iat", "nbf", "jti"}


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of an access token and return its claims.

    Raises:
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the token is malformed, badly signed or not an access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        logger.warning("Token verification failed", error=str(e))
        raise TokenInvalidError()

    # Support both 'token_type' and 'type' claims
    token_type = payload.get("token_type") or payload.get("type")
    if token_type != "access":
        logger.warning("Token rejected: wrong token type", provided_type=token_type)
        raise TokenInvalidError("Invalid token type")

    if not payload.get("sub"):
        raise TokenInvalidError("Invalid token payload")

    return payload


def caller_from_claims(payload: Dict[str, Any]) -> CallerContext:
    """Build the explicit caller context from verified token claims."""
    return CallerContext(
        user_id=str(payload["sub"]),
        tenant_id=payload.get("org_id"),
        role=payload.get("role"),
        attributes={k: v for k, v in payload.items() if k not in RESERVED_CLAIMS},
    )


def get_caller_context(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CallerContext:
    """
    FastAPI dependency resolving the caller from the bearer token.

    Raises:
        AuthenticationError: If no bearer token was supplied
        TokenExpiredError / TokenInvalidError: If the token fails verification
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    caller = caller_from_claims(payload)

    if settings.ENABLE_AUTH_AUDIT_LOGGING:
        token_id = payload.get("jti")
        logger.info(
            "Caller authenticated",
            user_id=caller.user_id,
            tenant_id=caller.tenant_id,
            role=caller.role,
            token_id=token_id[:8] + "..." if token_id else "legacy",
        )

    return caller
