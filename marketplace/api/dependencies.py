"""
Shared FastAPI dependencies: bearer token authentication.

Tokens are issued by the identity service; this module only verifies them
and turns their claims into a Principal.
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from marketplace.config.settings import Settings, get_settings
from marketplace.domains.ecommerce.domain.value_objects import Principal, UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and verify a bearer token.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise _unauthorized("Invalid or expired token") from e


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    """
    Build a Principal from token claims (sub, role, vendor_id, phone).

    Raises:
        HTTPException: 401 if a required claim is missing or malformed
    """
    try:
        user_id = UUID(str(claims["sub"]))
        role = UserRole.from_string(str(claims["role"]))
        vendor_id = UUID(str(claims["vendor_id"])) if claims.get("vendor_id") else None
        return Principal(user_id=user_id, role=role, vendor_id=vendor_id, phone_number=claims.get("phone"))
    except (KeyError, ValueError) as e:
        logger.warning(f"Token claims rejected: {e}")
        raise _unauthorized("Invalid token claims") from e


async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> Principal:
    """Resolve the authenticated caller from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    claims = decode_token(credentials.credentials)
    return principal_from_claims(claims)


__all__ = [
    "bearer_scheme",
    "decode_token",
    "principal_from_claims",
    "get_current_principal",
]
