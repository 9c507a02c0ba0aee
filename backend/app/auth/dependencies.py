"""FastAPI authentication dependencies for route protection."""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from app.auth.jwt import decode_token
from app.schemas.auth import TenantContext

# Strict bearer: raises 403 automatically if no token provided
_bearer_scheme = HTTPBearer()


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_tenant(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
) -> TenantContext:
    """Validate the Bearer token and return the user and tenant it speaks for.

    Raises:
        HTTPException 401: If the token is invalid, expired, of the wrong type,
            or lacks a well-formed ``sub`` or ``tenant_id`` claim.
    """
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise _credentials_exception() from None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        raise _credentials_exception("Invalid token type")

    sub: str | None = payload.get("sub")
    tenant: str | None = payload.get("tenant_id")
    if sub is None or tenant is None:
        raise _credentials_exception()

    try:
        return TenantContext(user_id=uuid.UUID(sub), tenant_id=uuid.UUID(tenant))
    except (AttributeError, TypeError, ValueError):
        raise _credentials_exception() from None
