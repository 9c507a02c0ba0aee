"""JWT access token creation and verification."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a short-lived access token.

    The identity service issues tokens in production; this is used by the seed
    script and the tests to mint tokens the API accepts.

    Args:
        data: Payload data. Must include ``sub`` (user UUID as string) and
            ``tenant_id`` (tenant UUID as string).
        expires_delta: Custom expiration duration. Defaults to
            ``settings.jwt_access_token_expire_minutes`` minutes.

    Returns:
        Encoded JWT string.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))
    to_encode.update({"exp": expire, "iat": now, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_tenant_token(user_id: str, tenant_id: str, expires_delta: timedelta | None = None) -> str:
    """Create an access token for a user acting on behalf of a tenant."""
    return create_access_token({"sub": user_id, "tenant_id": tenant_id}, expires_delta=expires_delta)


def decode_token(token: str) -> dict:
    """Decode and verify a JWT token.

    Args:
        token: Encoded JWT string.

    Returns:
        Decoded payload dictionary.

    Raises:
        jose.JWTError: If the token is invalid, expired, or malformed.
    """
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
