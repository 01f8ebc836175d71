"""
JWT session management

Tokens are issued by the external account service; this process only
verifies them. `create_access_token` exists for tooling and tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt
from config import get_settings


def create_access_token(
    tenant_id: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token for a tenant

    Args:
        tenant_id: Opaque tenant id, stored in `sub`
        email, name: Optional display claims
        expires_delta: Override for JWT_EXPIRE_MINUTES

    Returns:
        JWT token string
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))

    payload = {
        "sub": tenant_id,
        "email": email,
        "name": name,
        "exp": expire,
        "iat": now
    }

    return jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and validate JWT token

    Returns:
        Decoded payload dict

    Raises:
        jose.JWTError if token invalid/expired
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm]
    )
