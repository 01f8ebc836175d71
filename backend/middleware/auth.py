"""
Authentication dependencies

Resolves the request's tenant from a JWT carried in the `access_token`
cookie or an `Authorization: Bearer` header. The resolved TenantContext is
passed explicitly into every service call; nothing is cached across requests.
"""
import logging
from typing import Optional

from fastapi import Request
from jose import JWTError

from models.domain.tenant import TenantContext
from services.errors import Unauthorized

from .jwt_session import decode_access_token

logger = logging.getLogger(__name__)


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get("access_token")
    if token:
        return token

    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_current_tenant_optional(request: Request) -> Optional[TenantContext]:
    """
    Get current tenant from JWT token (optional - doesn't raise if not authenticated)

    Returns:
        TenantContext if authenticated, None otherwise
    """
    token = _extract_token(request)
    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.warning(f"Rejected access token: {type(e).__name__}")
        return None

    tenant = TenantContext(
        tenant_id=payload.get("sub"),
        email=payload.get("email"),
        name=payload.get("name"),
    )
    return tenant if tenant.is_valid else None


async def get_current_tenant(request: Request) -> TenantContext:
    """
    Get current tenant (required)

    Raises:
        Unauthorized (401) if no valid token
    """
    tenant = await get_current_tenant_optional(request)
    if tenant is None:
        raise Unauthorized()
    return tenant
