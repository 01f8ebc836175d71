from .auth import get_current_tenant, get_current_tenant_optional
from .jwt_session import create_access_token, decode_access_token

__all__ = [
    'get_current_tenant',
    'get_current_tenant_optional',
    'create_access_token',
    'decode_access_token',
]
