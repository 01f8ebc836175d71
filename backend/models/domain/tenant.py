"""
Tenant context - the isolation key threaded through every service call
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TenantContext:
    """
    Request-scoped identity of the caller.

    Built once per request from the identity token and passed explicitly into
    every service and executor call. Never cached across requests.
    """
    tenant_id: str
    email: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return isinstance(self.tenant_id, str) and bool(self.tenant_id.strip())
