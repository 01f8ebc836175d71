"""
Tenant data router - account-level removal of a tenant's graph
"""
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_tenant_service
from middleware.auth import get_current_tenant
from models.domain.tenant import TenantContext
from services.tenant_service import TenantService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/tenant", tags=["tenant"])


@router.delete("/data")
async def purge_tenant_data(
    tenant: TenantContext = Depends(get_current_tenant),
    service: TenantService = Depends(get_tenant_service)
):
    """Delete every node and edge the caller owns"""
    deleted = await service.purge(tenant)
    return {"success": True, "message": "Tenant data deleted", "deleted": deleted}
