"""
Moments API router

All routes require a tenant (JWT cookie or bearer token). A Moment owned by
another tenant answers exactly like a missing one: 404 "Moment not found".
"""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_moment_service
from config import get_settings
from middleware.auth import get_current_tenant
from models.api.moment import MomentCreate, MomentUpdate
from models.domain.moment import Projection
from models.domain.tenant import TenantContext
from services.moment_service import MomentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/moments", tags=["moments"])

settings = get_settings()


@router.get("")
async def list_moments(
    limit: int = Query(20, ge=0, le=settings.moment_list_max_limit),
    skip: int = Query(0, ge=0),
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    """Lightweight moments, newest first"""
    moments = await service.list(tenant, limit=limit, skip=skip)
    return {"data": [m.to_dict(Projection.LIGHTWEIGHT) for m in moments]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_moment(
    body: MomentCreate,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    moment = await service.create(
        tenant,
        title=body.title,
        content=body.content,
        summary=body.summary,
        preview=body.preview,
        timestamp=body.timestamp,
    )
    return {"data": moment.to_dict(Projection.FULL)}


# Must be registered before /{moment_id}
@router.get("/timeline")
async def get_timeline(
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    """Lightweight moments in AFTER-chain order, chain by chain"""
    moments = await service.get_timeline(tenant)
    return {"data": [m.to_dict(Projection.LIGHTWEIGHT) for m in moments]}


@router.get("/{moment_id}")
async def get_moment(
    moment_id: str,
    fields: Literal["full", "lightweight"] = Query("full"),
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    projection = Projection(fields)
    moment = await service.get(tenant, moment_id, projection)
    return {"data": moment.to_dict(projection)}


@router.patch("/{moment_id}")
async def update_moment(
    moment_id: str,
    body: MomentUpdate,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    """Sparse update - only fields present in the body change"""
    moment = await service.update(tenant, moment_id, body.present_fields())
    return {"data": moment.to_dict(Projection.FULL)}


@router.delete("/{moment_id}")
async def delete_moment(
    moment_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    await service.delete(tenant, moment_id)
    return {"success": True, "message": "Moment deleted"}


# ============================================================================
# Edges
# ============================================================================

@router.put("/{moment_id}/characters/{character_id}")
async def link_character(
    moment_id: str,
    character_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    await service.link_character(tenant, moment_id, character_id)
    return {"success": True, "message": "Character linked"}


@router.delete("/{moment_id}/characters/{character_id}")
async def unlink_character(
    moment_id: str,
    character_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    removed = await service.unlink_character(tenant, moment_id, character_id)
    return {"success": True, "message": "Character unlinked" if removed else "Character was not linked"}


@router.put("/{moment_id}/location/{location_id}")
async def set_location(
    moment_id: str,
    location_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    await service.set_location(tenant, moment_id, location_id)
    return {"success": True, "message": "Location set"}


@router.delete("/{moment_id}/location/{location_id}")
async def unlink_location(
    moment_id: str,
    location_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    removed = await service.unlink_location(tenant, moment_id, location_id)
    return {"success": True, "message": "Location cleared" if removed else "Location was not set"}


@router.put("/{moment_id}/next/{next_id}")
async def link_next(
    moment_id: str,
    next_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    await service.link_next(tenant, moment_id, next_id)
    return {"success": True, "message": "Moments chained"}


@router.delete("/{moment_id}/next")
async def unlink_next(
    moment_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: MomentService = Depends(get_moment_service)
):
    removed = await service.unlink_next(tenant, moment_id)
    return {"success": True, "message": "Chain link removed" if removed else "Moment had no next link"}
