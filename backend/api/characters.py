"""
Characters and Locations API routers
"""
import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_character_service
from middleware.auth import get_current_tenant
from models.api.moment import KnowsCreate, NamedEntityCreate
from models.domain.tenant import TenantContext
from services.character_service import CharacterService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/characters", tags=["characters"])
locations_router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("")
async def list_characters(
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    characters = await service.list_characters(tenant)
    return {"data": [c.to_dict() for c in characters]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_character(
    body: NamedEntityCreate,
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    character = await service.create_character(tenant, body.name)
    return {"data": character.to_dict()}


@router.get("/{character_id}")
async def get_character(
    character_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    """Character plus its outgoing KNOWS relationships"""
    character = await service.get_character(tenant, character_id)
    return {"data": character.to_dict(include_relationships=True)}


@router.post("/{character_id}/relationships", status_code=status.HTTP_201_CREATED)
async def create_relationship(
    character_id: str,
    body: KnowsCreate,
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    relationship = await service.create_knows(
        tenant,
        character_id,
        body.target_id,
        body.relationship_type,
        body.context,
    )
    return {"data": relationship.to_dict()}


@locations_router.get("")
async def list_locations(
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    locations = await service.list_locations(tenant)
    return {"data": [l.to_dict() for l in locations]}


@locations_router.post("", status_code=status.HTTP_201_CREATED)
async def create_location(
    body: NamedEntityCreate,
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    location = await service.create_location(tenant, body.name)
    return {"data": location.to_dict()}


@locations_router.get("/{location_id}")
async def get_location(
    location_id: str,
    tenant: TenantContext = Depends(get_current_tenant),
    service: CharacterService = Depends(get_character_service)
):
    location = await service.get_location(tenant, location_id)
    return {"data": location.to_dict()}
