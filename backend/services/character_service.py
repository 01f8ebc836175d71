"""
Character Service - Characters, Locations and KNOWS relationships

Characters and Locations are tenant-owned reference entities that Moments
point at. They live independently of Moments: deleting a Moment only removes
its edges to them.
"""
import logging
from typing import List, Optional

from models.domain.character import Character, Location
from models.domain.relationships import KnowsRelationship
from models.domain.tenant import TenantContext
from repositories.character_repository import CharacterRepository
from repositories.relationship_repository import RelationshipRepository
from services.errors import InvalidInput, NotFound, StorageFailure
from services.graph_executor import IsolatedQueryExecutor, require_tenant
from services.ownership import OwnershipVerifier
from utils.datetime_utils import utc_now
from utils.id_generator import generate_character_id, generate_location_id

logger = logging.getLogger(__name__)


def _require_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise InvalidInput("Name is required")
    return name.strip()


class CharacterService:
    """Create/read for Characters and Locations, plus Character-to-Character edges"""

    def __init__(
        self,
        executor: IsolatedQueryExecutor,
        repository: Optional[CharacterRepository] = None,
        relationships: Optional[RelationshipRepository] = None,
        verifier: Optional[OwnershipVerifier] = None
    ):
        self.executor = executor
        self.repository = repository or CharacterRepository(executor)
        self.relationships = relationships or RelationshipRepository(executor)
        self.verifier = verifier or OwnershipVerifier(executor)

    async def create_character(self, tenant: TenantContext, name: str) -> Character:
        require_tenant(tenant)
        now = utc_now()
        character = Character(
            id=generate_character_id(),
            tenant_id=tenant.tenant_id,
            name=_require_name(name),
            created_at=now,
            updated_at=now,
        )

        created = await self.repository.create_character(character, tenant)
        if created is None:
            raise StorageFailure("Failed to create character")

        logger.info(f"👤 Created Character {created.id} ({created.name})")
        return created

    async def get_character(self, tenant: TenantContext, character_id: str) -> Character:
        require_tenant(tenant)
        character = await self.repository.get_character(character_id, tenant)
        if character is None:
            raise NotFound("Character not found")
        return character

    async def list_characters(self, tenant: TenantContext) -> List[Character]:
        require_tenant(tenant)
        return await self.repository.list_characters(tenant)

    async def create_location(self, tenant: TenantContext, name: str) -> Location:
        require_tenant(tenant)
        now = utc_now()
        location = Location(
            id=generate_location_id(),
            tenant_id=tenant.tenant_id,
            name=_require_name(name),
            created_at=now,
            updated_at=now,
        )

        created = await self.repository.create_location(location, tenant)
        if created is None:
            raise StorageFailure("Failed to create location")

        logger.info(f"📍 Created Location {created.id} ({created.name})")
        return created

    async def get_location(self, tenant: TenantContext, location_id: str) -> Location:
        require_tenant(tenant)
        location = await self.repository.get_location(location_id, tenant)
        if location is None:
            raise NotFound("Location not found")
        return location

    async def list_locations(self, tenant: TenantContext) -> List[Location]:
        require_tenant(tenant)
        return await self.repository.list_locations(tenant)

    async def create_knows(
        self,
        tenant: TenantContext,
        source_id: str,
        target_id: str,
        relationship_type: str,
        context: Optional[str] = None
    ) -> KnowsRelationship:
        """
        Record that one Character knows another.

        Raises:
            InvalidInput: blank relationship_type, or source == target
            NotFound: either Character missing or owned by another tenant
        """
        require_tenant(tenant)
        if relationship_type is None or not relationship_type.strip():
            raise InvalidInput("relationship_type is required")
        if source_id == target_id:
            raise InvalidInput("A character cannot know itself")

        for character_id in (source_id, target_id):
            if not await self.verifier.verify("Character", character_id, tenant):
                raise NotFound("Character not found")

        relationship = await self.relationships.create_knows(
            source_id, target_id, relationship_type.strip(), context, utc_now(), tenant
        )
        if relationship is None:
            raise NotFound("Character not found")

        logger.info(f"🤝 {source_id} KNOWS {target_id} ({relationship.relationship_type})")
        return relationship
