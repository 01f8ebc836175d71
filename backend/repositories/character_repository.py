"""
Character / Location Repository - Neo4j storage for referenced entities

Characters and Locations are owned by a tenant independently of any Moment.
They are linked to Moments by non-owning edges (see RelationshipRepository).
"""
import logging
from typing import List, Optional

from models.domain.character import Character, Location
from models.domain.relationships import KnowsRelationship
from models.domain.tenant import TenantContext
from services.graph_executor import IsolatedQueryExecutor

logger = logging.getLogger(__name__)

CREATE_CHARACTER = """
CREATE (c:Character {
    id: $id,
    tenant_id: $tenant_id,
    name: $name,
    created_at: $created_at,
    updated_at: $updated_at
})
RETURN c
"""

GET_CHARACTER = """
MATCH (c:Character {id: $id, tenant_id: $tenant_id})
OPTIONAL MATCH (c)-[r:KNOWS {tenant_id: $tenant_id}]->(o:Character {tenant_id: $tenant_id})
RETURN c, collect(CASE WHEN o IS NULL THEN NULL ELSE {
    source_id: c.id,
    target_id: o.id,
    target_name: o.name,
    tenant_id: r.tenant_id,
    relationship_type: r.relationship_type,
    context: r.context,
    since: r.since
} END) AS relationships
"""

LIST_CHARACTERS = """
MATCH (c:Character {tenant_id: $tenant_id})
RETURN c
ORDER BY c.name ASC, c.id ASC
"""

CREATE_LOCATION = """
CREATE (l:Location {
    id: $id,
    tenant_id: $tenant_id,
    name: $name,
    created_at: $created_at,
    updated_at: $updated_at
})
RETURN l
"""

GET_LOCATION = """
MATCH (l:Location {id: $id, tenant_id: $tenant_id})
RETURN l
"""

LIST_LOCATIONS = """
MATCH (l:Location {tenant_id: $tenant_id})
RETURN l
ORDER BY l.name ASC, l.id ASC
"""


class CharacterRepository:
    """Repository for Character and Location domain models"""

    def __init__(self, executor: IsolatedQueryExecutor):
        self.executor = executor

    # =========================================================================
    # CHARACTERS
    # =========================================================================

    async def create_character(self, character: Character, tenant: TenantContext) -> Optional[Character]:
        rows = await self.executor.run_isolated_write(CREATE_CHARACTER, {
            'id': character.id,
            'name': character.name,
            'created_at': character.created_at,
            'updated_at': character.updated_at,
        }, tenant)
        if not rows:
            return None
        return Character.from_record(rows[0]['c'])

    async def get_character(self, character_id: str, tenant: TenantContext) -> Optional[Character]:
        """Character with its outgoing KNOWS relationships"""
        rows = await self.executor.run_isolated_read(
            GET_CHARACTER, {'id': character_id}, tenant
        )
        if not rows or not rows[0].get('c'):
            return None
        character = Character.from_record(rows[0]['c'])
        character.relationships = [
            KnowsRelationship.from_record(r)
            for r in rows[0].get('relationships') or []
            if r
        ]
        return character

    async def list_characters(self, tenant: TenantContext) -> List[Character]:
        rows = await self.executor.run_isolated_read(LIST_CHARACTERS, {}, tenant)
        return [Character.from_record(row['c']) for row in rows]

    # =========================================================================
    # LOCATIONS
    # =========================================================================

    async def create_location(self, location: Location, tenant: TenantContext) -> Optional[Location]:
        rows = await self.executor.run_isolated_write(CREATE_LOCATION, {
            'id': location.id,
            'name': location.name,
            'created_at': location.created_at,
            'updated_at': location.updated_at,
        }, tenant)
        if not rows:
            return None
        return Location.from_record(rows[0]['l'])

    async def get_location(self, location_id: str, tenant: TenantContext) -> Optional[Location]:
        rows = await self.executor.run_isolated_read(
            GET_LOCATION, {'id': location_id}, tenant
        )
        if not rows:
            return None
        return Location.from_record(rows[0]['l'])

    async def list_locations(self, tenant: TenantContext) -> List[Location]:
        rows = await self.executor.run_isolated_read(LIST_LOCATIONS, {}, tenant)
        return [Location.from_record(row['l']) for row in rows]
