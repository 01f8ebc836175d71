"""
Relationship Repository - tenant-stamped edges between narrative nodes

Each edge query matches BOTH endpoints on tenant_id and stamps the edge with
the same tenant_id, so an edge can never span two tenants even if an earlier
ownership check was skipped.
"""
import logging
from datetime import datetime
from typing import Optional

from models.domain.relationships import KnowsRelationship
from models.domain.tenant import TenantContext
from services.graph_executor import IsolatedQueryExecutor

logger = logging.getLogger(__name__)

LINK_CHARACTER = """
MATCH (c:Character {id: $character_id, tenant_id: $tenant_id})
MATCH (m:Moment {id: $moment_id, tenant_id: $tenant_id})
MERGE (c)-[r:PARTICIPATED_IN {tenant_id: $tenant_id}]->(m)
ON CREATE SET r.created_at = $created_at
RETURN c.id AS character_id, m.id AS moment_id
"""

UNLINK_CHARACTER = """
MATCH (c:Character {id: $character_id, tenant_id: $tenant_id})
      -[r:PARTICIPATED_IN {tenant_id: $tenant_id}]->
      (m:Moment {id: $moment_id, tenant_id: $tenant_id})
DELETE r
RETURN count(*) AS removed
"""

LINK_LOCATION = """
MATCH (m:Moment {id: $moment_id, tenant_id: $tenant_id})
MATCH (l:Location {id: $location_id, tenant_id: $tenant_id})
MERGE (m)-[r:OCCURRED_AT {tenant_id: $tenant_id}]->(l)
ON CREATE SET r.created_at = $created_at
RETURN m.id AS moment_id, l.id AS location_id
"""

UNLINK_LOCATION = """
MATCH (m:Moment {id: $moment_id, tenant_id: $tenant_id})
      -[r:OCCURRED_AT {tenant_id: $tenant_id}]->
      (l:Location {id: $location_id, tenant_id: $tenant_id})
DELETE r
RETURN count(*) AS removed
"""

# Keeps the chain singly linked and acyclic: no second outgoing edge from
# `a`, no second incoming edge into `b`, and `b` must not already reach `a`.
LINK_NEXT = """
MATCH (a:Moment {id: $moment_id, tenant_id: $tenant_id})
MATCH (b:Moment {id: $next_id, tenant_id: $tenant_id})
WHERE a <> b
  AND NOT EXISTS { MATCH (a)-[:AFTER]->(:Moment) }
  AND NOT EXISTS { MATCH (:Moment)-[:AFTER]->(b) }
  AND NOT EXISTS { MATCH (b)-[:AFTER*]->(a) }
CREATE (a)-[r:AFTER {tenant_id: $tenant_id, created_at: $created_at}]->(b)
RETURN a.id AS moment_id, b.id AS next_id
"""

UNLINK_NEXT = """
MATCH (a:Moment {id: $moment_id, tenant_id: $tenant_id})
      -[r:AFTER {tenant_id: $tenant_id}]->
      (:Moment {tenant_id: $tenant_id})
DELETE r
RETURN count(*) AS removed
"""

CREATE_KNOWS = """
MATCH (a:Character {id: $source_id, tenant_id: $tenant_id})
MATCH (b:Character {id: $target_id, tenant_id: $tenant_id})
CREATE (a)-[r:KNOWS {
    tenant_id: $tenant_id,
    relationship_type: $relationship_type,
    context: $context,
    since: $since
}]->(b)
RETURN a.id AS source_id,
       b.id AS target_id,
       b.name AS target_name,
       r.tenant_id AS tenant_id,
       r.relationship_type AS relationship_type,
       r.context AS context,
       r.since AS since
"""

PURGE_TENANT = """
MATCH (n {tenant_id: $tenant_id})
WITH collect(n) AS nodes, count(n) AS total
FOREACH (node IN nodes | DETACH DELETE node)
RETURN total AS deleted
"""


class RelationshipRepository:
    """Edge writes for PARTICIPATED_IN, OCCURRED_AT, AFTER and KNOWS"""

    def __init__(self, executor: IsolatedQueryExecutor):
        self.executor = executor

    async def link_character(
        self, moment_id: str, character_id: str, created_at: datetime, tenant: TenantContext
    ) -> bool:
        rows = await self.executor.run_isolated_write(LINK_CHARACTER, {
            'moment_id': moment_id,
            'character_id': character_id,
            'created_at': created_at,
        }, tenant)
        return bool(rows)

    async def unlink_character(self, moment_id: str, character_id: str, tenant: TenantContext) -> int:
        rows = await self.executor.run_isolated_write(UNLINK_CHARACTER, {
            'moment_id': moment_id,
            'character_id': character_id,
        }, tenant)
        return rows[0]['removed'] if rows else 0

    async def link_location(
        self, moment_id: str, location_id: str, created_at: datetime, tenant: TenantContext
    ) -> bool:
        rows = await self.executor.run_isolated_write(LINK_LOCATION, {
            'moment_id': moment_id,
            'location_id': location_id,
            'created_at': created_at,
        }, tenant)
        return bool(rows)

    async def unlink_location(self, moment_id: str, location_id: str, tenant: TenantContext) -> int:
        rows = await self.executor.run_isolated_write(UNLINK_LOCATION, {
            'moment_id': moment_id,
            'location_id': location_id,
        }, tenant)
        return rows[0]['removed'] if rows else 0

    async def link_next(
        self, moment_id: str, next_id: str, created_at: datetime, tenant: TenantContext
    ) -> bool:
        """Create the AFTER edge; False when it would break the chain"""
        rows = await self.executor.run_isolated_write(LINK_NEXT, {
            'moment_id': moment_id,
            'next_id': next_id,
            'created_at': created_at,
        }, tenant)
        return bool(rows)

    async def unlink_next(self, moment_id: str, tenant: TenantContext) -> int:
        rows = await self.executor.run_isolated_write(
            UNLINK_NEXT, {'moment_id': moment_id}, tenant
        )
        return rows[0]['removed'] if rows else 0

    async def create_knows(
        self,
        source_id: str,
        target_id: str,
        relationship_type: str,
        context: Optional[str],
        since: datetime,
        tenant: TenantContext
    ) -> Optional[KnowsRelationship]:
        rows = await self.executor.run_isolated_write(CREATE_KNOWS, {
            'source_id': source_id,
            'target_id': target_id,
            'relationship_type': relationship_type,
            'context': context,
            'since': since,
        }, tenant)
        if not rows:
            return None
        return KnowsRelationship.from_record(rows[0])

    async def purge_tenant(self, tenant: TenantContext) -> int:
        """Detach-delete every node owned by the tenant; returns the node count"""
        rows = await self.executor.run_isolated_write(PURGE_TENANT, {}, tenant)
        return rows[0]['deleted'] if rows else 0
