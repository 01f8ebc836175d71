"""
Moment Repository - Neo4j storage for Moments

Every query here filters nodes and edges on tenant_id = $tenant_id; the
executor injects that parameter from the request's TenantContext.

Read projections:
- full: whole node + linked Characters (PARTICIPATED_IN) and Locations (OCCURRED_AT)
- lightweight: every property except content (content is never loaded)
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from models.domain.moment import LinkedEntity, Moment
from models.domain.relationships import ChainLink
from models.domain.tenant import TenantContext
from repositories.update_builder import SparseUpdateBuilder
from services.graph_executor import IsolatedQueryExecutor

logger = logging.getLogger(__name__)

# Properties a PATCH may touch; created_at is deliberately absent
MUTABLE_FIELDS = ("title", "content", "summary", "preview", "timestamp", "updated_at")

LIGHTWEIGHT_PROJECTION = """m {
    .id, .tenant_id, .title, .summary, .preview, .timestamp, .created_at, .updated_at
}"""

CREATE_MOMENT = """
CREATE (m:Moment {
    id: $id,
    tenant_id: $tenant_id,
    title: $title,
    content: $content,
    summary: $summary,
    preview: $preview,
    timestamp: $timestamp,
    created_at: $created_at,
    updated_at: $updated_at
})
RETURN m
"""

GET_MOMENT_FULL = """
MATCH (m:Moment {id: $id, tenant_id: $tenant_id})
OPTIONAL MATCH (m)<-[:PARTICIPATED_IN {tenant_id: $tenant_id}]-(c:Character {tenant_id: $tenant_id})
WITH m, collect(DISTINCT {id: c.id, name: c.name}) AS characters
OPTIONAL MATCH (m)-[:OCCURRED_AT {tenant_id: $tenant_id}]->(l:Location {tenant_id: $tenant_id})
RETURN m, characters, collect(DISTINCT {id: l.id, name: l.name}) AS locations
"""

GET_MOMENT_LIGHTWEIGHT = f"""
MATCH (m:Moment {{id: $id, tenant_id: $tenant_id}})
RETURN {LIGHTWEIGHT_PROJECTION} AS moment
"""

LIST_MOMENTS = f"""
MATCH (m:Moment {{tenant_id: $tenant_id}})
RETURN {LIGHTWEIGHT_PROJECTION} AS moment
ORDER BY m.created_at DESC, m.id ASC
SKIP toInteger($skip)
LIMIT toInteger($limit)
"""

UPDATE_MOMENT_TEMPLATE = """
MATCH (m:Moment {{id: $id, tenant_id: $tenant_id}})
{set_clause}
RETURN m
"""

DELETE_MOMENT = """
MATCH (m:Moment {id: $id, tenant_id: $tenant_id})
DETACH DELETE m
RETURN count(*) AS deleted
"""

TIMELINE_ROWS = f"""
MATCH (m:Moment {{tenant_id: $tenant_id}})
OPTIONAL MATCH (m)-[:AFTER {{tenant_id: $tenant_id}}]->(n:Moment {{tenant_id: $tenant_id}})
RETURN {LIGHTWEIGHT_PROJECTION} AS moment, collect(n.id) AS next_ids
"""


def _linked(rows: Optional[List[Dict[str, Any]]]) -> List[LinkedEntity]:
    """Drop the {id: null} rows OPTIONAL MATCH yields when nothing is linked"""
    return [
        LinkedEntity(id=row['id'], name=row.get('name'))
        for row in (rows or [])
        if row and row.get('id')
    ]


class MomentRepository:
    """
    Repository for Moment domain model

    Neo4j is the only storage for moments.
    """

    def __init__(self, executor: IsolatedQueryExecutor):
        self.executor = executor

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    async def create(self, moment: Moment, tenant: TenantContext) -> Optional[Moment]:
        rows = await self.executor.run_isolated_write(CREATE_MOMENT, {
            'id': moment.id,
            'title': moment.title,
            'content': moment.content if moment.content is not None else "",
            'summary': moment.summary,
            'preview': moment.preview,
            'timestamp': moment.timestamp,
            'created_at': moment.created_at,
            'updated_at': moment.updated_at,
        }, tenant)
        if not rows:
            return None
        return Moment.from_record(rows[0]['m'])

    async def update(
        self,
        moment_id: str,
        changes: Dict[str, Any],
        updated_at: datetime,
        tenant: TenantContext
    ) -> Optional[Moment]:
        """
        Apply a sparse update; only keys in `changes` are written.

        Returns:
            Updated Moment, or None if it vanished between check and write
        """
        builder = SparseUpdateBuilder('m', MUTABLE_FIELDS)
        for field, value in changes.items():
            builder.set(field, value)
        builder.touch('updated_at', updated_at)
        set_clause, params = builder.render()
        params['id'] = moment_id

        rows = await self.executor.run_isolated_write(
            UPDATE_MOMENT_TEMPLATE.format(set_clause=set_clause),
            params,
            tenant
        )
        if not rows:
            return None
        return Moment.from_record(rows[0]['m'])

    async def delete(self, moment_id: str, tenant: TenantContext) -> bool:
        """DETACH DELETE: edges go, linked Characters/Locations/Moments stay"""
        rows = await self.executor.run_isolated_write(
            DELETE_MOMENT, {'id': moment_id}, tenant
        )
        return bool(rows) and rows[0].get('deleted', 0) > 0

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_full(self, moment_id: str, tenant: TenantContext) -> Optional[Moment]:
        rows = await self.executor.run_isolated_read(
            GET_MOMENT_FULL, {'id': moment_id}, tenant
        )
        if not rows or not rows[0].get('m'):
            return None
        row = rows[0]
        moment = Moment.from_record(row['m'])
        moment.characters = _linked(row.get('characters'))
        moment.locations = _linked(row.get('locations'))
        return moment

    async def get_lightweight(self, moment_id: str, tenant: TenantContext) -> Optional[Moment]:
        rows = await self.executor.run_isolated_read(
            GET_MOMENT_LIGHTWEIGHT, {'id': moment_id}, tenant
        )
        if not rows:
            return None
        return Moment.from_record(rows[0]['moment'])

    async def list(self, limit: int, skip: int, tenant: TenantContext) -> List[Moment]:
        """Lightweight moments, newest first"""
        rows = await self.executor.run_isolated_read(
            LIST_MOMENTS, {'limit': limit, 'skip': skip}, tenant
        )
        return [Moment.from_record(row['moment']) for row in rows]

    async def get_chain(self, tenant: TenantContext) -> Tuple[List[Moment], List[ChainLink]]:
        """All lightweight moments of the tenant plus every AFTER edge between them"""
        rows = await self.executor.run_isolated_read(TIMELINE_ROWS, {}, tenant)
        moments = []
        links = []
        for row in rows:
            moment = Moment.from_record(row['moment'])
            moments.append(moment)
            for next_id in row.get('next_ids') or []:
                if next_id:
                    links.append(ChainLink(moment_id=moment.id, next_id=next_id))
        return moments, links
