"""
Ownership Verifier - mandatory gate before any update or delete

A node is owned when exactly one node with the label matches on both id and
tenant_id. "Missing" and "owned by someone else" both come back False; callers
turn that into the same NotFound, so existence never leaks across tenants.
"""
import logging

from models.domain.tenant import TenantContext
from services.errors import InvalidInput
from services.graph_executor import IsolatedQueryExecutor

logger = logging.getLogger(__name__)

# Labels are interpolated into Cypher, so only these are accepted
ADDRESSABLE_LABELS = frozenset({"Moment", "Character", "Location"})


class OwnershipVerifier:
    """Confirms a node id belongs to the requesting tenant"""

    def __init__(self, executor: IsolatedQueryExecutor):
        self.executor = executor

    async def verify(self, label: str, entity_id: str, tenant: TenantContext) -> bool:
        """
        Args:
            label: Node label ('Moment', 'Character', 'Location')
            entity_id: Node id to check
            tenant: Request tenant context

        Returns:
            True iff exactly one node matches id and tenant
        """
        if label not in ADDRESSABLE_LABELS:
            raise InvalidInput(f"Unknown entity type: {label}")
        if not entity_id:
            return False

        rows = await self.executor.run_isolated_read(
            f"""
            MATCH (n:{label} {{id: $entity_id, tenant_id: $tenant_id}})
            RETURN count(n) AS matches
            """,
            {'entity_id': entity_id},
            tenant
        )
        matches = rows[0]['matches'] if rows else 0
        if matches != 1:
            logger.warning(f"Ownership check failed for {label} {entity_id} (matches={matches})")
            return False
        return True
