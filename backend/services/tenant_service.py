"""
Tenant Service - account-level operations on a tenant's whole graph
"""
import logging

from models.domain.tenant import TenantContext
from repositories.relationship_repository import RelationshipRepository
from services.graph_executor import IsolatedQueryExecutor, require_tenant

logger = logging.getLogger(__name__)


class TenantService:

    def __init__(self, executor: IsolatedQueryExecutor):
        self.executor = executor
        self.relationships = RelationshipRepository(executor)

    async def purge(self, tenant: TenantContext) -> int:
        """
        Remove every node (and attached edge) owned by the tenant.

        Called when the external user store removes an account. Nodes of
        other tenants are never matched.

        Returns:
            Number of nodes deleted
        """
        require_tenant(tenant)
        deleted = await self.relationships.purge_tenant(tenant)
        logger.warning(f"🧹 Purged {deleted} nodes for tenant {tenant.tenant_id}")
        return deleted
