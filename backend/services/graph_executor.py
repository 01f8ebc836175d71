"""
Isolated Query Executor - the only path to the graph store

Neo4j is shared by every tenant. Isolation is enforced by two rules:
- Every query goes through run_isolated_read / run_isolated_write, which
  require an explicit TenantContext and inject its id as $tenant_id.
- Every query text touching tenant-owned data filters nodes AND edges on
  tenant_id = $tenant_id. The executor does not parse or rewrite Cypher;
  callers own that half of the contract.

Node properties:
- Moment: {id, tenant_id, title, content, summary, preview, timestamp, created_at, updated_at}
- Character / Location: {id, tenant_id, name, created_at, updated_at}

Relationships (all carry tenant_id):
- (Character)-[:PARTICIPATED_IN]->(Moment)
- (Moment)-[:OCCURRED_AT]->(Location)
- (Moment)-[:AFTER]->(Moment)  - singly-linked timeline chain
- (Character)-[:KNOWS {relationship_type, context, since}]->(Character)
"""
import logging
from typing import Any, Dict, List, Optional

from neo4j import AsyncGraphDatabase, AsyncDriver, READ_ACCESS, WRITE_ACCESS
from neo4j.exceptions import DriverError, Neo4jError

from config.database import Neo4jConfig
from models.domain.tenant import TenantContext
from services.errors import StorageFailure, Unauthorized

logger = logging.getLogger(__name__)

# Parameter key every tenant-scoped query must filter on
TENANT_PARAM = "tenant_id"


def require_tenant(tenant: Optional[TenantContext]) -> str:
    """Return the tenant id or raise Unauthorized if it is absent or blank."""
    if not isinstance(tenant, TenantContext) or not tenant.is_valid:
        logger.warning("Rejected graph query without a tenant context")
        raise Unauthorized()
    return tenant.tenant_id


def scoped_parameters(params: Optional[Dict[str, Any]], tenant: Optional[TenantContext]) -> Dict[str, Any]:
    """Copy params and inject the tenant id under TENANT_PARAM (injected value wins)."""
    tenant_id = require_tenant(tenant)
    scoped = dict(params or {})
    if TENANT_PARAM in scoped and scoped[TENANT_PARAM] != tenant_id:
        logger.warning("Caller-supplied tenant_id parameter overridden by request tenant")
    scoped[TENANT_PARAM] = tenant_id
    return scoped


class IsolatedQueryExecutor:
    """Tenant-scoped wrapper around the async Neo4j driver"""

    def __init__(self, config: Neo4jConfig, driver: Optional[AsyncDriver] = None):
        self.config = config
        self.driver: Optional[AsyncDriver] = driver

    async def connect(self):
        """Establish the pooled driver and verify connectivity"""
        if not self.driver:
            self.driver = AsyncGraphDatabase.driver(
                self.config.uri,
                **self.config.to_driver_kwargs()
            )
            try:
                await self.driver.verify_connectivity()
            except (Neo4jError, DriverError) as e:
                logger.error(f"Neo4j connectivity check failed: {type(e).__name__}")
                await self.close()
                raise StorageFailure() from e
            logger.info("✅ Connected to Neo4j")

    async def close(self):
        """Close the driver and its connection pool"""
        if self.driver:
            await self.driver.close()
            self.driver = None
            logger.info("🔌 Closed Neo4j connection")

    def _require_driver(self) -> AsyncDriver:
        if self.driver is None:
            logger.error("Graph query issued before the executor was connected")
            raise StorageFailure()
        return self.driver

    async def run_isolated_read(
        self,
        query: str,
        params: Optional[Dict[str, Any]],
        tenant: Optional[TenantContext]
    ) -> List[Dict[str, Any]]:
        """
        Run a tenant-scoped read query.

        Args:
            query: Cypher text filtering on $tenant_id
            params: Query parameters (tenant_id is injected)
            tenant: Request tenant context

        Returns:
            Rows as dicts (nodes become property dicts)

        Raises:
            Unauthorized: tenant missing or blank
            StorageFailure: any driver or server error
        """
        scoped = scoped_parameters(params, tenant)
        driver = self._require_driver()
        try:
            async with driver.session(
                database=self.config.database,
                default_access_mode=READ_ACCESS
            ) as session:
                result = await session.run(query, scoped)
                return await result.data()
        except (Neo4jError, DriverError) as e:
            logger.error(f"Isolated read failed: {type(e).__name__}")
            raise StorageFailure() from e

    async def run_isolated_write(
        self,
        query: str,
        params: Optional[Dict[str, Any]],
        tenant: Optional[TenantContext]
    ) -> List[Dict[str, Any]]:
        """
        Run a tenant-scoped write query inside one explicit transaction.

        The transaction commits only after all rows are consumed; any failure
        rolls it back, so a call never leaves a partial write behind. Explicit
        transactions are not retried by the driver.

        Raises:
            Unauthorized: tenant missing or blank
            StorageFailure: any driver or server error
        """
        scoped = scoped_parameters(params, tenant)
        driver = self._require_driver()
        try:
            async with driver.session(
                database=self.config.database,
                default_access_mode=WRITE_ACCESS
            ) as session:
                async with await session.begin_transaction() as tx:
                    result = await tx.run(query, scoped)
                    rows = await result.data()
                    await tx.commit()
                    return rows
        except (Neo4jError, DriverError) as e:
            logger.error(f"Isolated write failed: {type(e).__name__}")
            raise StorageFailure() from e

    async def verify_connectivity(self) -> bool:
        """Check the store answers; returns False instead of raising"""
        if self.driver is None:
            return False
        try:
            async with self.driver.session(database=self.config.database) as session:
                result = await session.run("RETURN 1 AS num")
                record = await result.single()
                return record is not None and record["num"] == 1
        except (Neo4jError, DriverError) as e:
            logger.error(f"Neo4j connectivity check failed: {type(e).__name__}")
            return False

    async def initialize_constraints(self):
        """Create uniqueness constraints and tenant indexes (idempotent)"""
        statements = [
            "CREATE CONSTRAINT moment_id IF NOT EXISTS FOR (m:Moment) REQUIRE m.id IS UNIQUE",
            "CREATE CONSTRAINT character_id IF NOT EXISTS FOR (c:Character) REQUIRE c.id IS UNIQUE",
            "CREATE CONSTRAINT location_id IF NOT EXISTS FOR (l:Location) REQUIRE l.id IS UNIQUE",
            "CREATE INDEX moment_tenant IF NOT EXISTS FOR (m:Moment) ON (m.tenant_id, m.created_at)",
            "CREATE INDEX character_tenant IF NOT EXISTS FOR (c:Character) ON (c.tenant_id)",
            "CREATE INDEX location_tenant IF NOT EXISTS FOR (l:Location) ON (l.tenant_id)",
        ]
        driver = self._require_driver()
        try:
            async with driver.session(database=self.config.database) as session:
                for statement in statements:
                    result = await session.run(statement)
                    await result.consume()
        except (Neo4jError, DriverError) as e:
            logger.error(f"Schema initialization failed: {type(e).__name__}")
            raise StorageFailure() from e
        logger.info("📐 Graph constraints and indexes ensured")
