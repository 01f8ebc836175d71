"""
Database Configuration
======================

Centralized graph store connection configuration.
Every service reaches Neo4j through the isolated query executor built here.
"""
from dataclasses import dataclass
from typing import Optional

from .settings import Settings, get_settings


@dataclass
class Neo4jConfig:
    """Neo4j connection configuration."""
    uri: str
    user: str
    password: str
    database: str = "neo4j"
    max_pool_size: int = 50
    acquisition_timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'Neo4jConfig':
        """Create config from application settings."""
        settings = settings or get_settings()
        if not settings.neo4j_uri:
            raise ValueError("NEO4J_URI environment variable is required")

        return cls(
            uri=settings.neo4j_uri,
            user=settings.neo4j_user,
            password=settings.neo4j_password,
            database=settings.neo4j_database,
            max_pool_size=settings.neo4j_max_pool_size,
            acquisition_timeout=settings.neo4j_acquisition_timeout,
        )

    def to_driver_kwargs(self) -> dict:
        """Convert to AsyncGraphDatabase.driver kwargs."""
        return {
            'auth': (self.user, self.password),
            'max_connection_pool_size': self.max_pool_size,
            'connection_acquisition_timeout': self.acquisition_timeout,
        }


def get_neo4j_config() -> Neo4jConfig:
    """Get Neo4j configuration from settings."""
    return Neo4jConfig.from_settings()


async def create_query_executor(config: Optional[Neo4jConfig] = None):
    """Create and connect the isolated query executor."""
    from services.graph_executor import IsolatedQueryExecutor
    executor = IsolatedQueryExecutor(config or get_neo4j_config())
    await executor.connect()
    return executor
