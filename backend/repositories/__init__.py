"""
Repository Pattern - Storage abstraction layer

Repositories hide Cypher from business logic. Consumers work with domain
models, not graph rows, and every repository reaches Neo4j only through the
IsolatedQueryExecutor.

- MomentRepository: Moment nodes, projections, timeline rows
- CharacterRepository: Character and Location nodes
- RelationshipRepository: PARTICIPATED_IN, OCCURRED_AT, AFTER, KNOWS edges
"""
from .moment_repository import MomentRepository
from .character_repository import CharacterRepository
from .relationship_repository import RelationshipRepository
from .update_builder import SparseUpdateBuilder

__all__ = [
    'MomentRepository',
    'CharacterRepository',
    'RelationshipRepository',
    'SparseUpdateBuilder',
]
