"""
Domain Models - Storage-agnostic data structures

These models represent the core domain entities independent of storage layer.
Services operate on these models, not raw graph rows.

Architecture:
- Domain models are pure Python objects (dataclasses)
- Storage details (Neo4j) are abstracted via repositories
- Every model carries the tenant_id of its owner
"""

from .tenant import TenantContext
from .moment import Moment, LinkedEntity, Projection
from .character import Character, Location
from .relationships import KnowsRelationship, ChainLink

__all__ = [
    # Identity
    'TenantContext',

    # Core entities
    'Moment',
    'Character',
    'Location',
    'LinkedEntity',
    'Projection',

    # Relationships
    'KnowsRelationship',
    'ChainLink',
]
