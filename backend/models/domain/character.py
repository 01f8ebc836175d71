"""
Character and Location domain models
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none

from .relationships import KnowsRelationship


@dataclass
class Character:
    """
    Character domain model

    Storage: Neo4j (:Character node). Owned by a tenant independently of any
    Moment; deleting a Moment never deletes its characters.

    ID format: ch_xxxxxxxxxxxxxxxx
    """
    id: str
    tenant_id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Outgoing KNOWS edges, populated by single-character reads
    relationships: List[KnowsRelationship] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Character':
        return cls(
            id=record['id'],
            tenant_id=record.get('tenant_id', ''),
            name=record.get('name') or "",
            created_at=neo4j_datetime_to_python(record.get('created_at')),
            updated_at=neo4j_datetime_to_python(record.get('updated_at')),
        )

    def to_dict(self, include_relationships: bool = False) -> dict:
        data = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
        if include_relationships:
            data["relationships"] = [r.to_dict() for r in self.relationships]
        return data


@dataclass
class Location:
    """
    Location domain model

    Storage: Neo4j (:Location node)

    ID format: lo_xxxxxxxxxxxxxxxx
    """
    id: str
    tenant_id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Location':
        return cls(
            id=record['id'],
            tenant_id=record.get('tenant_id', ''),
            name=record.get('name') or "",
            created_at=neo4j_datetime_to_python(record.get('created_at')),
            updated_at=neo4j_datetime_to_python(record.get('updated_at')),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
