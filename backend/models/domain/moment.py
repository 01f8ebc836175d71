"""
Moment domain model
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


class Projection(str, Enum):
    """Read modes for a Moment"""
    FULL = "full"              # All attributes plus linked characters/locations
    LIGHTWEIGHT = "lightweight"  # All attributes except content


@dataclass
class LinkedEntity:
    """A Character or Location reached over a PARTICIPATED_IN / OCCURRED_AT edge"""
    id: str
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass
class Moment:
    """
    Moment domain model - storage-agnostic representation

    Storage: Neo4j (:Moment node)

    content is None when the record was loaded with the lightweight
    projection; characters/locations are only populated by a full read.

    ID format: mo_xxxxxxxxxxxxxxxx
    """
    id: str
    tenant_id: str
    title: str = ""
    content: Optional[str] = None
    summary: Optional[str] = None
    preview: str = ""
    timestamp: Optional[str] = None  # Narrative-time marker, opaque

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Populated by full reads only
    characters: List[LinkedEntity] = field(default_factory=list)
    locations: List[LinkedEntity] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Moment':
        """Build from a node property dict returned by the executor"""
        return cls(
            id=record['id'],
            tenant_id=record.get('tenant_id', ''),
            title=record.get('title') or "",
            content=record.get('content'),
            summary=record.get('summary'),
            preview=record.get('preview') or "",
            timestamp=record.get('timestamp'),
            created_at=neo4j_datetime_to_python(record.get('created_at')),
            updated_at=neo4j_datetime_to_python(record.get('updated_at')),
        )

    def to_dict(self, projection: Projection = Projection.FULL) -> dict:
        data = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "title": self.title,
            "summary": self.summary,
            "preview": self.preview,
            "timestamp": self.timestamp,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }
        if projection == Projection.FULL:
            data["content"] = self.content if self.content is not None else ""
            data["characters"] = [c.to_dict() for c in self.characters]
            data["locations"] = [l.to_dict() for l in self.locations]
        return data
