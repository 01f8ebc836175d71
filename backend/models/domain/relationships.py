"""
Relationship domain models

Represents edges between narrative nodes. Every edge carries the tenant_id of
its owner, and both endpoints always belong to that same tenant.

Edge types:
- PARTICIPATED_IN: (Character)->(Moment)
- OCCURRED_AT: (Moment)->(Location)
- AFTER: (Moment)->(Moment), the timeline chain
- KNOWS: (Character)->(Character), typed and timestamped
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from utils.datetime_utils import neo4j_datetime_to_python, isoformat_or_none


@dataclass
class KnowsRelationship:
    """
    Directed KNOWS edge between two Characters of the same tenant
    """
    source_id: str  # ch_xxxxxxxxxxxxxxxx
    target_id: str  # ch_xxxxxxxxxxxxxxxx
    tenant_id: str
    relationship_type: str  # Free text: "friend", "rival", "mentor", ...
    context: Optional[str] = None
    since: Optional[datetime] = None
    target_name: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'KnowsRelationship':
        return cls(
            source_id=record['source_id'],
            target_id=record['target_id'],
            tenant_id=record.get('tenant_id', ''),
            relationship_type=record.get('relationship_type') or "",
            context=record.get('context'),
            since=neo4j_datetime_to_python(record.get('since')),
            target_name=record.get('target_name'),
        )

    def to_dict(self) -> dict:
        return {
            "source_id": self.source_id,
            "target_id": self.target_id,
            "target_name": self.target_name,
            "relationship_type": self.relationship_type,
            "context": self.context,
            "since": isoformat_or_none(self.since),
        }


@dataclass
class ChainLink:
    """One AFTER edge of a tenant's timeline: `moment_id` is followed by `next_id`"""
    moment_id: str
    next_id: str
