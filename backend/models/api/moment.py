"""
Pydantic request models for the narrative graph API
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class MomentCreate(BaseModel):
    """Body for POST /api/moments - title or content must be non-blank"""
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    preview: Optional[str] = None
    timestamp: Optional[str] = None


class MomentUpdate(BaseModel):
    """
    Body for PATCH /api/moments/{id}

    Sparse: only keys present in the body are applied (see model_fields_set).
    Unknown keys are rejected rather than silently dropped.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    preview: Optional[str] = None
    timestamp: Optional[str] = None

    def present_fields(self) -> dict:
        """Fields explicitly sent by the client, including explicit nulls"""
        return self.model_dump(exclude_unset=True)


class NamedEntityCreate(BaseModel):
    """Body for POST /api/characters and POST /api/locations"""
    name: str


class KnowsCreate(BaseModel):
    """Body for POST /api/characters/{id}/relationships"""
    target_id: str
    relationship_type: str = Field(..., min_length=1)
    context: Optional[str] = None
