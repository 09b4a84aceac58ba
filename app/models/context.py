# app/models/context.py
import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Context(BaseModel):
    """
    A node in a forest of context trees.

    `data` is inherited by descendants; `metadata` is not. Parent and children
    are referenced by id only, and either side may point at a context that has
    since been deleted.
    """

    id: str
    data: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime.datetime = Field(default_factory=utcnow)
    updated_at: datetime.datetime = Field(default_factory=utcnow)
    # Stored and persisted, never enforced by the store.
    expires_at: Optional[datetime.datetime] = None
    parent_id: Optional[str] = None
    children_ids: List[str] = Field(default_factory=list)
    source: str = ""

    def __repr__(self):
        return f"<Context(id='{self.id}', source='{self.source}', parent_id={self.parent_id!r})>"
