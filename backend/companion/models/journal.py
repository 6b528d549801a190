# journal models — stored journal entries as read from the journals collection
# append-only; the companion core never writes them back

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class JournalEntry(BaseModel):
    """a single journal entry from the user's history"""
    id: str
    user_id: str = Field(..., alias="userId")
    date: datetime
    content: str
    mood: Optional[int] = Field(None, ge=1, le=10, description="optional mood score 1-10")
    tags: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"populate_by_name": True, "frozen": True}
