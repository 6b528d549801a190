# mood models — logged mood entries from the mood_entries collection

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class MoodEntry(BaseModel):
    """one logged mood value; immutable once logged"""
    id: str
    user_id: str = Field(..., alias="userId")
    date: datetime
    mood: int = Field(..., ge=1, le=10, description="mood score 1-10")
    trigger: Optional[str] = None

    model_config = {"populate_by_name": True, "frozen": True}
