# therapy models — session records written by the therapist-side workflow
# read-only to the companion core

from datetime import datetime
from pydantic import BaseModel, Field


class TherapySession(BaseModel):
    """a therapy session with goals, homework and techniques practised"""
    id: str
    user_id: str = Field(..., alias="userId")
    date: datetime
    notes: str = ""
    goals: list[str] = Field(default_factory=list)
    homework: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)
    # homework items the user has already marked as done
    completed_homework: list[str] = Field(default_factory=list, alias="completedHomework")

    model_config = {"populate_by_name": True, "frozen": True}
