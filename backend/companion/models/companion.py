# companion api models — entry-point payloads and results
# results carry the companion message plus the extras of each entry point

from typing import Literal, Optional
from pydantic import BaseModel, Field

from companion.models.message import CompanionMessage
from companion.models.suggestion import CopingSuggestion


# requests

class MoodTriggerRequest(BaseModel):
    """a mood value logged from the mood picker"""
    mood: Optional[int] = Field(None, description="mood score 1-10")
    trigger: Optional[str] = Field(None, max_length=500, description="what set off this mood")
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = {"populate_by_name": True}


class JournalAnalysisRequest(BaseModel):
    """a journal entry submitted from the journal editor"""
    content: str = Field(..., description="journal entry text")
    mood: Optional[int] = Field(None, description="optional mood score 1-10")
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = {"populate_by_name": True}


class TherapyMessageRequest(BaseModel):
    """a free-text chat message"""
    message: str
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = {"populate_by_name": True}


class CheckinRequest(BaseModel):
    """a scheduled proactive check-in request"""
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = {"populate_by_name": True}


# results

class MoodTriggerResult(BaseModel):
    message: CompanionMessage
    suggestions: list[CopingSuggestion] = Field(default_factory=list)


class JournalAnalysisResult(BaseModel):
    message: CompanionMessage
    insights: list[str] = Field(default_factory=list)
    suggestions: list[CopingSuggestion] = Field(default_factory=list)


class TherapyHistoryResult(BaseModel):
    message: CompanionMessage
    relevant_techniques: list[str] = Field(default_factory=list, alias="relevantTechniques")
    homework_reminders: list[str] = Field(default_factory=list, alias="homeworkReminders")

    model_config = {"populate_by_name": True}


class CheckinResult(BaseModel):
    message: CompanionMessage
    checkin_type: Optional[Literal["mood-pattern", "session-prep", "goal-progress", "general-support"]] = Field(
        None, alias="checkinType"
    )
    suggestions: list[CopingSuggestion] = Field(default_factory=list)

    model_config = {"populate_by_name": True}
