# companion message models — the structured output handed to the client surface

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, Field

from companion.models.suggestion import CopingSuggestion

ResponseType = Literal[
    "mood-triggered",
    "journal-informed",
    "therapy-history",
    "proactive-checkin",
    "general",
    "crisis",
]
Sender = Literal["user", "assistant", "system"]


def new_message_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MessageMetadata(BaseModel):
    """how and why a companion message was produced"""
    response_type: ResponseType = Field(..., alias="responseType")
    confidence: float = Field(..., ge=0.0, le=1.0)
    mood_detected: Optional[int] = Field(None, alias="moodDetected")
    trigger_detected: Optional[str] = Field(None, alias="triggerDetected")
    suggestions: Optional[list[CopingSuggestion]] = None
    emotional_context: Optional[str] = Field(None, alias="emotionalContext")
    journal_entries_referenced: list[str] = Field(default_factory=list, alias="journalEntriesReferenced")
    therapist_notes_used: list[str] = Field(default_factory=list, alias="therapistNotesUsed")

    model_config = {"populate_by_name": True}


class CompanionMessage(BaseModel):
    """a single assistant message with its metadata"""
    id: str = Field(default_factory=new_message_id)
    sender: Sender = "assistant"
    content: str
    timestamp: str = Field(default_factory=utc_now_iso)
    metadata: MessageMetadata

    model_config = {"populate_by_name": True}
