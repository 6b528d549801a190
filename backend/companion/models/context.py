# context models — derived snapshots of a user's mood, journal and therapy history
# recomputed on every request, never persisted

from typing import Literal
from pydantic import BaseModel, Field

from companion.models.mood import MoodEntry
from companion.models.journal import JournalEntry
from companion.models.therapy import TherapySession

MoodTrend = Literal["improving", "declining", "stable"]

NEUTRAL_MOOD = 5

DEFAULT_APPROACHES = frozenset({"CBT", "mindfulness"})
PLACEHOLDER_GOALS = ("Improve mood regulation", "Develop coping strategies", "Enhance self-awareness")
PLACEHOLDER_HOMEWORK = ("Daily mood tracking", "Breathing exercises", "Thought records")


class MoodContext(BaseModel):
    current_mood: int = NEUTRAL_MOOD
    mood_trend: MoodTrend = "stable"
    recent_moods: list[MoodEntry] = Field(default_factory=list)  # most recent first
    trigger_patterns: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class JournalContext(BaseModel):
    recent_entries: list[JournalEntry] = Field(default_factory=list)  # most recent first
    emotional_themes: frozenset[str] = Field(default_factory=frozenset)
    progress_indicators: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class TherapyContext(BaseModel):
    recent_sessions: list[TherapySession] = Field(default_factory=list)  # most recent first
    therapeutic_approaches: frozenset[str] = Field(default_factory=frozenset)
    current_goals: list[str] = Field(default_factory=list)
    assigned_homework: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


# explicit defaults for the "no data" path

def default_mood_context() -> MoodContext:
    """neutral mood, stable trend, no history"""
    return MoodContext(current_mood=NEUTRAL_MOOD, mood_trend="stable", recent_moods=[], trigger_patterns=[])


def default_journal_context() -> JournalContext:
    """no entries, no themes, no progress"""
    return JournalContext(recent_entries=[], emotional_themes=frozenset(), progress_indicators=[])


def default_therapy_context() -> TherapyContext:
    """generic cbt + mindfulness approaches with placeholder goals and homework"""
    return TherapyContext(
        recent_sessions=[],
        therapeutic_approaches=DEFAULT_APPROACHES,
        current_goals=list(PLACEHOLDER_GOALS),
        assigned_homework=list(PLACEHOLDER_HOMEWORK),
    )
