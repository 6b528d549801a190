# check-in scheduler — picks what proactive message to send from the user's patterns
# first match wins: mood-pattern > session-prep > goal-progress > general-support.
# when to run it is decided outside this service; nothing here is persisted.

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Literal, Optional

from companion.models.context import MoodContext, MoodTrend, TherapyContext

CheckinType = Literal["mood-pattern", "session-prep", "goal-progress", "general-support"]

CHECKIN_OPENINGS: dict[str, str] = {
    "mood-pattern": "I've noticed your mood has been a bit lower lately. I'm here to support you.",
    "session-prep": "You have a therapy session coming up soon. Would you like to prepare together?",
    "goal-progress": "How are you feeling about the goals and homework you've been working on?",
    "general-support": "Just wanted to say that I'm here if you need support today.",
}


@dataclass(frozen=True)
class CheckinPatterns:
    mood_trend: MoodTrend = "stable"
    upcoming_session: Optional[datetime] = None
    pending_homework: tuple[str, ...] = field(default_factory=tuple)


def build_patterns(
    mood_context: MoodContext,
    therapy_context: TherapyContext,
    now: datetime,
    lead_days: int,
) -> CheckinPatterns:
    """pattern snapshot from the current contexts.

    only real sessions count: the placeholder homework of a default therapy
    context never makes a check-in about goals.
    """
    horizon = now + timedelta(days=lead_days)
    upcoming = sorted(s.date for s in therapy_context.recent_sessions if now < s.date <= horizon)

    pending: list[str] = []
    for session in therapy_context.recent_sessions:
        done = {h.strip().lower() for h in session.completed_homework}
        for item in session.homework:
            if item.strip().lower() not in done and item not in pending:
                pending.append(item)

    return CheckinPatterns(
        mood_trend=mood_context.mood_trend,
        upcoming_session=upcoming[0] if upcoming else None,
        pending_homework=tuple(pending),
    )


def determine_checkin_type(patterns: CheckinPatterns) -> CheckinType:
    if patterns.mood_trend == "declining":
        return "mood-pattern"
    if patterns.upcoming_session is not None:
        return "session-prep"
    if patterns.pending_homework:
        return "goal-progress"
    return "general-support"


def checkin_opening(checkin_type: CheckinType) -> str:
    return CHECKIN_OPENINGS[checkin_type]
