# companion service — the four entry points of the companion engine
# each one: validate → crisis check on raw text → read contexts → signals →
# suggestions → compose → stamp metadata. crisis language short-circuits
# everything after the check, including the store reads.

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from companion.config import settings
from companion.models.companion import (
    CheckinResult,
    JournalAnalysisResult,
    MoodTriggerResult,
    TherapyHistoryResult,
)
from companion.models.message import CompanionMessage, MessageMetadata
from companion.services import crisis, suggestion_engine
from companion.services.checkin_scheduler import build_patterns, checkin_opening, determine_checkin_type
from companion.services.context_aggregator import (
    build_all_contexts,
    build_journal_context,
    build_mood_context,
    build_therapy_context,
)
from companion.services.db import Database
from companion.services.response_composer import ComposeContext, ComposeSignals, compose, compose_checkin
from companion.services.signals import (
    emotional_context,
    extract_themes,
    homework_reminders,
    journal_insights,
    relevant_techniques,
)
from companion.services.text_generation import TextGenerator

logger = logging.getLogger(__name__)

MOOD_CONFIDENCE = 0.9
JOURNAL_CONFIDENCE = 0.85
THERAPY_CONFIDENCE = 0.88
CHECKIN_CONFIDENCE = 0.82


class CompanionValidationError(ValueError):
    """malformed input to an entry point; the message is safe to show the user"""


def _validate_mood(mood, required: bool = True) -> Optional[int]:
    if mood is None:
        if required:
            raise CompanionValidationError("Please choose a mood between 1 and 10.")
        return None
    if isinstance(mood, bool) or not isinstance(mood, int) or not 1 <= mood <= 10:
        raise CompanionValidationError("Mood must be a whole number between 1 and 10.")
    return mood


def _clean_text(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


# mood

async def handle_mood_trigger(
    db: Database,
    generator: TextGenerator,
    mood: Optional[int],
    trigger: Optional[str] = None,
    user_id: Optional[str] = None,
) -> MoodTriggerResult:
    """respond to a freshly logged mood, with optional trigger text"""
    if crisis.detect(trigger):
        return MoodTriggerResult(message=crisis.crisis_message("mood trigger"), suggestions=[])

    mood = _validate_mood(mood)
    trigger = _clean_text(trigger)

    mood_ctx = await build_mood_context(db, user_id)
    suggestions = suggestion_engine.generate(mood, trigger, mood_ctx)

    content = await compose(
        "mood-triggered",
        ComposeContext(mood_context=mood_ctx),
        ComposeSignals(mood=mood, trigger=trigger),
        suggestions,
        generator,
    )

    message = CompanionMessage(
        content=content,
        metadata=MessageMetadata(
            response_type="mood-triggered",
            confidence=MOOD_CONFIDENCE,
            mood_detected=mood,
            trigger_detected=trigger,
            suggestions=suggestions,
            emotional_context=emotional_context(mood),
        ),
    )
    logger.info(f"Handled mood trigger: mood={mood}, {len(suggestions)} suggestions")
    return MoodTriggerResult(message=message, suggestions=suggestions)


# journal

async def analyze_journal_entry(
    db: Database,
    generator: TextGenerator,
    content: Optional[str],
    user_id: Optional[str] = None,
    mood: Optional[int] = None,
) -> JournalAnalysisResult:
    """reflect on a new journal entry in light of recent journals and moods"""
    # crisis first: even a very short entry is scanned before validation
    if crisis.detect(content):
        return JournalAnalysisResult(message=crisis.crisis_message("journal entry"), insights=[], suggestions=[])

    text = (content or "").strip()
    if len(text) < settings.JOURNAL_MIN_LENGTH:
        raise CompanionValidationError(
            f"Your journal entry is a little short. Write at least {settings.JOURNAL_MIN_LENGTH} "
            f"characters so I can respond thoughtfully."
        )
    if len(text) > settings.JOURNAL_MAX_LENGTH:
        raise CompanionValidationError(
            f"Journal entries can be at most {settings.JOURNAL_MAX_LENGTH} characters."
        )
    mood = _validate_mood(mood, required=False)

    journal_ctx, mood_ctx = await asyncio.gather(
        build_journal_context(db, user_id),
        build_mood_context(db, user_id),
    )

    themes = extract_themes(text)
    insights = journal_insights(text, themes)
    suggestions = suggestion_engine.generate(mood, None, mood_ctx, themes)

    reply = await compose(
        "journal-informed",
        ComposeContext(mood_context=mood_ctx, journal_context=journal_ctx),
        ComposeSignals(mood=mood, user_text=text, themes=themes, insights=tuple(insights)),
        suggestions,
        generator,
    )

    message = CompanionMessage(
        content=reply,
        metadata=MessageMetadata(
            response_type="journal-informed",
            confidence=JOURNAL_CONFIDENCE,
            mood_detected=mood,
            suggestions=suggestions,
            emotional_context=", ".join(sorted(themes)) or None,
            journal_entries_referenced=[e.id for e in journal_ctx.recent_entries],
        ),
    )
    logger.info(
        f"Analyzed journal entry: {len(themes)} themes, {len(insights)} insights, {len(suggestions)} suggestions"
    )
    return JournalAnalysisResult(message=message, insights=insights, suggestions=suggestions)


# therapy history

async def integrate_therapy_history(
    db: Database,
    generator: TextGenerator,
    message: Optional[str],
    user_id: Optional[str] = None,
) -> TherapyHistoryResult:
    """answer a chat message using the techniques and homework from recent sessions"""
    if crisis.detect(message):
        return TherapyHistoryResult(
            message=crisis.crisis_message("chat message"), relevant_techniques=[], homework_reminders=[]
        )

    text = _clean_text(message)
    if text is None:
        raise CompanionValidationError("Please write a message so I can respond.")

    therapy_ctx, mood_ctx = await asyncio.gather(
        build_therapy_context(db, user_id),
        build_mood_context(db, user_id),
    )

    techniques = relevant_techniques(text, therapy_ctx)
    reminders = homework_reminders(therapy_ctx)
    themes = extract_themes(text)
    suggestions = suggestion_engine.generate(None, None, mood_ctx, themes, therapy_ctx)

    reply = await compose(
        "therapy-history",
        ComposeContext(mood_context=mood_ctx, therapy_context=therapy_ctx),
        ComposeSignals(
            user_text=text,
            themes=themes,
            techniques=tuple(techniques),
            homework_reminders=tuple(reminders),
        ),
        suggestions,
        generator,
    )

    result_message = CompanionMessage(
        content=reply,
        metadata=MessageMetadata(
            response_type="therapy-history",
            confidence=THERAPY_CONFIDENCE,
            suggestions=suggestions,
            emotional_context=", ".join(techniques) or None,
            therapist_notes_used=[s.id for s in therapy_ctx.recent_sessions],
        ),
    )
    logger.info(
        f"Integrated therapy history: {len(techniques)} techniques, {len(reminders)} homework reminders"
    )
    return TherapyHistoryResult(
        message=result_message, relevant_techniques=techniques, homework_reminders=reminders
    )


# proactive check-in

async def generate_proactive_checkin(
    db: Database,
    generator: TextGenerator,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> CheckinResult:
    """a system-initiated check-in chosen from mood, session and homework patterns.

    the text is built from a canned opening, so the generator is not called;
    it is accepted to keep the four entry points interchangeable.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    mood_ctx, journal_ctx, therapy_ctx = await build_all_contexts(db, user_id)

    patterns = build_patterns(mood_ctx, therapy_ctx, now, settings.CHECKIN_SESSION_LEAD_DAYS)
    checkin_type = determine_checkin_type(patterns)

    if checkin_type == "mood-pattern":
        suggestions = suggestion_engine.generate(None, None, mood_ctx, include_patterns=True)
    else:
        suggestions = []

    message = CompanionMessage(
        content=compose_checkin(checkin_opening(checkin_type), suggestions),
        metadata=MessageMetadata(
            response_type="proactive-checkin",
            confidence=CHECKIN_CONFIDENCE,
            suggestions=suggestions,
            emotional_context=checkin_type,
            journal_entries_referenced=[e.id for e in journal_ctx.recent_entries],
            therapist_notes_used=[s.id for s in therapy_ctx.recent_sessions],
        ),
    )
    logger.info(f"Generated proactive check-in: type={checkin_type}")
    return CheckinResult(message=message, checkin_type=checkin_type, suggestions=suggestions)
