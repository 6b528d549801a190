# context aggregation — builds mood, journal and therapy snapshots for a user
# each builder is independent, read-only, and degrades to a default snapshot
# instead of raising when the user is unknown or the store is unavailable

import asyncio
import logging
from typing import Optional

from companion.config import settings
from companion.models.context import (
    JournalContext,
    MoodContext,
    TherapyContext,
    default_journal_context,
    default_mood_context,
    default_therapy_context,
)
from companion.services import store
from companion.services.db import Database
from companion.services.signals import (
    calculate_mood_trend,
    derive_approaches,
    growth_moments,
    journal_themes,
    rank_triggers,
)

logger = logging.getLogger(__name__)

MAX_GOALS = 3
MAX_HOMEWORK = 3


def _first_unique(items, limit: int) -> list[str]:
    """unique items in order of first appearance (case-insensitive), capped"""
    seen = set()
    out = []
    for item in items:
        key = item.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(item.strip())
        if len(out) == limit:
            break
    return out


async def build_mood_context(db: Database, user_id: Optional[str]) -> MoodContext:
    """mood snapshot from the last 30 mood entries"""
    if not user_id:
        return default_mood_context()
    try:
        entries = await store.get_recent_moods(db, user_id, limit=settings.MOOD_HISTORY_LIMIT)
    except Exception as e:
        logger.warning(f"Mood history read failed for user, using default context: {e}")
        return default_mood_context()

    if not entries:
        logger.info("No mood history for user, using default context")
        return default_mood_context()

    return MoodContext(
        current_mood=entries[0].mood,
        mood_trend=calculate_mood_trend([e.mood for e in entries]),
        recent_moods=entries,
        trigger_patterns=rank_triggers(entries),
    )


async def build_journal_context(db: Database, user_id: Optional[str]) -> JournalContext:
    """journal snapshot from the last 10 journal entries"""
    if not user_id:
        return default_journal_context()
    try:
        entries = await store.get_recent_journal_entries(db, user_id, limit=settings.JOURNAL_HISTORY_LIMIT)
    except Exception as e:
        logger.warning(f"Journal history read failed for user, using default context: {e}")
        return default_journal_context()

    if not entries:
        logger.info("No journal history for user, using default context")
        return default_journal_context()

    return JournalContext(
        recent_entries=entries,
        emotional_themes=journal_themes(entries),
        progress_indicators=growth_moments(entries),
    )


async def build_therapy_context(db: Database, user_id: Optional[str]) -> TherapyContext:
    """therapy snapshot from the last 5 sessions"""
    if not user_id:
        return default_therapy_context()
    try:
        sessions = await store.get_recent_sessions(db, user_id, limit=settings.SESSION_HISTORY_LIMIT)
    except Exception as e:
        logger.warning(f"Session history read failed for user, using default context: {e}")
        return default_therapy_context()

    if not sessions:
        logger.info("No therapy sessions for user, using default context")
        return default_therapy_context()

    return TherapyContext(
        recent_sessions=sessions,
        therapeutic_approaches=derive_approaches(sessions),
        current_goals=_first_unique((g for s in sessions for g in s.goals), MAX_GOALS),
        assigned_homework=_first_unique((h for s in sessions for h in s.homework), MAX_HOMEWORK),
    )


async def build_all_contexts(
    db: Database, user_id: Optional[str]
) -> tuple[MoodContext, JournalContext, TherapyContext]:
    """issue the three independent reads concurrently"""
    mood_ctx, journal_ctx, therapy_ctx = await asyncio.gather(
        build_mood_context(db, user_id),
        build_journal_context(db, user_id),
        build_therapy_context(db, user_id),
    )
    return mood_ctx, journal_ctx, therapy_ctx
