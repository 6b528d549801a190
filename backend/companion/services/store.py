# store reads — most-recent-first queries over mood, journal and session history
# every query is scoped to a user id; "no rows" is an empty list, never an error

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from companion.models.mood import MoodEntry
from companion.models.journal import JournalEntry
from companion.models.therapy import TherapySession
from companion.services.db import Database

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> Optional[datetime]:
    """accept datetimes or iso strings; naive values are treated as utc"""
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _clean_mood(value: Any) -> Optional[int]:
    # mongodb may store NaN or floats for mood
    if value is None:
        return None
    try:
        if isinstance(value, float) and math.isnan(value):
            return None
        return int(value)
    except (ValueError, TypeError):
        return None


def _doc_id(doc: dict, key: str) -> str:
    return str(doc.get(key) or doc.get("_id", ""))


def _as_list(value: Any) -> list[str]:
    # a lone string is one item, not a sequence of characters
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _doc_to_mood(doc: dict) -> MoodEntry:
    trigger = doc.get("trigger")
    return MoodEntry(
        id=_doc_id(doc, "entry_id"),
        user_id=str(doc.get("user_id", "")),
        date=_parse_date(doc.get("created_at")),
        mood=_clean_mood(doc.get("mood")),
        trigger=trigger.strip() if isinstance(trigger, str) and trigger.strip() else None,
    )


def _doc_to_journal(doc: dict) -> JournalEntry:
    return JournalEntry(
        id=_doc_id(doc, "journal_id"),
        user_id=str(doc.get("user_id", "")),
        date=_parse_date(doc.get("created_at")),
        content=str(doc.get("content", "")),
        mood=_clean_mood(doc.get("mood")),
        tags=frozenset(_as_list(doc.get("tags"))),
    )


def _doc_to_session(doc: dict) -> TherapySession:
    return TherapySession(
        id=_doc_id(doc, "session_id"),
        user_id=str(doc.get("user_id", "")),
        date=_parse_date(doc.get("session_date")),
        notes=str(doc.get("notes") or ""),
        goals=_as_list(doc.get("goals")),
        homework=_as_list(doc.get("homework")),
        techniques=_as_list(doc.get("techniques")),
        completed_homework=_as_list(doc.get("completed_homework")),
    )


async def _read_recent(collection, label: str, user_id: str, sort_field: str, limit: int, convert) -> list:
    cursor = collection.find({"user_id": user_id}).sort(sort_field, -1).limit(limit)
    items = []
    async for doc in cursor:
        try:
            items.append(convert(doc))
        except ValidationError as e:
            # skip the malformed record, keep the rest of the history usable
            logger.warning(f"Skipping malformed {label} record {doc.get('_id')}: {e.error_count()} errors")
    return items


async def get_recent_moods(db: Database, user_id: str, limit: int = 30) -> list[MoodEntry]:
    """most recent mood entries for a user, newest first"""
    return await _read_recent(db.mood_entries, "mood", user_id, "created_at", limit, _doc_to_mood)


async def get_recent_journal_entries(db: Database, user_id: str, limit: int = 10) -> list[JournalEntry]:
    """most recent journal entries for a user, newest first"""
    return await _read_recent(db.journals, "journal", user_id, "created_at", limit, _doc_to_journal)


async def get_recent_sessions(db: Database, user_id: str, limit: int = 5) -> list[TherapySession]:
    """most recent therapy sessions for a user, newest first (upcoming sessions included)"""
    return await _read_recent(db.therapy_sessions, "session", user_id, "session_date", limit, _doc_to_session)
