# signal extraction — turns raw mood, journal and therapy history into signals
# trend, trigger frequency, themes, growth moments, techniques, homework reminders

from typing import Iterable, Optional, Sequence

from companion.models.context import MoodTrend, TherapyContext
from companion.models.journal import JournalEntry
from companion.models.mood import MoodEntry
from companion.models.therapy import TherapySession
from companion.services.rules import (
    APPROACH_RULES,
    HOMEWORK_REMINDER_RULES,
    TECHNIQUE_RULES,
    THEME_RULES,
    match_rules,
)

# trend classification
TREND_WINDOW = 3
TREND_MIN_ENTRIES = 3
TREND_DEADBAND = 0.5

MAX_TRIGGER_PATTERNS = 5
MAX_GROWTH_MOMENTS = 3
GROWTH_MOOD_THRESHOLD = 4
GROWTH_KEYWORDS = ("progress", "better")
EXCERPT_LENGTH = 80


def calculate_mood_trend(moods: Sequence[int]) -> MoodTrend:
    """classify mood values (most recent first) as improving / declining / stable.

    the recent window is the first half of the data (at most 3 values), the
    older window the values right after it (at most 3). a difference in
    averages beyond ±0.5 counts as a change; anything inside the deadband,
    or fewer than 3 values, is stable.
    """
    if len(moods) < TREND_MIN_ENTRIES:
        return "stable"

    split = min(TREND_WINDOW, (len(moods) + 1) // 2)
    recent = moods[:split]
    older = moods[split:split + TREND_WINDOW]
    if not older:
        return "stable"

    diff = sum(recent) / len(recent) - sum(older) / len(older)
    if diff > TREND_DEADBAND:
        return "improving"
    if diff < -TREND_DEADBAND:
        return "declining"
    return "stable"


def rank_triggers(entries: Sequence[MoodEntry], top_n: int = MAX_TRIGGER_PATTERNS) -> list[str]:
    """most frequent triggers, ties broken by most recent occurrence"""
    counts: dict[str, int] = {}
    first_seen: dict[str, int] = {}
    for position, entry in enumerate(entries):
        if not entry.trigger or not entry.trigger.strip():
            continue
        trigger = entry.trigger.strip().lower()
        counts[trigger] = counts.get(trigger, 0) + 1
        first_seen.setdefault(trigger, position)

    ranked = sorted(counts, key=lambda t: (-counts[t], first_seen[t]))
    return ranked[:top_n]


def extract_themes(content: str, tags: Iterable[str] = ()) -> frozenset[str]:
    """keyword themes found in the text plus any explicit tags"""
    themes = set(match_rules(content, THEME_RULES))
    themes.update(t.strip().lower() for t in tags if t and t.strip())
    return frozenset(themes)


def journal_themes(entries: Sequence[JournalEntry]) -> frozenset[str]:
    """union of themes across journal entries"""
    themes: set[str] = set()
    for entry in entries:
        themes |= extract_themes(entry.content, entry.tags)
    return frozenset(themes)


def is_growth_moment(entry: JournalEntry) -> bool:
    if entry.mood is not None and entry.mood >= GROWTH_MOOD_THRESHOLD:
        return True
    lowered = entry.content.lower()
    return any(keyword in lowered for keyword in GROWTH_KEYWORDS)


def _excerpt(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[:EXCERPT_LENGTH].rstrip() + "..."


def growth_moments(entries: Sequence[JournalEntry]) -> list[str]:
    """human-readable progress indicators from entries (most recent first), max 3"""
    moments = []
    for entry in entries:
        if not is_growth_moment(entry):
            continue
        moments.append(f"{entry.date.strftime('%b %d')}: {_excerpt(entry.content)}")
        if len(moments) == MAX_GROWTH_MOMENTS:
            break
    return moments


def derive_approaches(sessions: Sequence[TherapySession]) -> frozenset[str]:
    """therapeutic approaches implied by the techniques used in sessions"""
    techniques = "\n".join(t for s in sessions for t in s.techniques)
    return frozenset(match_rules(techniques, APPROACH_RULES))


def relevant_techniques(message: str, therapy_context: TherapyContext) -> list[str]:
    """ordered, de-duplicated techniques that fit the user's message"""
    return match_rules(message, TECHNIQUE_RULES, available=therapy_context.therapeutic_approaches)


def homework_reminders(therapy_context: TherapyContext) -> list[str]:
    """one canned reminder per recognised homework assignment"""
    assignments = "\n".join(therapy_context.assigned_homework)
    return match_rules(assignments, HOMEWORK_REMINDER_RULES)


def journal_insights(content: str, themes: Iterable[str]) -> list[str]:
    """short observations about a single journal entry"""
    themes = set(themes)
    lowered = content.lower()
    insights = []
    if "anxiety" in themes:
        insights.append("I notice anxiety themes in your writing. This awareness is an important first step.")
    if "growth" in themes or "better" in lowered:
        insights.append("You mentioned some positive changes - that shows real growth and resilience.")
    if len(themes) > 3:
        insights.append(
            "You're processing several different emotions, which shows emotional complexity and self-awareness."
        )
    return insights


def emotional_context(mood: Optional[int]) -> str:
    """support band for a mood value"""
    if mood is None:
        return "general-support"
    if mood <= 3:
        return "crisis-support"
    if mood <= 5:
        return "low-mood-support"
    return "general-support"
