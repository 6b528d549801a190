# response composer — turns context, signals and suggestions into the message text
# the generative service writes the text; when it times out, errors, or returns
# nothing, one of three fixed templates (by mood band) is returned instead.

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from companion.config import settings
from companion.models.context import JournalContext, MoodContext, TherapyContext
from companion.models.suggestion import CopingSuggestion
from companion.services.text_generation import TextGenerator

logger = logging.getLogger(__name__)

FALLBACK_DISTRESS = (
    "I'm here for you during this difficult time. What you're feeling is valid, and you don't "
    "have to face it alone. Let's work through this together with a coping strategy that can help right now."
)
FALLBACK_LOW_MOOD = (
    "I notice you're having a challenging day. It's okay to have difficult days, and I'm here to "
    "help you through this one. Here are some techniques that might help."
)
FALLBACK_GENERAL = (
    "Thanks for checking in with me. Even when things are going well, it's great to have some "
    "coping tools ready. I'm here whenever you want to talk."
)
FALLBACK_TEMPLATES = (FALLBACK_DISTRESS, FALLBACK_LOW_MOOD, FALLBACK_GENERAL)

MAX_JOURNAL_EXCERPT = 600


@dataclass(frozen=True)
class ComposeContext:
    mood_context: MoodContext
    journal_context: Optional[JournalContext] = None
    therapy_context: Optional[TherapyContext] = None


@dataclass(frozen=True)
class ComposeSignals:
    mood: Optional[int] = None
    trigger: Optional[str] = None
    user_text: Optional[str] = None
    themes: frozenset[str] = frozenset()
    insights: tuple[str, ...] = ()
    techniques: tuple[str, ...] = ()
    homework_reminders: tuple[str, ...] = ()


def fallback_response(mood: int) -> str:
    """fixed empathetic text selected only by mood band"""
    if mood <= 3:
        return FALLBACK_DISTRESS
    if mood <= 5:
        return FALLBACK_LOW_MOOD
    return FALLBACK_GENERAL


def _effective_mood(context: ComposeContext, signals: ComposeSignals) -> int:
    if signals.mood is not None:
        return signals.mood
    return context.mood_context.current_mood


def build_prompt(
    response_type: str,
    context: ComposeContext,
    signals: ComposeSignals,
    suggestions: list[CopingSuggestion],
) -> str:
    """plain-text prompt summarising what the companion knows for this message"""
    mood_ctx = context.mood_context
    parts = [f"Response type: {response_type}"]

    if signals.mood is not None:
        parts.append(f"Current mood: {signals.mood}/10")
    else:
        parts.append(f"Most recent logged mood: {mood_ctx.current_mood}/10")
    parts.append(f"Mood trend: {mood_ctx.mood_trend}")
    if signals.trigger:
        parts.append(f"Trigger the user named: {signals.trigger}")
    if mood_ctx.trigger_patterns:
        parts.append(f"Recurring triggers: {', '.join(mood_ctx.trigger_patterns)}")

    if signals.user_text:
        label = "Journal entry" if response_type == "journal-informed" else "User message"
        parts.append(f"{label}: {signals.user_text[:MAX_JOURNAL_EXCERPT]}")
    if signals.themes:
        parts.append(f"Themes: {', '.join(sorted(signals.themes))}")
    if signals.insights:
        parts.append("Observations: " + " ".join(signals.insights))

    journal_ctx = context.journal_context
    if journal_ctx is not None and journal_ctx.progress_indicators:
        parts.append("Recent progress: " + "; ".join(journal_ctx.progress_indicators))

    therapy_ctx = context.therapy_context
    if therapy_ctx is not None:
        if therapy_ctx.therapeutic_approaches:
            parts.append(f"Therapy approaches: {', '.join(sorted(therapy_ctx.therapeutic_approaches))}")
        if therapy_ctx.current_goals:
            parts.append(f"Current goals: {', '.join(therapy_ctx.current_goals)}")
    if signals.techniques:
        parts.append(f"Relevant techniques from therapy: {', '.join(signals.techniques)}")
    if signals.homework_reminders:
        parts.append("Homework reminders: " + " ".join(signals.homework_reminders))

    if suggestions:
        parts.append("Suggested techniques: " + ", ".join(s.title for s in suggestions))
    else:
        parts.append("No specific techniques to suggest; offer gentle support.")

    return "\n".join(parts)


async def compose(
    response_type: str,
    context: ComposeContext,
    signals: ComposeSignals,
    suggestions: list[CopingSuggestion],
    generator: TextGenerator,
    timeout: Optional[float] = None,
) -> str:
    """message text from the generative service, or the mood-band fallback"""
    budget = timeout if timeout is not None else settings.GENERATION_TIMEOUT_SECONDS
    prompt = build_prompt(response_type, context, signals, suggestions)

    try:
        # the budget holds even for generators that ignore their timeout argument
        text = await asyncio.wait_for(generator.generate(prompt, timeout=budget), timeout=budget)
        if not text or not text.strip():
            raise ValueError("empty text")
    except asyncio.TimeoutError:
        logger.warning(f"Generative service timed out after {budget}s, degraded response for {response_type}")
        return fallback_response(_effective_mood(context, signals))
    except Exception as e:
        logger.warning(
            f"Generative service failed ({type(e).__name__}: {e}), degraded response for {response_type}"
        )
        return fallback_response(_effective_mood(context, signals))

    logger.info(f"Generated {response_type} response ({len(text)} chars)")
    return text.strip()


def compose_checkin(opening: str, suggestions: list[CopingSuggestion]) -> str:
    """deterministic proactive check-in text built around the canned opening"""
    message = f"Hi there! I wanted to check in with you. {opening} "
    if suggestions:
        message += f"I have a suggestion that might be helpful: {suggestions[0].title}. "
    message += "How are you doing today?"
    return message
