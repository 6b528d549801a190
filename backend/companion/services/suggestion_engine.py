# suggestion engine — maps mood, trigger, theme and trend signals to a ranked
# list of coping suggestions.
#
# rules fire in a fixed order; each may contribute 0-2 suggestions. the final
# order is an explicit sort on (priority tier, rule order, position in rule),
# so two high-priority suggestions keep the order of the rules that made them.

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from companion.models.context import MoodContext, TherapyContext
from companion.models.suggestion import PRIORITY_RANK, CopingSuggestion
from companion.services.rules import TRIGGER_CATEGORY_RULES, first_match

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionInputs:
    mood: Optional[int]
    trigger: Optional[str]
    mood_context: MoodContext
    themes: frozenset[str]
    therapy_context: Optional[TherapyContext]
    include_patterns: bool


@dataclass(frozen=True)
class SuggestionRule:
    name: str
    applies: Callable[[SuggestionInputs], bool]
    build: Callable[[SuggestionInputs], list[CopingSuggestion]]


def _suggestion_id() -> str:
    return uuid.uuid4().hex[:12]


# suggestion builders

def emergency_breathing(reasoning: str) -> CopingSuggestion:
    return CopingSuggestion(
        id=_suggestion_id(),
        type="breathing",
        title="Emergency Breathing Exercise",
        description="A slow breathing pattern to help steady overwhelming emotions",
        steps=[
            "Breathe in slowly through your nose for 4 counts",
            "Hold your breath gently for 4 counts",
            "Exhale slowly through your mouth for 6 counts",
            "Repeat 10 times",
        ],
        duration="2-3 minutes",
        priority="high",
        reasoning=reasoning,
    )


def grounding_54321(reasoning: str, priority: str = "high") -> CopingSuggestion:
    return CopingSuggestion(
        id=_suggestion_id(),
        type="grounding",
        title="5-4-3-2-1 Grounding",
        description="Use your senses to anchor yourself in the present moment",
        steps=[
            "Name 5 things you can see",
            "Name 4 things you can touch",
            "Name 3 things you can hear",
            "Name 2 things you can smell",
            "Name 1 thing you can taste",
        ],
        duration="3-5 minutes",
        priority=priority,
        reasoning=reasoning,
    )


def self_compassion(reasoning: str) -> CopingSuggestion:
    return CopingSuggestion(
        id=_suggestion_id(),
        type="mindfulness",
        title="Self-Compassion Practice",
        description="A gentle way to meet a hard moment with kindness instead of judgment",
        steps=[
            "Place a hand on your heart and take three slow breaths",
            'Say to yourself: "This is a moment of difficulty"',
            'Remind yourself: "Difficult feelings are part of being human"',
            'Offer yourself one kind phrase, such as "May I be patient with myself"',
        ],
        duration="5 minutes",
        priority="high",
        reasoning=reasoning,
    )


def mood_reset_mindfulness(reasoning: str) -> CopingSuggestion:
    return CopingSuggestion(
        id=_suggestion_id(),
        type="mindfulness",
        title="Daily Mood Reset",
        description="A short daily practice to notice and reset your mood patterns",
        steps=[
            "Sit comfortably and close your eyes or soften your gaze",
            "Notice how you're feeling right now without judging it",
            "Breathe with whatever emotions arise for a few minutes",
            "Remind yourself that all feelings are temporary",
        ],
        duration="10 minutes",
        priority="medium",
        reasoning=reasoning,
    )


def work_life_boundary(reasoning: str) -> CopingSuggestion:
    return CopingSuggestion(
        id=_suggestion_id(),
        type="cognitive",
        title="Work-Life Boundary Setting",
        description="Create healthy separation between work stress and personal time",
        steps=[
            "Write down your work concerns",
            "Set a specific time to address them tomorrow",
            "Do a 5-minute transition activity (walk, stretch, music)",
            'Remind yourself: "I am more than my work"',
        ],
        duration="10 minutes",
        priority="medium",
        reasoning=reasoning,
    )


# trigger category → (type, title, description, steps, duration)
TRIGGER_TECHNIQUES: dict[str, tuple[str, str, str, list[str], str]] = {
    "study": (
        "cognitive",
        "Study Time-Boxing",
        "Break study pressure into short, focused blocks with planned breaks",
        [
            "Pick one topic to focus on first",
            "Set a timer for 25 minutes and work only on that topic",
            "Take a 5-minute break away from your desk",
            "After four blocks, take a longer break and note what you covered",
        ],
        "25-30 minutes",
    ),
    "work": (
        "cognitive",
        "Work Stress Time-Boxing",
        "Contain work stress by giving each task a fixed, limited window",
        [
            "Write down the specific stressor",
            'Ask: "What can I control about this situation?"',
            "Block 25 minutes for the most important task and start there",
            "Set a boundary: when will you stop thinking about work today?",
        ],
        "10 minutes",
    ),
    "relationship": (
        "journaling",
        "Relationship Reflection",
        "Process relationship challenges with clarity",
        [
            "Write about the situation without censoring",
            "Identify your emotions and needs",
            "Consider the other person's perspective",
            "Write one thing you're grateful for about this relationship",
        ],
        "15 minutes",
    ),
    "social": (
        "grounding",
        "Social Grounding Reset",
        "Steady yourself before, during or after social situations",
        [
            "Press your feet into the floor and notice the contact",
            "Name 3 things you can see around you",
            "Take three slow breaths, making each exhale longer than the inhale",
            "Remind yourself you can step away for a moment if you need to",
        ],
        "3-5 minutes",
    ),
    "sleep": (
        "physical",
        "Wind-Down Routine",
        "A simple routine to help your body shift toward rest",
        [
            "Dim the lights and put screens away 30 minutes before bed",
            "Do a few gentle stretches for your neck and shoulders",
            "Relax each muscle group from your feet up to your face",
            "If your mind races, jot your thoughts down to revisit tomorrow",
        ],
        "15-20 minutes",
    ),
    "health": (
        "physical",
        "Gentle Movement Break",
        "Light movement to ease tension without pushing your body",
        [
            "Stand or sit tall and roll your shoulders slowly",
            "Take a short, easy-paced walk if you are able",
            "Notice one part of your body that feels okay right now",
            "Drink a glass of water",
        ],
        "10 minutes",
    ),
}

GENERIC_TRIGGER_TECHNIQUE = (
    "cognitive",
    "Trigger Reframe",
    "Look at what set off this feeling from a calmer angle",
    [
        "Write down what happened, as facts only",
        "Note the thought that followed and how strongly you believe it",
        "Ask: what would I say to a friend in this situation?",
        "Write one more balanced way to see it",
    ],
    "10 minutes",
)


def trigger_suggestion(trigger: str, recurring: bool) -> CopingSuggestion:
    """a technique chosen by the trigger's keyword category"""
    category = first_match(trigger, TRIGGER_CATEGORY_RULES)
    kind, title, description, steps, duration = TRIGGER_TECHNIQUES.get(category, GENERIC_TRIGGER_TECHNIQUE)
    if recurring:
        reasoning = f'"{trigger}" seems to be a recurring trigger for you, so this targets it directly'
    else:
        reasoning = f'You mentioned "{trigger}" as a trigger, so this focuses on that situation'
    return CopingSuggestion(
        id=_suggestion_id(),
        type=kind,
        title=title,
        description=description,
        steps=list(steps),
        duration=duration,
        priority="medium",
        reasoning=reasoning,
    )


# rule table

def _severe_mood(inputs: SuggestionInputs) -> list[CopingSuggestion]:
    reasoning = f"Your mood of {inputs.mood}/10 indicates high distress right now"
    return [emergency_breathing(reasoning), grounding_54321(reasoning)]


def _low_mood(inputs: SuggestionInputs) -> list[CopingSuggestion]:
    return [self_compassion(f"Your mood of {inputs.mood}/10 suggests a low mood today")]


def _trigger(inputs: SuggestionInputs) -> list[CopingSuggestion]:
    trigger = inputs.trigger.strip()
    recurring = trigger.lower() in inputs.mood_context.trigger_patterns
    return [trigger_suggestion(trigger, recurring)]


def _anxiety_theme(inputs: SuggestionInputs) -> list[CopingSuggestion]:
    reasoning = "Anxiety came up in what you shared, and grounding can calm anxious thoughts"
    therapy = inputs.therapy_context
    if therapy is not None and "mindfulness" in therapy.therapeutic_approaches:
        reasoning += "; it also builds on the mindfulness work from your sessions"
    return [grounding_54321(reasoning)]


def _work_theme(inputs: SuggestionInputs) -> list[CopingSuggestion]:
    return [work_life_boundary("Work-related stress came up in what you shared")]


def _declining_trend(inputs: SuggestionInputs) -> list[CopingSuggestion]:
    return [mood_reset_mindfulness("Your recent moods show a declining pattern compared with earlier entries")]


SUGGESTION_RULES: tuple[SuggestionRule, ...] = (
    SuggestionRule("severe-mood", lambda i: i.mood is not None and i.mood <= 3, _severe_mood),
    SuggestionRule("low-mood", lambda i: i.mood is not None and 4 <= i.mood <= 5, _low_mood),
    SuggestionRule("trigger", lambda i: bool(i.trigger and i.trigger.strip()), _trigger),
    SuggestionRule("anxiety-theme", lambda i: "anxiety" in i.themes, _anxiety_theme),
    SuggestionRule("work-theme", lambda i: "work" in i.themes, _work_theme),
    # pattern rule, only enabled on the proactive check-in path
    SuggestionRule(
        "declining-trend",
        lambda i: i.include_patterns and i.mood_context.mood_trend == "declining",
        _declining_trend,
    ),
)


def generate(
    mood: Optional[int],
    trigger: Optional[str],
    mood_context: MoodContext,
    journal_themes: Optional[Iterable[str]] = None,
    therapy_context: Optional[TherapyContext] = None,
    *,
    include_patterns: bool = False,
) -> list[CopingSuggestion]:
    """ranked coping suggestions: high → medium → low, then rule order"""
    inputs = SuggestionInputs(
        mood=mood,
        trigger=trigger,
        mood_context=mood_context,
        themes=frozenset(journal_themes or ()),
        therapy_context=therapy_context,
        include_patterns=include_patterns,
    )

    keyed: list[tuple[tuple[int, int, int], CopingSuggestion]] = []
    for rule_order, rule in enumerate(SUGGESTION_RULES):
        if not rule.applies(inputs):
            continue
        for position, suggestion in enumerate(rule.build(inputs)):
            keyed.append(((PRIORITY_RANK[suggestion.priority], rule_order, position), suggestion))

    keyed.sort(key=lambda pair: pair[0])
    # the same technique can come from two rules; keep the higher-ranked one
    suggestions = []
    titles = set()
    for _, suggestion in keyed:
        if suggestion.title in titles:
            continue
        titles.add(suggestion.title)
        suggestions.append(suggestion)
    logger.info(f"Generated {len(suggestions)} suggestions")
    return suggestions
