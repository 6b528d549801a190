# keyword rule tables — declarative keyword → tag mappings and the one matcher
# that consumes them. themes, techniques, approaches, homework reminders and
# trigger categories are all plain data here so they can be tested on their own.

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class KeywordRule:
    """tags produced when any keyword occurs in the text (case-insensitive substring)"""
    keywords: tuple[str, ...]
    tags: tuple[str, ...]
    # approach that must be available for the rule to fire (None = unconditional)
    requires: Optional[str] = None


def match_rules(
    text: str,
    rules: Iterable[KeywordRule],
    available: Optional[Iterable[str]] = None,
) -> list[str]:
    """return the tags of every matching rule, in rule order, de-duplicated.

    `available` is the set of labels a conditional rule may depend on; a rule
    with `requires` set only fires when that label is present (case-insensitive).
    """
    lowered = (text or "").lower()
    allowed = {a.lower() for a in available} if available is not None else set()
    out: list[str] = []
    for rule in rules:
        if rule.requires is not None and rule.requires.lower() not in allowed:
            continue
        if any(keyword in lowered for keyword in rule.keywords):
            for tag in rule.tags:
                if tag not in out:
                    out.append(tag)
    return out


def first_match(text: str, rules: Iterable[KeywordRule]) -> Optional[str]:
    """first tag of the first matching rule, or None"""
    tags = match_rules(text, rules)
    return tags[0] if tags else None


# journal / free-text themes

THEME_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("anxious", "anxiety", "worried", "worry", "nervous", "panic", "overwhelmed"), ("anxiety",)),
    KeywordRule(("sad", "hopeless", "empty", "worthless", "numb", "depressed"), ("depression",)),
    KeywordRule(("stressed", "pressure", "deadline", "burden", "exhausted"), ("stress",)),
    KeywordRule(("angry", "frustrated", "irritated", "furious"), ("anger",)),
    KeywordRule(("work", "job", "career", "boss", "colleague", "office"), ("work",)),
    KeywordRule(("family", "friend", "partner", "relationship", "social"), ("relationships",)),
    KeywordRule(("sick", "tired", "pain", "sleep", "energy", "physical"), ("health",)),
    KeywordRule(("progress", "better", "improve", "growth", "proud", "learned"), ("growth",)),
    KeywordRule(("grateful", "thankful", "gratitude", "appreciate"), ("gratitude",)),
    KeywordRule(("happy", "excited", "joyful", "content"), ("joy",)),
)


# therapeutic techniques suggested by what the user writes

TECHNIQUE_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("anxious", "worry"), ("Cognitive Restructuring",), requires="CBT"),
    KeywordRule(("anxious", "worry"), ("Mindfulness Meditation",), requires="mindfulness"),
    KeywordRule(("sad", "down"), ("Behavioral Activation", "Self-Compassion Exercises")),
    KeywordRule(("negative", "thinking", "thought"), ("Cognitive Restructuring", "Thought Record"), requires="CBT"),
    KeywordRule(("overwhelmed",), ("Mindfulness Meditation", "Body Scan"), requires="mindfulness"),
    KeywordRule(("avoid", "stuck"), ("Behavioral Activation", "Gradual Exposure")),
)


# session techniques → therapeutic approach labels

APPROACH_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("cbt", "cognitive", "thought record", "restructuring", "behavioral activation"), ("CBT",)),
    KeywordRule(("mindful", "meditation", "body scan", "breathing"), ("mindfulness",)),
    KeywordRule(("dbt", "distress tolerance", "emotion regulation", "interpersonal effectiveness"), ("DBT",)),
)


# homework assignment keyword → canned reminder

HOMEWORK_REMINDER_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("mood tracking",), ("Remember your mood tracking homework from our last session",)),
    KeywordRule(("breathing exercises",), ("Consider practicing the breathing exercise we discussed",)),
    KeywordRule(("thought record",), ("Try filling in a thought record the next time a difficult thought shows up",)),
)


# mood trigger text → trigger category used to pick a trigger-specific technique

TRIGGER_CATEGORY_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(("exam", "test", "study", "school", "class", "homework", "grade"), ("study",)),
    KeywordRule(("work", "job", "deadline", "boss", "stress", "meeting"), ("work",)),
    KeywordRule(("relationship", "family", "partner", "breakup", "parent"), ("relationship",)),
    KeywordRule(("social", "party", "friend", "people", "crowd"), ("social",)),
    KeywordRule(("sleep", "tired", "insomnia", "exhausted"), ("sleep",)),
    KeywordRule(("health", "pain", "sick", "doctor"), ("health",)),
)
