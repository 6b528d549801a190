# crisis detection — fixed high-risk phrase scan over raw user text
# a hit overrides every other branch with a fixed safety response

import logging
from typing import Optional

from companion.models.message import CompanionMessage, MessageMetadata

logger = logging.getLogger(__name__)

CRISIS_PHRASES = ("suicide", "kill myself", "end it all", "want to die")

CRISIS_HOTLINE = "988"
CRISIS_TEXT_LINE = "text HOME to 741741"

CRISIS_RESPONSE = (
    "I'm really concerned about what you're sharing, and I'm glad you told me. "
    "You don't have to go through this alone. "
    f"Please call or text the 988 Suicide & Crisis Lifeline at {CRISIS_HOTLINE}, "
    f"or {CRISIS_TEXT_LINE} to reach the Crisis Text Line. Both are free and available 24/7. "
    "If you are in immediate danger, please contact your local emergency services. "
    "Would you like me to alert your therapist right now so they can reach out to you?"
)


def detect(text: Optional[str]) -> bool:
    """true when the text contains any crisis phrase (case-insensitive)"""
    if not text:
        return False
    lowered = text.lower()
    return any(phrase in lowered for phrase in CRISIS_PHRASES)


def detect_any(*texts: Optional[str]) -> bool:
    return any(detect(t) for t in texts)


def crisis_message(source: str) -> CompanionMessage:
    """the fixed crisis response; never carries suggestions"""
    # the user's text is never logged here
    logger.warning(f"Crisis language detected in {source}, returning crisis response")
    return CompanionMessage(
        content=CRISIS_RESPONSE,
        metadata=MessageMetadata(
            response_type="crisis",
            confidence=1.0,
            suggestions=None,
            emotional_context="crisis",
        ),
    )
