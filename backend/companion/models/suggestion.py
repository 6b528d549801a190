# coping suggestion models — value objects returned to the client surface

from typing import Literal
from pydantic import BaseModel, Field

SuggestionType = Literal["breathing", "mindfulness", "grounding", "cognitive", "physical", "journaling"]
Priority = Literal["high", "medium", "low"]

# sort rank per priority tier
PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


class CopingSuggestion(BaseModel):
    """a non-clinical, self-administered coping technique"""
    id: str
    type: SuggestionType
    title: str
    description: str
    steps: list[str] = Field(default_factory=list)
    duration: str
    priority: Priority
    reasoning: str = Field(..., description="names the signal that produced this suggestion")

    model_config = {"frozen": True}
