# text generation — narrow prompt-in / text-out interface over the generative service
# GeminiTextGenerator calls gemini through a langchain chain; CannedTextGenerator is
# a deterministic stand-in for tests and offline runs.

import asyncio
import logging
from typing import Optional, Protocol

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from companion.config import settings

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """the generative service answered without usable text"""


class TextGenerator(Protocol):
    async def generate(self, prompt: str, timeout: float) -> str:
        ...


# companion persona — wellness support, never diagnosis

COMPANION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are a warm, supportive wellness companion inside a mental-health tracking app.
You are speaking directly to the person who uses the app, between their therapy sessions.

YOUR JOB:
- Acknowledge how they are feeling in 1-2 empathetic sentences
- Reflect the context you are given (mood, triggers, journal themes, therapy homework)
- Introduce the suggested coping techniques by name and invite them to try one
- Keep it short: one or two short paragraphs, plain text, no lists or headings

BOUNDARIES:
- You are not a clinician; never diagnose, label conditions, or give treatment or medication advice
- Only suggest the techniques listed in the context
- If anything suggests risk of harm, gently encourage contacting their therapist or a crisis line"""),
    ("human", "{prompt}"),
])


class GeminiTextGenerator:
    """network-backed generator using gemini via langchain"""

    def __init__(self):
        self._chain = None

    def _get_chain(self):
        """get or create the answer generation chain"""
        if self._chain is None:
            llm = ChatGoogleGenerativeAI(
                model=settings.GEMINI_MODEL,
                google_api_key=settings.GEMINI_API_KEY,
                temperature=settings.GENERATION_TEMPERATURE,
                max_output_tokens=settings.GENERATION_MAX_OUTPUT_TOKENS,
            )
            self._chain = COMPANION_PROMPT | llm | StrOutputParser()
        return self._chain

    async def generate(self, prompt: str, timeout: float) -> str:
        chain = self._get_chain()
        text = await asyncio.wait_for(chain.ainvoke({"prompt": prompt}), timeout=timeout)
        if not text or not text.strip():
            raise GenerationError("Gemini returned an empty response")
        return text.strip()


class CannedTextGenerator:
    """deterministic generator: returns a fixed reply, raises, or stalls past the timeout"""

    def __init__(
        self,
        reply: str = "I'm here with you.",
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    async def generate(self, prompt: str, timeout: float) -> str:
        self.prompts.append(prompt)
        return await asyncio.wait_for(self._respond(), timeout=timeout)

    async def _respond(self) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if not self.reply or not self.reply.strip():
            raise GenerationError("Canned generator has an empty reply")
        return self.reply


# singleton generator (created on first use)
_generator: Optional[GeminiTextGenerator] = None


def get_text_generator() -> TextGenerator:
    """dependency injection for the generative text service"""
    global _generator
    if _generator is None:
        _generator = GeminiTextGenerator()
    return _generator
