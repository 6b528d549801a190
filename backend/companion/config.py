# companion configuration
# loads env vars for mongodb, gemini, history limits and check-in timing

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# load .env from project root
load_dotenv(Path(__file__).parent.parent.parent / ".env")


class Settings(BaseSettings):
    # mongodb
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "companion_db")

    # gemini (for companion message generation)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GENERATION_TEMPERATURE: float = 0.6
    GENERATION_MAX_OUTPUT_TOKENS: int = 512
    GENERATION_TIMEOUT_SECONDS: float = 8.0

    # cors
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # history windows read from the store
    MOOD_HISTORY_LIMIT: int = 30
    JOURNAL_HISTORY_LIMIT: int = 10
    SESSION_HISTORY_LIMIT: int = 5

    # journal validation at the entry boundary
    JOURNAL_MIN_LENGTH: int = 10
    JOURNAL_MAX_LENGTH: int = 10000

    # proactive check-ins: how close a session must be to count as upcoming
    CHECKIN_SESSION_LEAD_DAYS: int = 3

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
