# shared fixtures for companion tests
# provides mock db with mood / journal / session history, a canned text
# generator, and an httpx test client

import pytest
import pytest_asyncio
from datetime import datetime, timezone, timedelta

from httpx import AsyncClient, ASGITransport

from companion.main import app
from companion.services.db import get_db
from companion.services.text_generation import CannedTextGenerator, get_text_generator


# test ids
USER_ID = "user_001"
NEW_USER_ID = "user_002"
OTHER_USER_ID = "user_999"

# fixed clock; mongodb hands back naive utc datetimes, so stored docs are naive
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
NOW_NAIVE = datetime(2025, 6, 15, 12, 0)

CANNED_REPLY = "That sounds like a lot to carry today. Let's try one small step together."


def days_ago(n: float) -> datetime:
    return NOW_NAIVE - timedelta(days=n)


def mood_doc(entry_id: str, user_id: str, days: float, mood, trigger=None) -> dict:
    return {
        "_id": f"oid_{entry_id}",
        "entry_id": entry_id,
        "user_id": user_id,
        "mood": mood,
        "trigger": trigger,
        "created_at": days_ago(days),
    }


def journal_doc(journal_id: str, user_id: str, days: float, content: str, mood=None, tags=None) -> dict:
    return {
        "_id": f"oid_{journal_id}",
        "journal_id": journal_id,
        "user_id": user_id,
        "content": content,
        "mood": mood,
        "tags": tags or [],
        "created_at": days_ago(days),
    }


def session_doc(session_id: str, user_id: str, days: float, **fields) -> dict:
    doc = {
        "_id": f"oid_{session_id}",
        "session_id": session_id,
        "user_id": user_id,
        "session_date": days_ago(days),
        "notes": "",
        "goals": [],
        "homework": [],
        "techniques": [],
        "completed_homework": [],
    }
    doc.update(fields)
    return doc


# sample data (stored out of order; reads sort newest first)

# most recent first: 2, 3, 2, 7, 8, 8, 7, 8 → declining; "exam" four times
SAMPLE_MOODS = [
    mood_doc("mood_005", USER_ID, 4, 8),
    mood_doc("mood_008", USER_ID, 0, 2, "exam"),
    mood_doc("mood_007", USER_ID, 1, 3, "Exam"),
    mood_doc("mood_006", USER_ID, 2, 2, "sleep"),
    mood_doc("mood_004", USER_ID, 3, 7, "exam"),
    mood_doc("mood_003", USER_ID, 5, 8, "exam "),
    mood_doc("mood_002", USER_ID, 6, 7, "work"),
    mood_doc("mood_001", USER_ID, 7, 8),
    mood_doc("mood_900", OTHER_USER_ID, 0, 10, "party"),
]

SAMPLE_JOURNALS = [
    journal_doc(
        "journal_002", USER_ID, 3,
        "Talked to my friend and felt a bit better after our walk. Making progress.",
        mood=6,
    ),
    journal_doc(
        "journal_003", USER_ID, 1,
        "Exam week again. I feel anxious and worried that I will fail, and I cannot sleep.",
        mood=3, tags=["school"],
    ),
    journal_doc(
        "journal_001", USER_ID, 6,
        "I felt stressed at work because my boss kept adding tasks.",
        mood=3,
    ),
    journal_doc("journal_900", OTHER_USER_ID, 0, "Great party last night, so happy.", mood=9),
]

SAMPLE_SESSIONS = [
    session_doc(
        "session_001", USER_ID, 14,
        notes="Introduced thought records for exam-related worries.",
        goals=["Reduce exam anxiety", "Reconnect with friends"],
        homework=["Thought record after each exam"],
        techniques=["Thought record"],
        completed_homework=["Thought record after each exam"],
    ),
    session_doc(
        "session_002", USER_ID, 7,
        notes="Practised restructuring and paced breathing.",
        goals=["Reduce exam anxiety", "Keep a regular sleep schedule"],
        homework=["Daily mood tracking", "Breathing exercises"],
        techniques=["Cognitive restructuring", "Mindful breathing"],
        completed_homework=["Daily mood tracking"],
    ),
]


# async cursor mock

class AsyncCursorMock:
    """mock for motor's async cursor — supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = list(data or [])
        self._index = 0

    def sort(self, key, direction=1):
        self._data = sorted(self._data, key=lambda d: d[key], reverse=direction == -1)
        return self

    def limit(self, n):
        self._data = self._data[:n]
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item


class MockCollection:
    """mock for a motor collection; the companion only calls find()"""

    def __init__(self, data=None):
        self._data = data or []
        self.find_calls = 0

    def find(self, query=None, projection=None):
        self.find_calls += 1
        results = self._data
        if query:
            results = [d for d in results if all(d.get(k) == v for k, v in query.items())]
        return AsyncCursorMock(results)


class FailingCollection:
    """a collection whose reads always fail, like an unreachable store"""

    def __init__(self):
        self.find_calls = 0

    def find(self, query=None, projection=None):
        self.find_calls += 1
        raise ConnectionError("store unavailable")


class MockDatabase:
    """mock database that mimics the Database class"""

    def __init__(self, moods=None, journals=None, sessions=None):
        self.mood_entries = MockCollection([d.copy() for d in (SAMPLE_MOODS if moods is None else moods)])
        self.journals = MockCollection([d.copy() for d in (SAMPLE_JOURNALS if journals is None else journals)])
        self.therapy_sessions = MockCollection(
            [d.copy() for d in (SAMPLE_SESSIONS if sessions is None else sessions)]
        )

    @property
    def find_calls(self):
        return self.mood_entries.find_calls + self.journals.find_calls + self.therapy_sessions.find_calls

    async def connect(self):
        pass

    async def close(self):
        pass


class FailingDatabase(MockDatabase):
    """every collection read raises"""

    def __init__(self):
        self.mood_entries = FailingCollection()
        self.journals = FailingCollection()
        self.therapy_sessions = FailingCollection()


@pytest.fixture
def mock_db():
    """create a fresh mock database for each test"""
    return MockDatabase()


@pytest.fixture
def failing_db():
    return FailingDatabase()


@pytest.fixture
def generator():
    """deterministic text generator with a fixed reply"""
    return CannedTextGenerator(reply=CANNED_REPLY)


@pytest_asyncio.fixture
async def client(mock_db, generator):
    """httpx async test client with mocked dependencies"""

    async def override_get_db():
        return mock_db

    def override_get_text_generator():
        return generator

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_text_generator] = override_get_text_generator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
