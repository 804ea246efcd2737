"""
Conftest for EduVision tests.

Ensures the project root is on sys.path so that 'backend', 'configs'
and 'cli' resolve without an install, and provides fakes for the
Gemini client so no test ever reaches the network.
"""

import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add project root to sys.path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from backend.llm_router import GenerationResult, RateLimitError  # noqa: E402
from backend.utils.session_store import SessionStore  # noqa: E402


class FakeGeminiClient:
    """
    Stand-in for GeminiClient that replays scripted outcomes.

    Each entry in ``script`` is either a string (returned as the response
    text) or an exception instance (raised). The keys the client was
    built with are recorded on the shared ``calls`` list.
    """

    def __init__(self, script: list, calls: List[Optional[str]], requests: list):
        self._script = script
        self._calls = calls
        self._requests = requests
        self.api_key = None

    def bind(self, api_key: Optional[str]) -> "FakeGeminiClient":
        self.api_key = api_key
        return self

    async def generate(self, request):
        self._calls.append(self.api_key)
        self._requests.append(request)
        outcome = self._script.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, GenerationResult):
            return outcome
        return GenerationResult(text=outcome, model=request.model)


class FakeClientFactory:
    """Callable passed to FeatureRunner as its client factory."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls: List[Optional[str]] = []
        self.requests: list = []

    def __call__(self, api_key: Optional[str]) -> FakeGeminiClient:
        return FakeGeminiClient(self.script, self.calls, self.requests).bind(api_key)


def rate_limited(message: str = "429 Resource has been exhausted") -> RateLimitError:
    return RateLimitError(message, status_code=429)


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FailingRedis:
    """Redis client whose every call raises, as when the server goes away."""

    async def get(self, key):
        raise ConnectionError("Connection refused")

    async def set(self, key, value):
        raise ConnectionError("Connection refused")

    async def delete(self, *keys):
        raise ConnectionError("Connection refused")


def failing_store() -> SessionStore:
    """A SessionStore already bound to a FailingRedis."""
    store = SessionStore(redis_url=None)
    store._initialized = True
    store.use_redis = True
    store.redis_client = FailingRedis()
    return store


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point score storage at a throwaway SQLite file."""
    db_file = tmp_path / "scores.db"
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(db_file))
    return db_file
