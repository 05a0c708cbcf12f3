import pytest
from typing import List
from unittest.mock import AsyncMock, MagicMock

from survivor_draft.config import AppConfig
from survivor_draft.database.executor import QueryExecutor


class FakeSession:
    """Stand-in for neo4j.AsyncSession driven by a scripted outcome."""

    def __init__(self, outcome, close_error: Exception = None):
        self.outcome = outcome
        self.run_calls = []
        self.closed = False
        self.close = AsyncMock(side_effect=self._close(close_error))

    def _close(self, close_error):
        async def close():
            self.closed = True
            if close_error is not None:
                raise close_error
        return close

    async def run(self, text, params=None):
        self.run_calls.append((text, params))
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        result = MagicMock()
        result.data = AsyncMock(return_value=self.outcome)
        return result


class FakePool:
    """Hands out one FakeSession per session() call, in order."""

    def __init__(self, sessions: List[FakeSession]):
        self.sessions = list(sessions)
        self.opened: List[FakeSession] = []
        self.write_flags: List[bool] = []
        self.is_open = True

    def session(self, write: bool = True) -> FakeSession:
        self.write_flags.append(write)
        session = self.sessions.pop(0)
        self.opened.append(session)
        return session


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        neo4j_uri="bolt://localhost:7687",
        neo4j_username="neo4j",
        neo4j_password="password",
        debug=True,
    )


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_executor(sleeps):
    """Build an executor over scripted sessions that records backoff waits."""

    def build(*sessions: FakeSession, max_attempts: int = 3):
        async def record_sleep(delay: float):
            sleeps.append(delay)

        pool = FakePool(sessions)
        return QueryExecutor(pool, max_attempts=max_attempts, base_delay=0.1, sleep=record_sleep), pool

    return build


@pytest.fixture
def mock_executor() -> MagicMock:
    """Executor whose execute() is an AsyncMock; set return_value/side_effect per test."""
    executor = MagicMock(spec=QueryExecutor)
    executor.execute = AsyncMock(return_value=[])
    executor.ping = AsyncMock(return_value=True)
    return executor
