import asyncio

import pytest
from neo4j.exceptions import ServiceUnavailable, SessionExpired

from survivor_draft.database.executor import (
    AccessMode, QueryFailedError, QueryOperation, is_transient_error, to_native
)
from survivor_draft.database.pool import PoolClosedError

from conftest import FakeSession


OPERATION = QueryOperation("MATCH (s:Season) RETURN s", {"n": 1}, AccessMode.READ, "get_all_seasons")


@pytest.mark.asyncio
async def test_success_returns_rows_and_closes_session(make_executor, sleeps):
    session = FakeSession([{"s": {"season_number": 47}}])
    executor, pool = make_executor(session)

    rows = await executor.execute(OPERATION)

    assert rows == [{"s": {"season_number": 47}}]
    assert session.run_calls == [("MATCH (s:Season) RETURN s", {"n": 1})]
    assert session.close.await_count == 1
    assert pool.write_flags == [False]
    assert sleeps == []


@pytest.mark.asyncio
async def test_write_operation_borrows_write_session(make_executor):
    executor, pool = make_executor(FakeSession([]))

    await executor.execute(QueryOperation("CREATE (s:Season)", name="create_season"))

    assert pool.write_flags == [True]


@pytest.mark.asyncio
async def test_non_transient_error_fails_immediately(make_executor, sleeps):
    session = FakeSession(Exception("Invalid input 'MATCH'"))
    executor, pool = make_executor(session, FakeSession([]))

    with pytest.raises(QueryFailedError) as exc_info:
        await executor.execute(OPERATION)

    assert str(exc_info.value) == "Database query failed: Invalid input 'MATCH'"
    assert exc_info.value.attempts == 1
    assert exc_info.value.transient is False
    assert len(pool.opened) == 1
    assert session.closed
    assert sleeps == []


@pytest.mark.asyncio
async def test_retries_transient_errors_then_succeeds(make_executor, sleeps):
    first = FakeSession(ServiceUnavailable("Connection refused"))
    second = FakeSession(SessionExpired("Session expired"))
    third = FakeSession([{"ok": 1}])
    executor, pool = make_executor(first, second, third)

    rows = await executor.execute(OPERATION)

    assert rows == [{"ok": 1}]
    assert sleeps == [0.1, 0.2]
    assert pool.opened == [first, second, third]
    assert all(s.close.await_count == 1 for s in (first, second, third))


@pytest.mark.asyncio
async def test_exhausted_retries_report_attempts_and_last_error(make_executor, sleeps):
    sessions = [
        FakeSession(ServiceUnavailable("Connection refused")),
        FakeSession(ServiceUnavailable("Connection refused")),
        FakeSession(ServiceUnavailable("Connection timed out")),
    ]
    executor, pool = make_executor(*sessions)

    with pytest.raises(QueryFailedError) as exc_info:
        await executor.execute(OPERATION)

    error = exc_info.value
    assert "failed after 3 attempts" in str(error)
    assert str(error).endswith("Connection timed out")
    assert error.attempts == 3
    assert error.transient is True
    # no wait after the final attempt
    assert sleeps == [0.1, 0.2]
    assert all(s.closed for s in sessions)


@pytest.mark.asyncio
async def test_per_call_attempt_override(make_executor, sleeps):
    executor, pool = make_executor(FakeSession(ServiceUnavailable("Connection refused")))

    with pytest.raises(QueryFailedError) as exc_info:
        await executor.execute(OPERATION, max_attempts=1)

    assert exc_info.value.attempts == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_zero_attempts_rejected(make_executor):
    executor, _ = make_executor()

    with pytest.raises(ValueError):
        await executor.execute(OPERATION, max_attempts=0)


@pytest.mark.asyncio
async def test_close_error_after_success_is_not_raised(make_executor):
    session = FakeSession([{"ok": 1}], close_error=RuntimeError("socket already closed"))
    executor, _ = make_executor(session)

    assert await executor.execute(OPERATION) == [{"ok": 1}]
    assert session.closed


@pytest.mark.asyncio
async def test_close_error_does_not_mask_query_error(make_executor):
    session = FakeSession(Exception("Syntax error"), close_error=RuntimeError("close failed"))
    executor, _ = make_executor(session)

    with pytest.raises(QueryFailedError) as exc_info:
        await executor.execute(OPERATION)

    assert "Syntax error" in str(exc_info.value)
    assert "close failed" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_session_closed_before_error_propagates(make_executor):
    session = FakeSession(Exception("Constraint violation"))
    executor, _ = make_executor(session)

    closed_when_raised = None
    try:
        await executor.execute(OPERATION)
    except QueryFailedError:
        closed_when_raised = session.closed

    assert closed_when_raised is True


@pytest.mark.asyncio
async def test_pool_closed_is_retried_without_session(make_executor, sleeps):
    executor, pool = make_executor(FakeSession([{"ok": 1}]))
    calls = []
    real_session = pool.session

    def session(write=True):
        calls.append(write)
        if len(calls) == 1:
            raise PoolClosedError()
        return real_session(write)

    pool.session = session

    assert await executor.execute(OPERATION) == [{"ok": 1}]
    assert sleeps == [0.1]


@pytest.mark.asyncio
async def test_ping(make_executor):
    session = FakeSession([{"ok": 1}])
    executor, pool = make_executor(session)

    assert await executor.ping() is True
    assert session.run_calls[0][0] == "RETURN 1 AS ok"
    assert pool.write_flags == [False]


def test_backoff_doubles(make_executor):
    executor, _ = make_executor()

    assert [executor.backoff_delay(n) for n in (1, 2, 3)] == pytest.approx([0.1, 0.2, 0.4])


@pytest.mark.parametrize("error, expected", [
    (ServiceUnavailable("Unable to retrieve routing information"), True),
    (SessionExpired("Session expired"), True),
    (ConnectionRefusedError("refused"), True),
    (TimeoutError(), True),
    (Exception("connect ECONNREFUSED 127.0.0.1:7687"), True),
    (Exception("getaddrinfo ENOTFOUND neo4j.local"), True),
    (Exception("Request timed out"), True),
    (Exception("Invalid input 'RETRUN'"), False),
    (ValueError("No fields provided for update"), False),
])
def test_is_transient_error(error, expected):
    assert is_transient_error(error) is expected


def test_to_native_recurses_into_collections():
    class Stamp:
        def to_native(self):
            return "2024-05-01"

    value = {"s": {"season_number": 47, "created": Stamp()}, "names": ("A", "B")}

    assert to_native(value) == {
        "s": {"season_number": 47, "created": "2024-05-01"},
        "names": ["A", "B"],
    }


@pytest.mark.asyncio
async def test_cancellation_still_closes_session(make_executor, sleeps):
    session = FakeSession(asyncio.CancelledError())
    executor, pool = make_executor(session, FakeSession([]))

    with pytest.raises(asyncio.CancelledError):
        await executor.execute(OPERATION)

    assert session.close.await_count == 1
    assert len(pool.opened) == 1
    assert sleeps == []
