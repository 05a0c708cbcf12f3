"""
Query execution with session discipline and bounded retry.

Every database call in the service layer goes through QueryExecutor:
one fresh session per attempt, the session is always closed before the
attempt's outcome is acted on, and only transient failures (connection,
availability, timeouts) are retried with exponential backoff.
"""

import asyncio
import logging
import socket
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from neo4j.exceptions import ServiceUnavailable, SessionExpired, TransientError
from neo4j.graph import Node, Path, Relationship

from .pool import ConnectionPool, PoolClosedError


logger = logging.getLogger(__name__)


class AccessMode(str, Enum):
    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class QueryOperation:
    """One database request: Cypher text, parameters and access intent."""

    text: str
    params: Dict[str, Any] = field(default_factory=dict)
    access: AccessMode = AccessMode.WRITE
    name: str = "query"


class QueryFailedError(Exception):
    """
    Raised when a query cannot be completed.

    `attempts` is the number of attempts made; `transient` tells whether
    the last failure was of the retryable kind (i.e. retries ran out).
    """

    def __init__(self, message: str, attempts: int, transient: bool = False):
        super().__init__(message)
        self.message = message
        self.attempts = attempts
        self.transient = transient


TRANSIENT_EXCEPTIONS = (
    ServiceUnavailable,
    SessionExpired,
    TransientError,
    PoolClosedError,
    ConnectionError,
    socket.gaierror,
    TimeoutError,
    asyncio.TimeoutError,
)

TRANSIENT_MARKERS = (
    "connection refused",
    "econnrefused",
    "serviceunavailable",
    "service unavailable",
    "sessionexpired",
    "session expired",
    "pool is closed",
    "enotfound",
    "host not found",
    "name or service not known",
    "name resolution",
    "timed out",
    "timeout",
)


def error_message(error: BaseException) -> str:
    # neo4j errors keep the server message separate from the status code
    return getattr(error, "message", None) or str(error) or type(error).__name__


def is_transient_error(error: BaseException) -> bool:
    """Connection/availability/timeout failures are worth retrying; nothing else is."""
    if isinstance(error, TRANSIENT_EXCEPTIONS):
        return True

    text = f"{getattr(error, 'code', '') or ''} {error_message(error)}".lower()
    return any(marker in text for marker in TRANSIENT_MARKERS)


def to_native(value: Any) -> Any:
    """
    Convert driver values into plain Python values.

    Nodes and relationships become property dicts, paths become lists of
    node dicts, neo4j temporal types become datetime/date/time objects.
    """
    if isinstance(value, (Node, Relationship)):
        return {key: to_native(v) for key, v in value.items()}
    if isinstance(value, Path):
        return [to_native(node) for node in value.nodes]
    if isinstance(value, dict):
        return {key: to_native(v) for key, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_native(v) for v in value]
    if hasattr(value, "to_native"):
        return value.to_native()
    return value


class QueryExecutor:
    """
    Runs QueryOperations against a ConnectionPool.

    Holds no state between calls apart from its configuration.
    """

    def __init__(self,
                 pool: ConnectionPool,
                 max_attempts: int = 3,
                 base_delay: float = 0.1,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        """
        Args:
            pool: Open connection pool to borrow sessions from
            max_attempts: Default attempt budget per operation
            base_delay: Wait before the second attempt in seconds, doubled after each failure
            sleep: Awaitable used for backoff waits (injectable for tests)
        """
        self.pool = pool
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Wait after failed attempt `attempt` (1-based): 100ms, 200ms, 400ms..."""
        return self.base_delay * (2 ** (attempt - 1))

    async def execute(self,
                      operation: QueryOperation,
                      max_attempts: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Execute an operation and return its rows as plain dicts.

        Raises:
            QueryFailedError: Immediately for non-transient errors, or once
                every attempt has failed with a transient error
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            session = None
            try:
                try:
                    session = self.pool.session(write=operation.access == AccessMode.WRITE)
                    result = await session.run(operation.text, operation.params)
                    rows = await result.data()
                finally:
                    # also runs on cancellation
                    await self._close_session(session, operation)

            except Exception as e:
                last_error = e

                if not is_transient_error(e):
                    logger.error(f"Query '{operation.name}' failed: {error_message(e)}")
                    raise QueryFailedError(
                        f"Database query failed: {error_message(e)}",
                        attempts=attempt,
                    ) from e

                logger.warning(
                    f"Query '{operation.name}' attempt {attempt}/{attempts} failed: {error_message(e)}"
                )
                if attempt < attempts:
                    delay = self.backoff_delay(attempt)
                    logger.info(f"Retrying '{operation.name}' after {delay * 1000:.0f}ms")
                    await self._sleep(delay)
                continue

            return [to_native(row) for row in rows]

        logger.error(f"Query '{operation.name}' failed after {attempts} attempts")
        raise QueryFailedError(
            f"Database query failed after {attempts} attempts: {error_message(last_error)}",
            attempts=attempts,
            transient=True,
        ) from last_error

    async def ping(self) -> bool:
        """Single-attempt connectivity check used by the readiness probe."""
        rows = await self.execute(
            QueryOperation("RETURN 1 AS ok", access=AccessMode.READ, name="ping"),
            max_attempts=1,
        )
        return bool(rows) and rows[0].get("ok") == 1

    async def _close_session(self, session, operation: QueryOperation) -> None:
        if session is None:
            return
        try:
            await session.close()
        except Exception as e:
            logger.warning(f"Error closing session for '{operation.name}': {error_message(e)}")
