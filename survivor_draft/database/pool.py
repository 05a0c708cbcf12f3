"""
Neo4j connection pool.

The pool is an explicitly owned resource: the host application opens it
once at startup and closes it once at shutdown. Request handlers only
ever borrow short-lived sessions from it.
"""

import logging
from typing import Optional

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession, READ_ACCESS, WRITE_ACCESS

from ..config import AppConfig


logger = logging.getLogger(__name__)


class ConnectionConfigError(Exception):
    """Raised when the pool cannot be configured (missing credentials)."""
    pass


class PoolClosedError(Exception):
    """Raised when a session is requested from a pool that is not open."""

    def __init__(self, message: str = "Pool is closed"):
        super().__init__(message)


class ConnectionPool:
    """
    Owns the neo4j AsyncDriver and its connection pool.

    Sessions are cheap and must be closed by whoever acquires them; the
    driver is expensive and lives for the whole process.
    """

    def __init__(self, config: AppConfig):
        self.config = config
        self._driver: Optional[AsyncDriver] = None

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    async def open(self) -> None:
        """
        Create the driver and verify the server is reachable.

        Calling open() on an already open pool is a no-op.
        """
        if self._driver is not None:
            return

        if not self.config.has_credentials:
            raise ConnectionConfigError(
                "Missing Neo4j credentials. Set NEO4J_URI, NEO4J_USERNAME and NEO4J_PASSWORD."
            )

        logger.info(f"Opening Neo4j connection pool (max size {self.config.max_pool_size})")

        driver = AsyncGraphDatabase.driver(
            self.config.neo4j_uri,
            auth=(self.config.neo4j_username, self.config.neo4j_password),
            max_connection_pool_size=self.config.max_pool_size,
            max_connection_lifetime=self.config.connection_lifetime,
            connection_acquisition_timeout=self.config.acquisition_timeout,
            connection_timeout=self.config.connect_timeout,
            keep_alive=True,
        )

        try:
            await driver.verify_connectivity()
        except Exception as e:
            logger.error(f"Neo4j connection error: {e}")
            try:
                await driver.close()
            except Exception as close_err:
                logger.warning(f"Error closing driver after failed open: {close_err}")
            raise

        self._driver = driver
        logger.info("Neo4j connection established")

    async def close(self) -> None:
        """Close the driver. Safe to call more than once."""
        if self._driver is None:
            return

        driver, self._driver = self._driver, None
        try:
            await driver.close()
            logger.info("Neo4j connection pool closed")
        except Exception as e:
            logger.error(f"Error closing Neo4j driver: {e}")

    def session(self, write: bool = True) -> AsyncSession:
        """Borrow a new session for a single query attempt."""
        if self._driver is None:
            raise PoolClosedError()

        return self._driver.session(
            database=self.config.neo4j_database,
            default_access_mode=WRITE_ACCESS if write else READ_ACCESS,
        )
