"""
Application configuration.

Design rules:
- get_config() is the ONLY place env vars are read.
- Everything else receives an AppConfig (or the pieces of it it needs).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    # Neo4j connection
    neo4j_uri: Optional[str]
    neo4j_username: Optional[str]
    neo4j_password: Optional[str]
    neo4j_database: str = "neo4j"

    # Pool tuning (operational values, not behaviour)
    max_pool_size: int = 50
    connection_lifetime: float = 60 * 60      # seconds
    acquisition_timeout: float = 60.0         # seconds
    connect_timeout: float = 30.0             # seconds

    # Query retry policy
    query_max_attempts: int = 3
    query_retry_base_delay: float = 0.1       # 100ms, doubled per attempt

    # API
    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])
    debug: bool = False

    @property
    def has_credentials(self) -> bool:
        return bool(self.neo4j_uri and self.neo4j_username and self.neo4j_password)


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def _getenv_int(name: str, default: int) -> int:
    return int(_getenv(name, str(default)) or default)


def _getenv_float(name: str, default: float) -> float:
    return float(_getenv(name, str(default)) or default)


def get_config() -> AppConfig:
    """
    Centralized config.
    - Loads `.env` if present (local dev)
    - Falls back to the defaults on AppConfig for anything unset
    """
    load_dotenv(override=False)

    origins = _getenv("CORS_ORIGINS")

    return AppConfig(
        neo4j_uri=_getenv("NEO4J_URI"),
        neo4j_username=_getenv("NEO4J_USERNAME"),
        neo4j_password=_getenv("NEO4J_PASSWORD"),
        neo4j_database=_getenv("NEO4J_DATABASE", "neo4j") or "neo4j",
        max_pool_size=_getenv_int("NEO4J_MAX_POOL_SIZE", 50),
        connection_lifetime=_getenv_float("NEO4J_CONNECTION_LIFETIME", 3600.0),
        acquisition_timeout=_getenv_float("NEO4J_ACQUISITION_TIMEOUT", 60.0),
        query_max_attempts=_getenv_int("QUERY_MAX_ATTEMPTS", 3),
        query_retry_base_delay=_getenv_float("QUERY_RETRY_BASE_DELAY", 0.1),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        debug=(_getenv("DEBUG", "false") or "false").lower() == "true",
    )
