import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

import psutil
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ...database.executor import QueryExecutor, QueryFailedError
from ..dependencies import get_executor


logger = logging.getLogger(__name__)

router = APIRouter()


class HealthStatus(BaseModel):
    status: str  # "healthy", "degraded", "unhealthy"
    timestamp: datetime
    version: str
    uptime_seconds: float
    checks: Dict[str, Any]


class SystemMetrics(BaseModel):
    cpu_percent: float
    memory_percent: float
    memory_available_mb: float
    disk_usage_percent: float


# Track startup time for uptime calculation
_startup_time = time.time()


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request):
    """
    Basic health check endpoint.

    Does not touch the database; should stay fast enough for load
    balancer checks.
    """
    uptime = time.time() - _startup_time
    pool = getattr(request.app.state, "pool", None)

    checks = {
        "api": "healthy",
        "database_pool": "open" if pool is not None and pool.is_open else "closed",
    }

    return HealthStatus(
        status="healthy" if checks["database_pool"] == "open" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=getattr(request.app.state, "version", "1.0.0"),
        uptime_seconds=uptime,
        checks=checks,
    )


@router.get("/health/detailed", response_model=Dict[str, Any])
async def detailed_health_check(request: Request, executor: QueryExecutor = Depends(get_executor)):
    """
    Detailed health check with system metrics and dependency checks.

    Used for monitoring dashboards. Runs a query against the database,
    so it may take longer than the basic check.
    """
    uptime = time.time() - _startup_time

    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')
    system_metrics = SystemMetrics(
        cpu_percent=psutil.cpu_percent(interval=None),
        memory_percent=memory.percent,
        memory_available_mb=memory.available / 1024 / 1024,
        disk_usage_percent=disk.percent,
    )

    dependency_checks = {"database": await check_database_connection(executor)}
    failed_checks = [name for name, status in dependency_checks.items() if status != "healthy"]

    if failed_checks:
        if len(failed_checks) == len(dependency_checks):
            overall_status = "unhealthy"
        else:
            overall_status = "degraded"
    else:
        overall_status = "healthy"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": getattr(request.app.state, "version", "1.0.0"),
        "uptime_seconds": uptime,
        "system_metrics": system_metrics.model_dump(),
        "dependency_checks": dependency_checks,
        "failed_checks": failed_checks,
    }


@router.get("/health/ready")
async def readiness_check(executor: QueryExecutor = Depends(get_executor)):
    """
    Readiness probe.

    Returns 200 once the database answers, 503 otherwise.
    """
    if await check_database_connection(executor) != "healthy":
        raise HTTPException(status_code=503, detail="Database not accessible")

    return {"status": "ready", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/live")
async def liveness_check():
    """
    Liveness probe.

    Returns 200 if the service is alive (even if not ready).
    """
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}


async def check_database_connection(executor: QueryExecutor) -> str:
    """Check database connectivity."""
    try:
        return "healthy" if await executor.ping() else "unhealthy"
    except QueryFailedError as e:
        logger.warning(f"Database health check failed: {e}")
        return "unhealthy"
