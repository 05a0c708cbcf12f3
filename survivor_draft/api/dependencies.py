"""
FastAPI dependencies.

Handlers get the service and executor built by the lifespan from
app.state; tests replace these through app.dependency_overrides.
"""

from fastapi import Request

from ..database.executor import QueryExecutor
from ..database.service import SurvivorService


async def get_service(request: Request) -> SurvivorService:
    return request.app.state.service


async def get_executor(request: Request) -> QueryExecutor:
    return request.app.state.executor
