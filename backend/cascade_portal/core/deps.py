# backend/cascade_portal/core/deps.py
from typing import Iterator

from fastapi import Request

from .config import SessionLocal, settings
from ..forecast.runner import CompanyLocks
from ..store.base import ForecastStore
from ..store.sql import SqlForecastStore


def get_store(request: Request) -> Iterator[ForecastStore]:
    """
    STORE_BACKEND=memory → app.state.memory_store (process-wide, no DB)
    STORE_BACKEND=sql    → SqlForecastStore on a request-scoped session
    """
    if settings.STORE_BACKEND == "memory":
        yield request.app.state.memory_store
        return

    db = SessionLocal()
    try:
        yield SqlForecastStore(db)
    finally:
        db.close()


def get_company_locks(request: Request) -> CompanyLocks:
    return request.app.state.company_locks
