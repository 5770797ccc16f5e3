"""
Health check routes for monitoring and service discovery.
"""

from fastapi import APIRouter
from sqlalchemy import literal
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from tracker.api.deps import SessionDep
from tracker.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=str)
def health_check() -> str:
    """Liveness probe. Always answers ``"OK"`` while the process is serving."""
    return "OK"


@router.get("/health/db")
def database_health_check(session: SessionDep) -> dict:
    """Round-trip a constant through the store and report which backend answered."""
    dialect = session.get_bind().dialect.name
    try:
        session.exec(select(literal(1))).one()
    except SQLAlchemyError as e:
        logger.error(f"Store unreachable ({dialect}): {e}")
        return {"status": "unhealthy", "database": "error", "dialect": dialect}
    return {"status": "healthy", "database": "ok", "dialect": dialect}
