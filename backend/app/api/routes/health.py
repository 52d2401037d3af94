"""Liveness and database connectivity endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.dependencies import get_db
from app.db.session import describe_database
from app.schemas.health import DatabaseStatus, HealthStatus

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE = "Database unavailable"

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthStatus)
async def health() -> HealthStatus:
    return HealthStatus(status="ok", app=get_settings().app_name)


@router.get("/db", response_model=DatabaseStatus)
async def database_status(session: AsyncSession = Depends(get_db)) -> DatabaseStatus:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database probe failed: %s", exc)
        return DatabaseStatus(status="Error", database=describe_database(), message=DATABASE_UNAVAILABLE)
    return DatabaseStatus(status="Connected", database=describe_database())
