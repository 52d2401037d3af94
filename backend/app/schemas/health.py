"""Health check schemas."""
from __future__ import annotations

from pydantic import BaseModel


class HealthStatus(BaseModel):
    status: str
    app: str


class DatabaseStatus(BaseModel):
    status: str
    database: str
    message: str | None = None
