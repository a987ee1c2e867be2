"""Schemas for the liveness endpoint."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    UNHEALTHY = "Unhealthy"


class HealthReport(BaseModel):
    """Outcome of the document store ping backing the liveness check."""

    status: HealthStatus
    duration_ms: float = Field(..., ge=0)
    description: Optional[str] = None


__all__ = ["HealthReport", "HealthStatus"]
