"""
Pydantic schemas for System API endpoints
"""

from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Schema for health check response"""
    status: str = Field(..., description="Health status (healthy, degraded, unhealthy)")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(..., description="Health check timestamp")
    checks: Dict[str, bool] = Field(default_factory=dict, description="Individual health checks")
    history_size: int = Field(..., description="Alerts currently held in the history cache", ge=0)
    stored_alerts: int = Field(default=0, description="Alerts in the persistent store", ge=0)
