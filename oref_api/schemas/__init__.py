"""
Pydantic Schemas for API Responses
"""

from .system import HealthCheckResponse

__all__ = [
    "HealthCheckResponse",
]
