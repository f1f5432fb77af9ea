"""
API Routers Package
"""

from . import alerts, system

__all__ = ["alerts", "system"]
