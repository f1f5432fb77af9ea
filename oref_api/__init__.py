"""
Relay HTTP layer: settings, dependencies and routers
"""

__version__ = "1.0.0"
