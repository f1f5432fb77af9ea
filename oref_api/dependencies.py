"""
Request dependencies resolving the services built at application startup
"""

from fastapi import Request

from oref_core import AlertQueryService


def get_query_service(request: Request) -> AlertQueryService:
    return request.app.state.query_service
