"""
Handles GET requests to the /health_status endpoint.
"""
from __future__ import annotations

from logging import getLogger

from pydantic.v1 import BaseModel, Field
from sanic import Request, json
from sanic_ext import openapi

from marketplace import settings

logger = getLogger(__name__)


class HealthStatus(BaseModel):
    """Model for the health status of the service."""

    status: str = Field(..., description="Either healthy or maintenance")


@openapi.definition(response=HealthStatus.schema_json())
async def on_get_health_status(request: Request) -> json:
    """
    Handles GET requests to the /health_status endpoint.

    :param request: The Sanic request object.
    """
    if settings.SHOW_SERVICE_MAINTENANCE_BANNER:
        return json({"status": "maintenance"}, status=200)
    return json({"status": "healthy"}, status=200)
