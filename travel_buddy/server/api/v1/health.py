"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from travel_buddy.server.core import constant

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a status indicator, the current time and the process uptime in
    seconds to confirm the server is running and reachable.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "service": constant.SERVICE_NAME,
    }


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API and supported schema version.
    """
    return {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}
