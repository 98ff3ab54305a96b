"""
System Router - liveness and upstream connectivity checks.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from askari.core.config import Settings
from askari.deps import get_patrol_client, get_settings
from askari.environments.guardtour.client import PatrolAPIClient


logger = logging.getLogger("askari.routers.system")

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(settings: Settings = Depends(get_settings)):
    """
    Liveness probe. Does NOT contact the guard-tour API (use /test-api).

    Returns:
        {"status": "healthy", "timestamp": "...", "service": "..."}
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "service": settings.SERVICE_NAME,
    }


@router.get("/test-api")
async def test_api(client: PatrolAPIClient = Depends(get_patrol_client)):
    """Probe the guard-tour API; 500 when it cannot be reached."""
    result = await client.test_connection()
    if not result.get("success"):
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "API test failed",
                "error": result.get("message"),
            },
        )
    return result
