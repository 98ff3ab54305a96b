"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Long-lived services are built once by the application lifespan and stored
on ``app.state``; these functions hand them to route handlers:

    async def handler(service: IntentService = Depends(get_intent_service)):
        ...

Tests replace them by constructing the app with their own client and
classifier (see ``create_app``).
"""

from fastapi import HTTPException, Request, status

from askari.core.config import Settings
from askari.environments.guardtour.client import PatrolAPIClient
from askari.services.intent_service import IntentService


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        # Only happens if a route is hit before lifespan startup finished
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Service not ready: {name}",
        )
    return value


def get_settings(request: Request) -> Settings:
    return _state(request, "settings")


def get_patrol_client(request: Request) -> PatrolAPIClient:
    return _state(request, "patrol_client")


def get_intent_service(request: Request) -> IntentService:
    return _state(request, "intent_service")
