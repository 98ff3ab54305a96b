"""
Intent Router - JSON access to the assistant for non-WhatsApp clients.

Runs the same IntentService as the webhook and returns the reply with
its metadata instead of TwiML.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from askari.deps import get_intent_service
from askari.services.intent_result import IntentResult
from askari.services.intent_service import IntentService


# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------
logger = logging.getLogger("askari.routers.intent")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/intent", tags=["intent"])


# ---------------------------------------------------------------------------
# REQUEST/RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class IntentRequest(BaseModel):
    """
    Request schema for the /intent endpoint.

    Example:
    {
        "text": "Show patrol report for Atom"
    }
    """
    text: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Natural language request",
    )


class IntentResponse(BaseModel):
    """
    Response schema for the /intent endpoint.

    Example:
    {
        "success": true,
        "intent_type": "query",
        "intent": "patrol_report",
        "message": "📋 *Patrol Reports for Atom*...",
        "data": {"message": "...", "hasData": true, "count": 7}
    }
    """
    success: bool = Field(description="Whether the request was processed successfully")
    intent_type: str = Field(description="Outcome category")
    intent: Optional[str] = Field(default=None, description="Intent detected")
    message: str = Field(description="Reply text")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Query payload")
    processing_time_ms: Optional[float] = Field(default=None, description="Processing time")
    request_id: Optional[str] = Field(default=None, description="Request tracking ID")


def _result_to_response(result: IntentResult) -> IntentResponse:
    return IntentResponse(**result.to_dict())


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post("", response_model=IntentResponse)
async def process_intent(
    request: IntentRequest,
    service: IntentService = Depends(get_intent_service),
):
    """
    Process a natural language request.

    **Examples:**
    - "Show patrol report for Atom"
    - "List guards for Sheraton Hotel"
    - "System stats"
    """
    try:
        result = await service.process(request.text)
        return _result_to_response(result)

    except Exception as e:
        logger.error(f"Failed to process intent: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process intent",
        )
