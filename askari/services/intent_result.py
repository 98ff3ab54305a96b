"""
Intent Result Types - Shared data structures for intent processing.

IntentService returns an IntentResult; the webhook only uses ``message``
while the /intent router serialises the whole thing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class IntentResultType(str, Enum):
    """Outcome category of processing one message."""
    QUERY = "query"
    NOT_FOUND = "not_found"
    CLARIFICATION = "clarification"
    HELP = "help"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass
class IntentResult:
    """
    Result of processing a natural language request.

    Attributes:
        success: False only for API failures and unrecognized requests
        intent_type: Outcome category
        intent: Resolved intent value (e.g. "patrol_report")
        message: Chat-ready reply text
        data: QueryResult payload for query outcomes
        processing_time_ms: Processing time in milliseconds
        request_id: Unique request identifier for tracing
    """
    success: bool
    intent_type: IntentResultType
    intent: Optional[str] = None
    message: str = ""
    data: Optional[Dict[str, Any]] = None

    # Metadata
    processing_time_ms: float = 0.0
    request_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for response."""
        return {
            "success": self.success,
            "intent_type": self.intent_type.value,
            "intent": self.intent,
            "message": self.message,
            "data": self.data,
            "processing_time_ms": self.processing_time_ms,
            "request_id": self.request_id,
        }
