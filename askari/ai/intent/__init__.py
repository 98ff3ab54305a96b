"""
Intent Module - Natural Language Understanding for guard-tour requests.

Example Flow:
============
User says: "list guards for Sheraton Hotel"

IntentClassifier produces:
{
    "intent": "getGuardsForSite",          # or "guards_for_site" (pattern)
    "entities": {"siteName": "Sheraton Hotel"}
}

IntentService then calls PatrolAPIClient.get_guards_for_site("Sheraton Hotel").

Which classifier runs is chosen by the INTENT_STRATEGY setting.
"""

import logging

from askari.ai.intent.base import IntentClassifier
from askari.ai.intent.entities import extract_entities, resolve_date
from askari.ai.intent.llm_classifier import LLMIntentClassifier
from askari.ai.intent.pattern_classifier import PatternIntentClassifier
from askari.ai.intent.schemas import ClassifiedIntent, Entities, IntentType
from askari.ai.providers.gemini import GeminiProvider
from askari.core.config import Settings


logger = logging.getLogger("askari.ai.intent")


def build_classifier(settings: Settings) -> IntentClassifier:
    """Create the classifier selected by INTENT_STRATEGY."""
    strategy = settings.INTENT_STRATEGY.strip().lower()

    if strategy == "llm":
        if not settings.GEMINI_API_KEY:
            logger.warning("INTENT_STRATEGY=llm but GEMINI_API_KEY is empty; requests will not be understood")
        provider = GeminiProvider(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            timeout_seconds=settings.AI_REQUEST_TIMEOUT,
        )
        return LLMIntentClassifier(provider)

    if strategy != "pattern":
        raise ValueError(f"Unknown INTENT_STRATEGY: {settings.INTENT_STRATEGY!r} (expected 'pattern' or 'llm')")

    return PatternIntentClassifier()


__all__ = [
    "IntentClassifier",
    "PatternIntentClassifier",
    "LLMIntentClassifier",
    "ClassifiedIntent",
    "Entities",
    "IntentType",
    "extract_entities",
    "resolve_date",
    "build_classifier",
]
