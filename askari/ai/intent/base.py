"""
Intent Classifier interface.

Design Pattern: Strategy Pattern
================================
PatternIntentClassifier and LLMIntentClassifier both implement
IntentClassifier, so IntentService dispatches and formats the same way
whichever one configuration selects.
"""

from abc import ABC, abstractmethod
from typing import Optional

from askari.ai.intent.schemas import ClassifiedIntent


class IntentClassifier(ABC):
    """Turns free text into an intent label plus entities."""

    # Identifier used in logs and API responses ("pattern", "llm")
    strategy: str = ""

    @abstractmethod
    async def classify(self, text: str) -> Optional[ClassifiedIntent]:
        """
        Classify a message.

        Returns:
            ClassifiedIntent, or None when the classifier could not produce
            a usable answer (callers treat None like an unrecognized request)

        Note:
            This method should NOT raise exceptions.
        """
        pass
