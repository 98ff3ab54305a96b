"""
LLM Intent Classifier - asks a language model for intent and entities.

The model is prompted with a fixed label set and few-shot examples and
must answer with one JSON object. Models often wrap that object in
markdown code fences, which are stripped before parsing.

Any failure (provider error, timeout, malformed JSON, wrong shape)
yields None; the dispatch layer answers those with a generic
"didn't understand" reply instead of an error.
"""

import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from askari.ai.intent.base import IntentClassifier
from askari.ai.intent.schemas import ClassifiedIntent
from askari.ai.prompts.intent_prompts import (
    INTENT_EXTRACTION_PROMPT,
    INTENT_SYSTEM_PROMPT,
)
from askari.ai.providers.base import AIProvider


logger = logging.getLogger("askari.ai.intent.llm")

CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(content: str) -> str:
    return CODE_FENCE.sub("", content).strip()


class LLMIntentClassifier(IntentClassifier):
    """
    Language-model classifier.

    Usage:
        classifier = LLMIntentClassifier(GeminiProvider(api_key=...))
        result = await classifier.classify("list guards for Sheraton Hotel")
        result.intent          # "getGuardsForSite"
        result.entities.site_name  # "Sheraton Hotel"
    """

    strategy = "llm"

    def __init__(self, provider: AIProvider, temperature: float = 0.1, max_tokens: int = 256):
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def classify(self, text: str) -> Optional[ClassifiedIntent]:
        prompt = INTENT_EXTRACTION_PROMPT.format(request=text.replace('"', "'"))

        try:
            response = await self.provider.generate(
                prompt=prompt,
                system_prompt=INTENT_SYSTEM_PROMPT,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"Intent provider call failed: {e}")
            return None

        logger.debug(f"Intent provider response: {response.summary()}")

        if not response.success:
            logger.warning(f"Intent classification failed: {response.error}")
            return None

        raw = strip_code_fences(response.content)
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            if data.get("entities") is None:
                data["entities"] = {}
            intent = ClassifiedIntent.model_validate(data)
        except (json.JSONDecodeError, ValueError, ValidationError) as e:
            logger.warning(f"Failed to parse intent JSON: {e} ({raw[:100]!r})")
            return None

        logger.info(
            f"LLM intent: {intent.intent} in {response.latency_ms:.0f}ms "
            f"for {text[:50]!r}"
        )
        return intent
