"""
Gemini Provider - Google's GenAI SDK.

Used by the LLM intent classifier. Calls go through the SDK's async
client (``client.aio``) so classification never blocks the event loop.
"""

import time
import logging
from typing import Optional

from google import genai
from google.genai import types

from askari.ai.providers.base import (
    AIProvider,
    AIResponse,
    TokenUsage,
)

logger = logging.getLogger("askari.ai.gemini")

DEFAULT_MODEL = "gemini-2.0-flash"


class GeminiProvider(AIProvider):
    provider_name = "gemini"

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout_seconds: int = 30):
        self.model = model
        self.api_key = api_key

        if self.api_key:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=timeout_seconds * 1000),
            )
            logger.info(f"Gemini provider initialized with model: {self.model}")
        else:
            self._client = None
            logger.warning("Gemini API key not configured")

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 512,
        **kwargs
    ) -> AIResponse:
        start_time = time.time()

        if not self._client:
            return self._error("API key missing", start_time)

        try:
            config = types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
                system_instruction=system_prompt,
            )

            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )

            return AIResponse(
                content=response.text or "",
                provider=self.provider_name,
                model=self.model,
                usage=self._extract_usage(response),
                latency_ms=self._measure_latency(start_time),
                success=True,
            )

        except Exception as e:
            logger.error(f"Gemini generation failed: {e}")
            return self._error(str(e), start_time)

    def _extract_usage(self, response):
        # usage_metadata may be None when the API reports no usage
        metadata = response.usage_metadata
        prompt_t = (metadata.prompt_token_count or 0) if metadata else 0
        comp_t = (metadata.candidates_token_count or 0) if metadata else 0
        return TokenUsage(prompt_tokens=prompt_t, completion_tokens=comp_t)

    def _error(self, msg, start_time):
        return self._create_error_response(
            error=msg, model=self.model, latency_ms=self._measure_latency(start_time)
        )
