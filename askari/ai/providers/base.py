"""
Text-generation provider contract used by the LLM intent classifier.

Providers never raise from generate(): failures come back as an
AIResponse with success=False and the reason in ``error``.
"""

import time
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger("askari.ai")


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


@dataclass
class AIResponse:
    """
    One completion from a provider.

    Attributes:
        content: Generated text ("" on failure)
        provider: Provider name, e.g. "gemini"
        model: Model that produced the text
        usage: Token counts reported by the provider
        latency_ms: Wall time of the call
        success: False when the call failed
        error: Failure reason
    """
    content: str
    provider: str
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None

    def summary(self) -> str:
        """Single-line description for log records."""
        status = "ok" if self.success else f"failed ({self.error})"
        return (
            f"{self.provider}/{self.model} {status} in {self.latency_ms:.0f}ms, "
            f"{self.usage.total_tokens} tokens"
        )


class AIProvider(ABC):
    provider_name: str

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 512,
        **kwargs
    ) -> AIResponse:
        """Return a completion for ``prompt``; errors go in AIResponse.error."""

    def _measure_latency(self, start_time: float) -> float:
        return (time.time() - start_time) * 1000

    def _create_error_response(self, error: str, model: str, latency_ms: float = 0.0) -> AIResponse:
        logger.error(f"AI provider error [{self.provider_name}]: {error}")
        return AIResponse(
            content="",
            provider=self.provider_name,
            model=model,
            latency_ms=latency_ms,
            success=False,
            error=error,
        )
