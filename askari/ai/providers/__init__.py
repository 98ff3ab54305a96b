"""
AI Providers Module - Clients for text-generation services.

Only Google Gemini is wired in; it backs the LLM intent classifier:
    response = await provider.generate(prompt, **kwargs)
"""

from askari.ai.providers.base import AIProvider, AIResponse, TokenUsage
from askari.ai.providers.gemini import GeminiProvider

__all__ = [
    "AIProvider",
    "AIResponse",
    "TokenUsage",
    "GeminiProvider",
]
