"""Agregador de settings de AI/LLM.

Re-exporta todas as settings de IA para uso externo.
"""

from __future__ import annotations

from config.settings.ai.conversation import (
    ConversationSettings,
    get_conversation_settings,
)
from config.settings.ai.gemini import (
    GEMINI_API_BASE_URL,
    GeminiSettings,
    get_gemini_settings,
)
from config.settings.ai.rate_limit import (
    RateLimitSettings,
    get_rate_limit_settings,
)

__all__ = [
    "GEMINI_API_BASE_URL",
    # Conversation
    "ConversationSettings",
    # Gemini
    "GeminiSettings",
    # Rate limit
    "RateLimitSettings",
    "get_conversation_settings",
    "get_gemini_settings",
    "get_rate_limit_settings",
]
