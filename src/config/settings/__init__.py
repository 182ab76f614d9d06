"""Agregador de settings do gateway WhatsApp.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# AI/LLM settings
from config.settings.ai import (
    GEMINI_API_BASE_URL,
    ConversationSettings,
    GeminiSettings,
    RateLimitSettings,
    get_conversation_settings,
    get_gemini_settings,
    get_rate_limit_settings,
)

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    SessionSettings,
    get_base_settings,
    get_session_settings,
)

# Channel-specific settings
from config.settings.whatsapp import (
    CONTACT_ID_SUFFIX,
    DEFAULT_APOLOGY_MESSAGE,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    # Constants
    "CONTACT_ID_SUFFIX",
    "DEFAULT_APOLOGY_MESSAGE",
    "GEMINI_API_BASE_URL",
    # Base
    "BaseSettings",
    # AI
    "ConversationSettings",
    "Environment",
    "GeminiSettings",
    "RateLimitSettings",
    "SessionSettings",
    # Channels
    "WhatsAppSettings",
    "get_base_settings",
    "get_conversation_settings",
    "get_gemini_settings",
    "get_rate_limit_settings",
    "get_session_settings",
    "get_whatsapp_settings",
]
