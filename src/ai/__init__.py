"""Módulo AI do gateway WhatsApp.

Geração de respostas automáticas: detecção de idioma, prompt por persona,
completion via protocolo (Gemini em app/infra/ai), sanitização e fallbacks
determinísticos. Sem IO direto.
"""

# Config
from ai.config import AISettings, get_ai_settings

# Core
from ai.core import CompletionClientProtocol, MockCompletionClient

# Models
from ai.models import ConversationTurn

# Prompts
from ai.prompts import build_reply_prompt

# Rules
from ai.rules import Language, detect_language, fallback_reply

# Services
from ai.services import ReplyEngine, ReplyOutcome, ReplySource

# Utils
from ai.utils import sanitize_reply

__all__ = [
    "AISettings",
    "CompletionClientProtocol",
    "ConversationTurn",
    "Language",
    "MockCompletionClient",
    "ReplyEngine",
    "ReplyOutcome",
    "ReplySource",
    "build_reply_prompt",
    "detect_language",
    "fallback_reply",
    "get_ai_settings",
    "sanitize_reply",
]
