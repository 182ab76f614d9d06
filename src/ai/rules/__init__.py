"""Regras determinísticas do módulo AI (sem IO)."""

from ai.rules.commands import (
    CLEAR_CONFIRMATION,
    ChatCommand,
    help_message,
    parse_command,
    status_message,
)
from ai.rules.fallbacks import FALLBACK_REPLIES, fallback_reply
from ai.rules.language_detection import (
    DEFAULT_LANGUAGE,
    HINGLISH_MARKERS,
    Language,
    detect_language,
)

__all__ = [
    "CLEAR_CONFIRMATION",
    "DEFAULT_LANGUAGE",
    "FALLBACK_REPLIES",
    "HINGLISH_MARKERS",
    "ChatCommand",
    "Language",
    "detect_language",
    "fallback_reply",
    "help_message",
    "parse_command",
    "status_message",
]
