"""Configuração de IA.

Re-exporta settings de geração para uso externo.
"""

from ai.config.settings import (
    DEFAULT_AI_SETTINGS,
    AISettings,
    BlockThreshold,
    GenerationSettings,
    HarmCategory,
    ReplySettings,
    SafetySettings,
    get_ai_settings,
)

__all__ = [
    "DEFAULT_AI_SETTINGS",
    "AISettings",
    "BlockThreshold",
    "GenerationSettings",
    "HarmCategory",
    "ReplySettings",
    "SafetySettings",
    "get_ai_settings",
]
