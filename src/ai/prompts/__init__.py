"""Prompts do módulo AI.

Arquivos:
- system_role.py: persona do assistente por idioma
- reply_prompt.py: montagem do prompt com histórico e contexto
"""

from ai.prompts.reply_prompt import build_reply_prompt, contextual_instructions
from ai.prompts.system_role import persona_for

__all__ = [
    "build_reply_prompt",
    "contextual_instructions",
    "persona_for",
]
