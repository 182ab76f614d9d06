"""Montagem do prompt de resposta enviado ao Gemini.

Estrutura (em ordem):
  1. Persona do idioma detectado
  2. Últimos turnos do histórico (User:/You:)
  3. Instruções contextuais por palavra-chave
  4. Nome do contato, quando conhecido
  5. Mensagem atual e instrução final de idioma
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from ai.prompts.system_role import persona_for

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ai.models.conversation import ConversationTurn
    from ai.rules.language_detection import Language

# (palavras-chave, instrução): busca por substring em minúsculas
_CONTEXTUAL_RULES: Final[tuple[tuple[tuple[str, ...], str], ...]] = (
    (
        ("help", "madad", "সাহায্য"),
        "User is asking for help. Be supportive and offer specific assistance.",
    ),
    (
        ("price", "cost", "paisa", "টাকা"),
        "User is asking about pricing. Be helpful but mention you need more context.",
    ),
    (
        ("time", "samay", "সময়"),
        "User is asking about time-related information. Be helpful with scheduling.",
    ),
    (
        ("thank", "dhanyawad", "ধন্যবাদ"),
        "User is thanking you. Respond warmly and ask if they need anything else.",
    ),
    (
        ("sad", "upset", "problem", "pareshan", "दुखी"),
        "User seems upset or has problems. Be empathetic and supportive.",
    ),
)


def contextual_instructions(message: str) -> list[str]:
    """Instruções extras disparadas por palavras-chave da mensagem."""
    lowered = message.lower()
    return [
        instruction
        for keywords, instruction in _CONTEXTUAL_RULES
        if any(keyword in lowered for keyword in keywords)
    ]


def build_reply_prompt(
    message: str,
    language: Language,
    history: Sequence[ConversationTurn],
    *,
    bot_name: str,
    display_name: str | None = None,
    context_turns: int = 3,
) -> str:
    """Monta o prompt completo para uma mensagem.

    Args:
        message: Mensagem atual do contato
        language: Idioma detectado
        history: Histórico do contato (mais antigo primeiro)
        bot_name: Nome da persona
        display_name: Nome de exibição do contato (opcional)
        context_turns: Quantos turnos recentes incluir

    Returns:
        Prompt em texto plano.
    """
    parts = [persona_for(language, bot_name)]

    recent = list(history)[-context_turns:] if context_turns > 0 else []
    if recent:
        parts.append("\n\nConversation history (last few messages):")
        parts.extend(f"\n{turn.to_prompt_lines()}" for turn in recent)

    parts.extend(f"\n{instruction}" for instruction in contextual_instructions(message))

    if display_name:
        parts.append(f"\n\nUser's name: {display_name}")

    parts.append(f"\n\nUser's current message: {message}")
    parts.append(f"\n\nRespond naturally in {language} as a helpful friend:")
    return "".join(parts)
