"""Sanitização da resposta gerada antes da entrega no WhatsApp.

Responsabilidade:
- Remover marcação markdown (negrito, itálico, código inline)
- Colapsar quebras de linha excessivas
- Limitar o tamanho da mensagem
- Garantir determinismo (mesma entrada = mesma saída)
"""

from __future__ import annotations

import re
from re import Pattern
from typing import Final

# Ordem importa: negrito antes de itálico
_MARKDOWN_PATTERNS: Final[tuple[Pattern[str], ...]] = (
    re.compile(r"\*\*(.*?)\*\*"),
    re.compile(r"\*(.*?)\*"),
    re.compile(r"`(.*?)`"),
)

_EXCESS_BREAKS: Final = re.compile(r"\n\s*\n\s*\n")

DEFAULT_MAX_LENGTH: Final = 500
_ELLIPSIS: Final = "..."


def strip_markdown(text: str) -> str:
    """Remove **negrito**, *itálico* e `código`, mantendo o conteúdo."""
    result = text
    for pattern in _MARKDOWN_PATTERNS:
        result = pattern.sub(r"\1", result)
    return result


def truncate_reply(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Corta em max_length caracteres, terminando com reticências."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(_ELLIPSIS)] + _ELLIPSIS


def sanitize_reply(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Limpa resposta do LLM para envio.

    Args:
        text: Texto bruto retornado pelo Gemini
        max_length: Tamanho máximo final

    Returns:
        Texto limpo, sem espaços nas pontas, com no máximo max_length chars.

    Exemplos:
        >>> sanitize_reply("**Namaste!** Kaise ho?")
        'Namaste! Kaise ho?'
    """
    if not text:
        return ""

    cleaned = strip_markdown(text)
    cleaned = _EXCESS_BREAKS.sub("\n\n", cleaned)
    return truncate_reply(cleaned.strip(), max_length)
