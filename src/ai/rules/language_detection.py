"""Detecção de idioma/estilo da mensagem recebida.

Heurística determinística por script Unicode, sem chamada a LLM.
A ordem de avaliação importa: hinglish (mistura de scripts ou palavras de
code-switching) vence os scripts puros, e inglês só é reconhecido quando
o texto contém apenas letras latinas e pontuação básica.
"""

from __future__ import annotations

import re
from enum import StrEnum
from re import Pattern
from typing import Final


class Language(StrEnum):
    """Idiomas/estilos suportados nas respostas."""

    HINGLISH = "hinglish"
    HINDI = "hindi"
    URDU = "urdu"
    BENGALI = "bengali"
    TAMIL = "tamil"
    GUJARATI = "gujarati"
    ENGLISH = "english"


DEFAULT_LANGUAGE: Final = Language.HINGLISH

# Palavras hindi romanizadas que indicam code-switching
HINGLISH_MARKERS: Final[tuple[str, ...]] = (
    "hai", "hain", "kya", "kaise", "kaha", "kab", "kyun",
    "jo", "ki", "ka", "ke", "ko", "me", "se", "pe", "par",
)

_URL_PATTERN: Final = re.compile(r"https?://\S+")
_DIGITS_PATTERN: Final = re.compile(r"\d+")

_LATIN: Final = re.compile(r"[a-zA-Z]")
_DEVANAGARI: Final = re.compile(r"[\u0900-\u097F]")
_MARKER_WORDS: Final = re.compile(
    r"\b(?:" + "|".join(HINGLISH_MARKERS) + r")\b", re.IGNORECASE
)
_ENGLISH_ONLY: Final = re.compile(r"^[a-zA-Z\s.,!?'\"]*$")

# Scripts puros, avaliados em ordem após hinglish
_SCRIPT_PATTERNS: Final[tuple[tuple[Language, Pattern[str]], ...]] = (
    (Language.HINDI, _DEVANAGARI),
    (Language.URDU, re.compile(r"[\u0600-\u06FF]")),
    (Language.BENGALI, re.compile(r"[\u0980-\u09FF]")),
    (Language.TAMIL, re.compile(r"[\u0B80-\u0BFF]")),
    (Language.GUJARATI, re.compile(r"[\u0A80-\u0AFF]")),
)


def clean_for_detection(text: str) -> str:
    """Remove URLs e dígitos antes da detecção."""
    without_urls = _URL_PATTERN.sub("", text)
    return _DIGITS_PATTERN.sub("", without_urls).strip()


def is_hinglish(text: str) -> bool:
    """True se há letras latinas junto com Devanagari ou palavras-marcador.

    Marcadores casam só como palavras inteiras ("ke" não casa em "keyboard").
    """
    if not _LATIN.search(text):
        return False
    return bool(_DEVANAGARI.search(text) or _MARKER_WORDS.search(text))


def detect_language(text: str) -> Language:
    """Classifica o texto em um dos idiomas suportados.

    Args:
        text: Corpo da mensagem recebida

    Returns:
        Language detectado; hinglish quando nada mais se aplica.

    Exemplos:
        >>> detect_language("Hello, how are you?")
        <Language.ENGLISH: 'english'>
        >>> detect_language("kya haal hai bhai")
        <Language.HINGLISH: 'hinglish'>
    """
    cleaned = clean_for_detection(text)

    if is_hinglish(cleaned):
        return Language.HINGLISH

    for language, pattern in _SCRIPT_PATTERNS:
        if pattern.search(cleaned):
            return language

    if _ENGLISH_ONLY.match(cleaned):
        return Language.ENGLISH

    return DEFAULT_LANGUAGE
