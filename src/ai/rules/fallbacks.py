"""Fallbacks determinísticos para quando o Gemini falha.

Garante resposta previsível e segura quando a IA não está disponível:
timeout, erro HTTP, erro de rede ou payload inválido.
"""

from __future__ import annotations

from typing import Final

from ai.rules.language_detection import DEFAULT_LANGUAGE, Language

FALLBACK_REPLIES: Final[dict[Language, str]] = {
    Language.HINGLISH: "Sorry yaar, thoda issue ho gaya. Tum bolo kya chahiye? 😅",
    Language.HINDI: "माफ करें, कुछ समस्या हो गई। आप बताएं क्या चाहिए? 😅",
    Language.ENGLISH: "Sorry, I encountered an issue. What can I help you with? 😅",
    Language.URDU: "معاف کریں، کچھ مسئلہ ہو گیا۔ آپ بتائیں کیا چاہیے؟ 😅",
    Language.BENGALI: "দুঃখিত, কিছু সমস্যা হয়েছে। আপনি বলুন কী লাগবে? 😅",
    Language.TAMIL: (
        "மன்னிக்கவும், சில பிரச்சனை ஏற்பட்டது. "
        "நீங்கள் என்ன வேண்டும் என்று சொல்லுங்கள்? 😅"
    ),
    Language.GUJARATI: "માફ કરશો, થોડી સમસ્યા થઈ. તમે કહો શું જોઈએ? 😅",
}


def fallback_reply(language: Language | str | None = None) -> str:
    """Retorna o fallback do idioma (hinglish se desconhecido).

    Args:
        language: Idioma detectado da mensagem

    Returns:
        Texto de fallback, sempre não vazio.
    """
    try:
        key = Language(language) if language else DEFAULT_LANGUAGE
    except ValueError:
        key = DEFAULT_LANGUAGE
    return FALLBACK_REPLIES[key]
