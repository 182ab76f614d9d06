"""Testes para ai/rules/language_detection.py."""

from __future__ import annotations

import pytest

from ai.rules.language_detection import (
    DEFAULT_LANGUAGE,
    Language,
    clean_for_detection,
    detect_language,
    is_hinglish,
)


class TestCleanForDetection:
    """URLs e dígitos saem antes da detecção."""

    def test_strips_urls_and_digits(self) -> None:
        assert clean_for_detection("Check https://example.com/a?b=1 now 12345") == "Check  now"

    def test_only_digits_becomes_empty(self) -> None:
        assert clean_for_detection(" 9876543210 ") == ""


class TestIsHinglish:
    """Testes para is_hinglish."""

    def test_latin_with_devanagari(self) -> None:
        assert is_hinglish("Hello नमस्ते") is True

    def test_marker_words_are_whole_words_only(self) -> None:
        assert is_hinglish("kya haal hai") is True
        assert is_hinglish("keyboard kaput") is False

    def test_devanagari_without_latin_is_not_hinglish(self) -> None:
        assert is_hinglish("क्या हाल है") is False


class TestDetectLanguage:
    """Ordem: hinglish, scripts puros, inglês, padrão."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("kya haal hai bhai", Language.HINGLISH),
            ("Bhai aaj ka plan kya hai?", Language.HINGLISH),
            ("Hello दोस्त", Language.HINGLISH),
            ("नमस्ते, आप कैसे हैं?", Language.HINDI),
            ("السلام علیکم", Language.URDU),
            ("আপনি কেমন আছেন", Language.BENGALI),
            ("வணக்கம்", Language.TAMIL),
            ("કેમ છો", Language.GUJARATI),
            ("Hello, how are you?", Language.ENGLISH),
            ("Good morning! It's sunny.", Language.ENGLISH),
        ],
    )
    def test_detects_expected_language(self, text: str, expected: Language) -> None:
        assert detect_language(text) == expected

    def test_urls_and_numbers_do_not_affect_detection(self) -> None:
        assert detect_language("Good morning https://x.com/123 at 10") == Language.ENGLISH

    def test_marker_inside_english_word_stays_english(self) -> None:
        # "ke" e "ka" aparecem dentro das palavras, nunca isolados
        assert detect_language("Bake a cake with karma") == Language.ENGLISH

    def test_emoji_only_falls_back_to_default(self) -> None:
        assert detect_language("😀🔥") == DEFAULT_LANGUAGE == Language.HINGLISH
