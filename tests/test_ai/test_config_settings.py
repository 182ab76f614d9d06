"""Testes para ai/config/settings.py e ConversationTurn."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from ai.config.settings import (
    DEFAULT_AI_SETTINGS,
    AISettings,
    BlockThreshold,
    GenerationSettings,
    HarmCategory,
    SafetySettings,
    get_ai_settings,
)
from ai.models.conversation import ConversationTurn


class TestGenerationSettings:
    """Parâmetros de geração enviados ao Gemini."""

    def test_default_payload(self) -> None:
        assert GenerationSettings().to_payload() == {
            "temperature": 0.8,
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 200,
            "candidateCount": 1,
        }

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            GenerationSettings().temperature = 0.1  # type: ignore[misc]


class TestSafetySettings:
    """Filtros de segurança."""

    def test_four_categories_medium_and_above(self) -> None:
        payload = SafetySettings().to_payload()
        assert len(payload) == 4
        assert {item["category"] for item in payload} == {c.value for c in HarmCategory}
        assert all(
            item["threshold"] == BlockThreshold.BLOCK_MEDIUM_AND_ABOVE.value for item in payload
        )


class TestAISettings:
    def test_defaults(self) -> None:
        settings = get_ai_settings()
        assert settings is DEFAULT_AI_SETTINGS
        assert settings.reply.max_length == 500
        assert settings.reply.context_turns == 3

    def test_override_one_section(self) -> None:
        settings = AISettings(generation=GenerationSettings(temperature=0.2))
        assert settings.generation.temperature == 0.2
        assert settings.safety == SafetySettings()


class TestConversationTurn:
    def test_dict_round_trip_preserves_timestamp(self) -> None:
        turn = ConversationTurn("hi", "hello", "english", datetime(2026, 3, 1, 12, tzinfo=UTC))
        assert ConversationTurn.from_dict(turn.to_dict()) == turn

    def test_from_dict_defaults(self) -> None:
        turn = ConversationTurn.from_dict({})
        assert turn.language == "hinglish"
        assert turn.user_message == ""

    def test_prompt_lines(self) -> None:
        assert ConversationTurn("a", "b", "english").to_prompt_lines() == "User: a\nYou: b"
