"""Testes para ai/rules/fallbacks.py e ai/rules/commands.py."""

from __future__ import annotations

import pytest

from ai.rules.commands import (
    CLEAR_CONFIRMATION,
    ChatCommand,
    help_message,
    parse_command,
    status_message,
)
from ai.rules.fallbacks import FALLBACK_REPLIES, fallback_reply
from ai.rules.language_detection import Language


class TestFallbackReply:
    """Testes para fallback_reply."""

    def test_every_language_has_non_empty_fallback(self) -> None:
        assert set(FALLBACK_REPLIES) == set(Language)
        assert all(text.strip() for text in FALLBACK_REPLIES.values())

    def test_by_language(self) -> None:
        assert fallback_reply(Language.ENGLISH).startswith("Sorry, I encountered an issue")
        assert fallback_reply("hindi") == FALLBACK_REPLIES[Language.HINDI]

    @pytest.mark.parametrize("value", [None, "", "klingon"])
    def test_unknown_uses_hinglish(self, value: str | None) -> None:
        assert fallback_reply(value) == FALLBACK_REPLIES[Language.HINGLISH]


class TestParseCommand:
    """Testes para parse_command."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("/help", ChatCommand.HELP),
            ("HELP", ChatCommand.HELP),
            ("  मदद ", ChatCommand.HELP),
            ("/clear", ChatCommand.CLEAR),
            ("Clear History", ChatCommand.CLEAR),
            ("/status", ChatCommand.STATUS),
        ],
    )
    def test_aliases(self, text: str, expected: ChatCommand) -> None:
        assert parse_command(text) is expected

    def test_command_must_be_whole_message(self) -> None:
        assert parse_command("please help me") is None
        assert parse_command("/clear now") is None


class TestCommandMessages:
    """Testes para os textos de comando."""

    def test_help_uses_bot_name_and_language(self) -> None:
        hindi = help_message(Language.HINDI, "Dost Bot")
        assert "Dost Bot" in hindi
        assert "सहायता" in hindi

    def test_help_without_translation_uses_hinglish(self) -> None:
        assert help_message(Language.TAMIL, "X") == help_message(Language.HINGLISH, "X")

    def test_status_message(self) -> None:
        text = status_message(3, 12)
        assert "3 conversations" in text
        assert "12 total messages" in text

    def test_clear_confirmation(self) -> None:
        assert CLEAR_CONFIRMATION == "Conversation history cleared! 🧹"
