"""Comandos de chat respondidos sem chamar o Gemini.

/help, help, मदद: ajuda no idioma detectado.
/clear, clear history: limpa o histórico do contato.
/status: estatísticas das conversas.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from ai.rules.language_detection import Language


class ChatCommand(StrEnum):
    HELP = "help"
    CLEAR = "clear"
    STATUS = "status"


_COMMAND_ALIASES: Final[dict[str, ChatCommand]] = {
    "/help": ChatCommand.HELP,
    "help": ChatCommand.HELP,
    "मदद": ChatCommand.HELP,
    "/clear": ChatCommand.CLEAR,
    "clear history": ChatCommand.CLEAR,
    "/status": ChatCommand.STATUS,
}

CLEAR_CONFIRMATION: Final = "Conversation history cleared! 🧹"

_HELP_TEMPLATES: Final[dict[Language, str]] = {
    Language.HINGLISH: (
        "🤖 {bot_name} Help:\n\n"
        "📱 Main features:\n"
        "• Natural conversation in multiple languages\n"
        "• Smart replies with context\n"
        "• Remembers our chat history\n\n"
        "🔧 Commands:\n"
        "/help - Show this help\n"
        "/clear - Clear chat history\n"
        "/status - Bot status\n\n"
        "💬 Just chat normally, I'll understand! 😊"
    ),
    Language.HINDI: (
        "🤖 {bot_name} सहायता:\n\n"
        "📱 मुख्य विशेषताएं:\n"
        "• कई भाषाओं में प्राकृतिक बातचीत\n"
        "• संदर्भ के साथ स्मार्ट उत्तर\n"
        "• चैट इतिहास याद रखता है\n\n"
        "🔧 कमांड:\n"
        "/help - यह सहायता दिखाएं\n"
        "/clear - चैट इतिहास साफ़ करें\n"
        "/status - बॉट स्थिति\n\n"
        "💬 बस सामान्य रूप से चैट करें, मैं समझ जाऊंगा! 😊"
    ),
    Language.ENGLISH: (
        "🤖 {bot_name} Help:\n\n"
        "📱 Main features:\n"
        "• Natural conversation in multiple languages\n"
        "• Smart contextual replies\n"
        "• Remembers chat history\n\n"
        "🔧 Commands:\n"
        "/help - Show this help\n"
        "/clear - Clear chat history\n"
        "/status - Bot status\n\n"
        "💬 Just chat normally, I understand multiple languages! 😊"
    ),
}


def parse_command(text: str) -> ChatCommand | None:
    """Identifica comando de chat (mensagem inteira, sem diferenciar caixa)."""
    return _COMMAND_ALIASES.get(text.strip().lower())


def help_message(language: Language, bot_name: str) -> str:
    """Texto de ajuda; idiomas sem tradução usam o de hinglish."""
    template = _HELP_TEMPLATES.get(language, _HELP_TEMPLATES[Language.HINGLISH])
    return template.format(bot_name=bot_name)


def status_message(active_conversations: int, total_turns: int) -> str:
    return (
        "Bot Status:\n✅ Active\n"
        f"💬 {active_conversations} conversations\n"
        f"📊 {total_turns} total messages"
    )
