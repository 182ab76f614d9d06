"""Modelo de turno de conversa.

Um turno é o par (mensagem do usuário, resposta do bot) guardado no
histórico por contato.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ConversationTurn:
    """Entrada do histórico de conversa.

    Atributos:
        user_message: Texto recebido do contato
        reply: Resposta entregue (gerada ou fallback)
        language: Idioma detectado na mensagem
        timestamp: Momento do registro (UTC)
    """

    user_message: str
    reply: str
    language: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        """Serializa turno para persistência/inspeção."""
        return {
            "user_message": self.user_message,
            "reply": self.reply,
            "language": self.language,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationTurn:
        return cls(
            user_message=data.get("user_message", ""),
            reply=data.get("reply", ""),
            language=data.get("language", "hinglish"),
            timestamp=(
                datetime.fromisoformat(data["timestamp"])
                if "timestamp" in data
                else datetime.now(UTC)
            ),
        )

    def to_prompt_lines(self) -> str:
        """Representação para o bloco de histórico do prompt."""
        return f"User: {self.user_message}\nYou: {self.reply}"
