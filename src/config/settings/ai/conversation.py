"""Settings de memória de conversa."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class ConversationSettings:
    """Configurações do histórico de conversa por contato.

    Attributes:
        history_limit: Máximo de turnos guardados por contato (FIFO)
        retention_seconds: Idade do último turno para expurgo
        sweep_interval_seconds: Intervalo da limpeza periódica
    """

    history_limit: int = 10
    retention_seconds: float = 24 * 60 * 60
    sweep_interval_seconds: float = 60 * 60

    def validate(self) -> list[str]:
        errors: list[str] = []

        if self.history_limit < 1:
            errors.append("CONVERSATION_HISTORY_LIMIT deve ser >= 1")

        if self.retention_seconds <= 0:
            errors.append("CONVERSATION_RETENTION_SECONDS deve ser > 0")

        if self.sweep_interval_seconds <= 0:
            errors.append("CONVERSATION_SWEEP_INTERVAL_SECONDS deve ser > 0")

        return errors


def _load_conversation_from_env() -> ConversationSettings:
    """Carrega ConversationSettings de variáveis de ambiente."""
    return ConversationSettings(
        history_limit=int(os.getenv("CONVERSATION_HISTORY_LIMIT", "10")),
        retention_seconds=float(os.getenv("CONVERSATION_RETENTION_SECONDS", "86400")),
        sweep_interval_seconds=float(
            os.getenv("CONVERSATION_SWEEP_INTERVAL_SECONDS", "3600")
        ),
    )


@lru_cache(maxsize=1)
def get_conversation_settings() -> ConversationSettings:
    """Retorna instância cacheada de ConversationSettings."""
    return _load_conversation_from_env()
