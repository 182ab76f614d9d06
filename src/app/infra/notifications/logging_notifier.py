"""Notifier que apenas registra eventos em log estruturado.

O transporte em tempo real para a UI fica fora deste serviço; aqui só o
nome do evento e as chaves do payload são registrados (payloads carregam
mensagens e contatos, que não vão para o log).
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Campos sem PII que podem ir para o log junto com o evento
_SAFE_FIELDS = frozenset({
    "session_id",
    "attempt",
    "reason",
    "messages_sent",
    "active_chats",
})


class LoggingNotifier:
    """NotifierProtocol padrão: log estruturado, nunca levanta exceção."""

    __slots__ = ("_level",)

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        extra: dict[str, Any] = {
            "notify_event": event,
            "payload_keys": sorted(payload),
        }
        extra.update({k: v for k, v in payload.items() if k in _SAFE_FIELDS})
        logger.log(self._level, "notifier_event", extra=extra)
