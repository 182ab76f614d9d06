"""Protocolo de notificação para a camada de UI em tempo real."""

from __future__ import annotations

from typing import Any, Protocol


class NotifierProtocol(Protocol):
    """Contrato mínimo para publicar eventos (qr, ready, status, message_reply...).

    Implementações não devem levantar exceção para o chamador.
    """

    def emit(self, event: str, payload: dict[str, Any]) -> None: ...
