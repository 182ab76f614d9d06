"""Modelos de leitura das sessões (snapshots para reporte)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - usado em runtime nos dataclasses
from typing import Any

from fsm.states import SessionState


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Fotografia de uma sessão registrada.

    Atributos:
        session_id: ID da sessão
        state: Estado do ciclo de vida
        connection_state: Estado reportado pelo adapter (None se indisponível)
        created_at: Criação da sessão (UTC)
        last_activity_at: Último evento recebido do adapter
        messages_sent: Respostas entregues
        credential_retries: Desafios de credencial na encarnação atual
        status_query_failed: Consulta ao adapter falhou ou estourou o timeout
    """

    session_id: str
    state: SessionState
    connection_state: str | None
    created_at: datetime
    last_activity_at: datetime
    messages_sent: int
    credential_retries: int
    status_query_failed: bool = False

    @property
    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    def to_dict(self) -> dict[str, Any]:
        """Serializa para a superfície de reporte."""
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "connection_state": self.connection_state,
            "created_at": self.created_at.isoformat(),
            "last_activity_at": self.last_activity_at.isoformat(),
            "messages_sent": self.messages_sent,
            "credential_retries": self.credential_retries,
            "status_query_failed": self.status_query_failed,
        }
