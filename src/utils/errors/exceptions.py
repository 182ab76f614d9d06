"""Exceções de domínio do gateway de sessões WhatsApp."""

from __future__ import annotations


class GatewayError(RuntimeError):
    """Base para erros do gateway que chegam ao chamador."""


class AdapterInitError(GatewayError):
    """Adapter não pôde ser construído/inicializado (fatal-init, sem retry)."""

    def __init__(self, session_id: str, reason: str) -> None:
        super().__init__(f"Falha ao inicializar adapter da sessão {session_id}: {reason}")
        self.session_id = session_id
        self.reason = reason


class CapacityExceededError(GatewayError):
    """Limite de sessões simultâneas atingido."""

    def __init__(self, max_sessions: int) -> None:
        super().__init__(f"Limite máximo de sessões atingido ({max_sessions})")
        self.max_sessions = max_sessions


class NotReadyError(GatewayError):
    """Nenhuma sessão em estado READY para entrega direta."""


class SessionNotFoundError(GatewayError):
    """Sessão não registrada."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Sessão {session_id} não encontrada")
        self.session_id = session_id
