"""Contrato mínimo da sessão visto pelo pipeline de mensagens."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.sessions.lifetime import DeliveryLease


class ReplySessionProtocol(Protocol):
    """Sessão que recebe mensagens e entrega respostas."""

    @property
    def session_id(self) -> str: ...

    def delivery_lease(self) -> DeliveryLease | None:
        """Adapter e token correntes, ou None se a sessão não está READY."""
        ...

    def record_message_sent(self) -> None: ...
