"""Protocolos do adapter de protocolo WhatsApp Web.

O adapter é opaco: encapsula o cliente de navegador de uma sessão e
publica eventos assíncronos num sink fornecido na construção. O sink pode
ser chamado de qualquer thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Protocol


class AdapterEventKind(StrEnum):
    """Tipos de evento publicados pelo adapter.

    MESSAGE é o único evento canônico de mensagem recebida.
    """

    CREDENTIAL_CHALLENGE = "credential_challenge"
    AUTHENTICATED = "authenticated"
    READY = "ready"
    MESSAGE = "message"
    DISCONNECTED = "disconnected"
    AUTH_FAILURE = "auth_failure"
    ADAPTER_ERROR = "adapter_error"


LIFECYCLE_EVENT_KINDS = frozenset(AdapterEventKind) - {AdapterEventKind.MESSAGE}


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem recebida do WhatsApp.

    Atributos:
        message_id: ID da mensagem no WhatsApp
        sender_id: Contato remetente (ex: 919876543210@c.us)
        body: Texto da mensagem
        timestamp: Momento de envio (UTC; valores sem fuso são tratados como UTC)
        from_self: Enviada pela própria conta
        is_group: Enviada num grupo
        sender_display_name: Nome do remetente, se o evento trouxer
    """

    message_id: str
    sender_id: str
    body: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    from_self: bool = False
    is_group: bool = False
    sender_display_name: str | None = None

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=UTC))


@dataclass(frozen=True, slots=True)
class AdapterEvent:
    """Evento publicado pelo adapter.

    Atributos:
        kind: Tipo do evento
        payload: Dados do evento (ex: {"qr": ...}, {"reason": ...})
        message: Mensagem recebida (apenas em MESSAGE)
    """

    kind: AdapterEventKind
    payload: dict[str, Any] = field(default_factory=dict)
    message: InboundMessage | None = None

    @property
    def is_lifecycle(self) -> bool:
        return self.kind in LIFECYCLE_EVENT_KINDS


class AdapterEventSink(Protocol):
    """Callback thread-safe que recebe os eventos do adapter."""

    def __call__(self, event: AdapterEvent) -> None: ...


class WhatsAppAdapterProtocol(Protocol):
    """Contrato do adapter de uma sessão WhatsApp Web."""

    async def initialize(self) -> None:
        """Inicia o cliente. Levanta exceção se a inicialização falhar."""
        ...

    async def send_text(self, contact_id: str, text: str) -> None: ...

    async def set_composing(self, contact_id: str) -> None: ...

    async def clear_composing(self, contact_id: str) -> None: ...

    async def get_contact_display_name(self, contact_id: str) -> str | None: ...

    async def get_connection_state(self) -> str | None:
        """Estado de conexão reportado pelo cliente (ex: CONNECTED)."""
        ...

    async def destroy(self) -> None:
        """Encerra o cliente. Deve ser idempotente."""
        ...


class AdapterFactory(Protocol):
    """Cria um adapter novo para a sessão, ligado ao sink fornecido."""

    def __call__(self, session_id: str, sink: AdapterEventSink) -> WhatsAppAdapterProtocol: ...
