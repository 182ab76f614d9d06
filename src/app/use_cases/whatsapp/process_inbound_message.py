"""Use case: processar uma mensagem recebida numa sessão.

Filtros (o primeiro que casar descarta a mensagem):
1. sessão não READY
2. enviada pela própria conta
3. mensagem de grupo
4. mais antiga que a janela de staleness
5. corpo vazio após trim

Mensagens aceitas: contato marcado como ativo, nome resolvido, resposta
gerada, digitação simulada e entrega pelo adapter da encarnação corrente.
Qualquer falha ao produzir ou entregar a resposta dispara um único pedido
de desculpas; falha desse envio é apenas registrada.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from app.observability import correlation_scope, record_latency, record_reply_outcome
from config.logging import hash_contact_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from ai.services.reply_engine import ReplyEngine
    from app.infra.stores.memory_stores import ActiveChatSet
    from app.protocols.adapter import InboundMessage
    from app.protocols.notifier import NotifierProtocol
    from app.protocols.session_handle import ReplySessionProtocol
    from app.services.typing_simulator import TypingSimulator
    from app.sessions.lifetime import DeliveryLease
    from config.settings.whatsapp import WhatsAppSettings

logger = logging.getLogger(__name__)


class SkipReason(StrEnum):
    NOT_READY = "not_ready"
    FROM_SELF = "from_self"
    GROUP_MESSAGE = "group_message"
    STALE_MESSAGE = "stale_message"
    EMPTY_BODY = "empty_body"
    NO_REPLY = "no_reply"
    SESSION_STOPPED = "session_stopped"


@dataclass(frozen=True, slots=True)
class InboundProcessingResult:
    """Resultado do processamento de uma mensagem."""

    session_id: str
    message_id: str
    replied: bool = False
    apology_sent: bool = False
    skipped_reason: SkipReason | None = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProcessInboundMessageUseCase:
    """Filtra, responde e entrega mensagens de uma sessão.

    Uma instância é compartilhada por todas as sessões; o estado por sessão
    vem do ReplySessionProtocol passado em execute().
    """

    def __init__(
        self,
        *,
        reply_engine: ReplyEngine,
        typing_simulator: TypingSimulator,
        active_chats: ActiveChatSet,
        notifier: NotifierProtocol,
        settings: WhatsAppSettings,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._reply_engine = reply_engine
        self._typing = typing_simulator
        self._active_chats = active_chats
        self._notifier = notifier
        self._settings = settings
        self._now = now

    def _skip_reason(
        self,
        lease: DeliveryLease | None,
        message: InboundMessage,
    ) -> SkipReason | None:
        if lease is None or not lease.active:
            return SkipReason.NOT_READY
        if message.from_self:
            return SkipReason.FROM_SELF
        if message.is_group:
            return SkipReason.GROUP_MESSAGE
        cutoff = self._now() - timedelta(seconds=self._settings.staleness_window_seconds)
        if message.timestamp < cutoff:
            return SkipReason.STALE_MESSAGE
        if not message.body.strip():
            return SkipReason.EMPTY_BODY
        return None

    async def execute(
        self,
        session: ReplySessionProtocol,
        message: InboundMessage,
    ) -> InboundProcessingResult:
        """Processa a mensagem. Nunca levanta exceção exceto cancelamento."""
        lease = session.delivery_lease()
        reason = self._skip_reason(lease, message)
        if reason is not None:
            logger.debug(
                "inbound_skipped",
                extra={"session_id": session.session_id, "reason": reason.value},
            )
            return InboundProcessingResult(
                session_id=session.session_id,
                message_id=message.message_id,
                skipped_reason=reason,
            )

        with correlation_scope(message.message_id or None):
            return await self._respond(session, lease, message)

    async def _respond(
        self,
        session: ReplySessionProtocol,
        lease: DeliveryLease,
        message: InboundMessage,
    ) -> InboundProcessingResult:
        contact_id = message.sender_id
        body = message.body.strip()
        started = time.perf_counter()
        result = InboundProcessingResult(session_id=session.session_id, message_id=message.message_id)

        self._active_chats.add(contact_id)
        display_name = await self._resolve_display_name(lease, message)

        try:
            reply = await self._reply_engine.generate_reply(body, contact_id, display_name)
            if reply is None:
                return replace(result, skipped_reason=SkipReason.NO_REPLY)
            if not lease.active:
                return replace(result, skipped_reason=SkipReason.SESSION_STOPPED)

            await self._typing.simulate(lease.adapter, contact_id, reply)
            if not lease.active:
                return replace(result, skipped_reason=SkipReason.SESSION_STOPPED)

            await lease.adapter.send_text(contact_id, reply)
        except Exception as exc:
            logger.warning(
                "reply_delivery_failed",
                extra={
                    "session_id": session.session_id,
                    "contact": hash_contact_id(contact_id),
                    "error_type": type(exc).__name__,
                },
            )
            apology_sent = await self._send_apology(lease, contact_id)
            return InboundProcessingResult(
                session_id=session.session_id,
                message_id=message.message_id,
                apology_sent=apology_sent,
            )

        session.record_message_sent()
        self._notifier.emit(
            "message_reply",
            {
                "session_id": session.session_id,
                "contact": display_name or contact_id,
                "original_message": body,
                "reply": reply,
                "timestamp": self._now().isoformat(),
            },
        )
        latency_ms = (time.perf_counter() - started) * 1000
        record_latency("pipeline", "process_message", latency_ms)
        logger.info(
            "reply_delivered",
            extra={
                "session_id": session.session_id,
                "contact": hash_contact_id(contact_id),
                "latency_ms": round(latency_ms, 2),
            },
        )
        return InboundProcessingResult(
            session_id=session.session_id,
            message_id=message.message_id,
            replied=True,
        )

    async def _resolve_display_name(
        self,
        lease: DeliveryLease,
        message: InboundMessage,
    ) -> str:
        """Nome do evento, depois o do adapter, por fim o próprio contato."""
        if message.sender_display_name:
            return message.sender_display_name
        try:
            name = await lease.adapter.get_contact_display_name(message.sender_id)
        except Exception as exc:
            logger.debug(
                "contact_name_lookup_failed",
                extra={"error_type": type(exc).__name__},
            )
            name = None
        return name or message.sender_id

    async def _send_apology(self, lease: DeliveryLease, contact_id: str) -> bool:
        if not lease.active:
            return False
        try:
            await lease.adapter.send_text(contact_id, self._settings.apology_message)
        except Exception as exc:
            logger.error(
                "apology_delivery_failed",
                extra={
                    "session_id": lease.session_id,
                    "contact": hash_contact_id(contact_id),
                    "error_type": type(exc).__name__,
                },
            )
            return False
        record_reply_outcome("apology")
        return True

