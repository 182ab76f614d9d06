"""Superfície de reporte e comando do gateway.

Fachada usada pela camada externa (HTTP/UI): status da sessão padrão,
envio direto, start/restart/stop e estatísticas de IA.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from config.logging import hash_contact_id
from config.settings.whatsapp import CONTACT_ID_SUFFIX
from fsm.states import SessionState
from utils.errors import NotReadyError, SessionNotFoundError

if TYPE_CHECKING:
    from ai.services.reply_engine import ReplyEngine
    from app.sessions.registry import SessionRegistry
    from app.sessions.session import ManagedSession

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
LOCAL_NUMBER_LENGTH = 10


def format_contact_id(number: str, default_country_code: str = "91") -> str:
    """Normaliza um número para ID de contato do WhatsApp.

    IDs que já contêm "@" passam direto. Demais: só dígitos, DDI padrão
    para números locais de 10 dígitos e sufixo @c.us.
    """
    if "@" in number:
        return number
    digits = _NON_DIGITS.sub("", number)
    if len(digits) == LOCAL_NUMBER_LENGTH:
        digits = f"{default_country_code}{digits}"
    return f"{digits}{CONTACT_ID_SUFFIX}"


class GatewayService:
    """Comandos e status sobre o registry e o motor de respostas."""

    def __init__(
        self,
        registry: SessionRegistry,
        reply_engine: ReplyEngine,
        *,
        default_session_id: str = "whatsapp-auto-bot",
        default_country_code: str = "91",
    ) -> None:
        self._registry = registry
        self._reply_engine = reply_engine
        self._default_session_id = default_session_id
        self._default_country_code = default_country_code

    @property
    def default_session_id(self) -> str:
        return self._default_session_id

    def get_status(self, session_id: str | None = None) -> dict[str, Any]:
        """Status da sessão (padrão se omitida); sessão ausente conta como parada."""
        sid = session_id or self._default_session_id
        session = self._registry.get(sid)
        if session is None:
            return {
                "session_id": sid,
                "state": None,
                "ready": False,
                "messages_sent": 0,
                "active_chats": 0,
                "credential_retries": 0,
                "uptime_seconds": 0.0,
            }
        return session.get_status()

    async def send_message(self, to: str, text: str, session_id: str | None = None) -> str:
        """Envia texto direto a um número, sem passar pelo motor de respostas.

        Returns:
            ID de contato normalizado usado no envio.

        Raises:
            NotReadyError: Nenhuma sessão READY para entregar
        """
        session = self._ready_session(session_id)
        lease = session.delivery_lease() if session is not None else None
        if session is None or lease is None:
            raise NotReadyError("WhatsApp client não está pronto")

        contact_id = format_contact_id(to, self._default_country_code)
        await lease.adapter.send_text(contact_id, text)
        session.record_message_sent()
        logger.info(
            "direct_message_sent",
            extra={"session_id": session.session_id, "contact": hash_contact_id(contact_id)},
        )
        return contact_id

    async def start(self, session_id: str | None = None) -> ManagedSession:
        """Cria (ou retoma) a sessão; parada explícita volta a operar."""
        sid = session_id or self._default_session_id
        session = await self._registry.create(sid)
        if session.state == SessionState.DISCONNECTED and not session.restart_pending:
            await session.start()
        return session

    async def restart(self, session_id: str | None = None) -> None:
        session = self._require(session_id)
        await session.restart()

    async def stop(self, session_id: str | None = None) -> None:
        session = self._require(session_id)
        await session.stop()

    def clear_history(self, contact_id: str) -> bool:
        return self._reply_engine.clear_history(contact_id)

    def get_ai_stats(self) -> dict[str, Any]:
        return self._reply_engine.get_stats()

    async def health(self) -> dict[str, Any]:
        return await self._registry.health_check()

    def _require(self, session_id: str | None) -> ManagedSession:
        sid = session_id or self._default_session_id
        session = self._registry.get(sid)
        if session is None:
            raise SessionNotFoundError(sid)
        return session

    def _ready_session(self, session_id: str | None) -> ManagedSession | None:
        if session_id is not None:
            return self._registry.get(session_id)
        default = self._registry.get(self._default_session_id)
        if default is not None and default.is_ready:
            return default
        return self._registry.first_ready()
