"""Factories de dependências: criação e wiring das implementações concretas.

Centraliza a montagem do runtime do gateway: stores em memória, motor de
respostas, pipeline de mensagens, registry de sessões e fachada de serviço.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ai.core.mock_client import MockCompletionClient
from ai.services.reply_engine import ReplyEngine
from app.infra.ai import GeminiClient
from app.infra.notifications import LoggingNotifier
from app.infra.stores import ActiveChatSet, MemoryConversationStore, MemoryRateLimiter
from app.services.gateway_service import GatewayService
from app.services.typing_simulator import TypingSimulator
from app.sessions.registry import SessionRegistry
from app.use_cases.whatsapp.process_inbound_message import ProcessInboundMessageUseCase
from config.settings import (
    get_conversation_settings,
    get_gemini_settings,
    get_rate_limit_settings,
    get_session_settings,
    get_whatsapp_settings,
)

if TYPE_CHECKING:
    from ai.core.client import CompletionClientProtocol
    from app.protocols.adapter import AdapterFactory
    from app.protocols.notifier import NotifierProtocol
    from config.settings import (
        ConversationSettings,
        GeminiSettings,
        RateLimitSettings,
        SessionSettings,
        WhatsAppSettings,
    )

logger = logging.getLogger(__name__)

ADAPTER_FACTORY_ENV = "WHATSAPP_ADAPTER_FACTORY"


@dataclass
class GatewayRuntime:
    """Objetos montados pelo composition root."""

    registry: SessionRegistry
    service: GatewayService
    reply_engine: ReplyEngine
    pipeline: ProcessInboundMessageUseCase
    completion_client: CompletionClientProtocol
    active_chats: ActiveChatSet
    _sweep_task: asyncio.Task[None] | None = field(default=None, repr=False)

    def start_background(self) -> None:
        """Inicia a limpeza periódica de conversas (idempotente)."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(
                self.reply_engine.run_periodic_sweep(), name="conversation_sweep"
            )

    async def aclose(self) -> None:
        """Encerra sessões, a limpeza periódica e o cliente HTTP."""
        await self.registry.shutdown()
        if self._sweep_task is not None and not self._sweep_task.done():
            self._sweep_task.cancel()
            await asyncio.wait({self._sweep_task})
        self._sweep_task = None
        aclose = getattr(self.completion_client, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("gateway_runtime_closed")


def create_completion_client(gemini: GeminiSettings | None = None) -> CompletionClientProtocol:
    """Cria cliente de completion conforme GEMINI_ENABLED.

    Desabilitado: cliente mock sem resposta (o motor usa os fallbacks).
    """
    gemini = gemini or get_gemini_settings()
    if not gemini.enabled:
        logger.info("completion_client_created", extra={"backend": "disabled"})
        return MockCompletionClient(reply=None)
    logger.info("completion_client_created", extra={"backend": "gemini", "model": gemini.model})
    return GeminiClient(gemini=gemini)


def load_adapter_factory(path: str | None = None) -> AdapterFactory:
    """Importa a factory de adapter a partir de "pacote.modulo:callable".

    Raises:
        ValueError: Caminho ausente ou mal formado
    """
    target = path or os.getenv(ADAPTER_FACTORY_ENV, "")
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        msg = f"{ADAPTER_FACTORY_ENV} inválido: {target!r} (esperado 'modulo:callable')"
        raise ValueError(msg)
    module = importlib.import_module(module_name)
    factory = getattr(module, attr)
    logger.info("adapter_factory_loaded", extra={"factory": target})
    return factory


def build_runtime(
    adapter_factory: AdapterFactory,
    *,
    completion_client: CompletionClientProtocol | None = None,
    notifier: NotifierProtocol | None = None,
    session_settings: SessionSettings | None = None,
    whatsapp_settings: WhatsAppSettings | None = None,
    rate_limit_settings: RateLimitSettings | None = None,
    conversation_settings: ConversationSettings | None = None,
    typing_simulator: TypingSimulator | None = None,
) -> GatewayRuntime:
    """Monta o runtime completo do gateway.

    Todos os parâmetros além da factory de adapter são opcionais e caem
    nas settings de ambiente; testes injetam versões rápidas.
    """
    session_settings = session_settings or get_session_settings()
    whatsapp_settings = whatsapp_settings or get_whatsapp_settings()
    rate_limit_settings = rate_limit_settings or get_rate_limit_settings()
    conversation_settings = conversation_settings or get_conversation_settings()
    notifier = notifier or LoggingNotifier()
    client = completion_client or create_completion_client()

    conversation_store = MemoryConversationStore(
        history_limit=conversation_settings.history_limit,
    )
    rate_limiter = MemoryRateLimiter(
        max_per_window=rate_limit_settings.max_replies,
        window_seconds=rate_limit_settings.window_seconds,
        stale_grace_seconds=rate_limit_settings.stale_grace_seconds,
    )
    active_chats = ActiveChatSet(soft_cap=whatsapp_settings.active_chats_soft_cap)

    reply_engine = ReplyEngine(
        client,
        conversation_store,
        rate_limiter,
        bot_name=get_gemini_settings().bot_name,
        retention_seconds=conversation_settings.retention_seconds,
        sweep_interval_seconds=conversation_settings.sweep_interval_seconds,
    )
    pipeline = ProcessInboundMessageUseCase(
        reply_engine=reply_engine,
        typing_simulator=typing_simulator or TypingSimulator(whatsapp_settings),
        active_chats=active_chats,
        notifier=notifier,
        settings=whatsapp_settings,
    )
    registry = SessionRegistry(
        adapter_factory=adapter_factory,
        pipeline=pipeline,
        notifier=notifier,
        active_chats=active_chats,
        settings=session_settings,
    )
    service = GatewayService(
        registry,
        reply_engine,
        default_session_id=session_settings.default_session_id,
        default_country_code=whatsapp_settings.default_country_code,
    )
    logger.info(
        "gateway_runtime_built",
        extra={
            "max_sessions": session_settings.max_sessions,
            "history_limit": conversation_settings.history_limit,
            "rate_limit": rate_limit_settings.max_replies,
        },
    )
    return GatewayRuntime(
        registry=registry,
        service=service,
        reply_engine=reply_engine,
        pipeline=pipeline,
        completion_client=client,
        active_chats=active_chats,
    )
