"""Motor de respostas automáticas.

Fluxo de uma mensagem:
1. Rate limit por contato (negado: sem resposta, sem fallback)
2. Comandos de chat (/help, /clear, /status), sem turno no histórico
3. Detecção de idioma
4. Prompt com persona, histórico recente e instruções contextuais
5. Completion (Gemini); falha vira fallback do idioma
6. Sanitização e registro do turno (fallbacks incluídos)
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from ai.models.conversation import ConversationTurn
from ai.prompts.reply_prompt import build_reply_prompt
from ai.rules.commands import (
    CLEAR_CONFIRMATION,
    ChatCommand,
    help_message,
    parse_command,
    status_message,
)
from ai.rules.fallbacks import fallback_reply
from ai.rules.language_detection import Language, detect_language
from ai.utils.sanitizer import sanitize_reply
from app.observability import get_correlation_id, record_latency, record_reply_outcome
from config.logging import hash_contact_id, log_fallback

if TYPE_CHECKING:
    from collections.abc import Callable

    from ai.config.settings import AISettings
    from ai.core.client import CompletionClientProtocol
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.rate_limiter import RateLimiterProtocol

logger = logging.getLogger(__name__)


class ReplySource(StrEnum):
    GENERATED = "generated"
    FALLBACK = "fallback"
    COMMAND = "command"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True, slots=True)
class ReplyOutcome:
    """Resultado detalhado de uma tentativa de resposta."""

    text: str | None
    source: ReplySource
    language: Language | None = None


@dataclass(frozen=True, slots=True)
class SweepResult:
    conversations_removed: int
    rate_limits_removed: int


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ReplyEngine:
    """Gera respostas por contato com memória, cota e fallback.

    Args:
        client: Cliente de completion (Gemini ou mock)
        conversation_store: Histórico compartilhado por contato
        rate_limiter: Cota de respostas por contato
        bot_name: Nome da persona nos prompts e na ajuda
        ai_settings: Limites de resposta e contexto
        retention_seconds: Idade máxima do último turno antes do expurgo
        sweep_interval_seconds: Intervalo da limpeza periódica
        now: Relógio UTC (injetável em testes)
    """

    def __init__(
        self,
        client: CompletionClientProtocol,
        conversation_store: ConversationStoreProtocol,
        rate_limiter: RateLimiterProtocol,
        *,
        bot_name: str = "WhatsApp Assistant",
        ai_settings: AISettings | None = None,
        retention_seconds: float = 24 * 60 * 60,
        sweep_interval_seconds: float = 60 * 60,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        from ai.config.settings import get_ai_settings

        self._client = client
        self._store = conversation_store
        self._rate_limiter = rate_limiter
        self._bot_name = bot_name
        self._settings = ai_settings or get_ai_settings()
        self._retention = timedelta(seconds=retention_seconds)
        self._sweep_interval = sweep_interval_seconds
        self._now = now
        self._last_sweep_at: datetime | None = None

    async def generate_reply(
        self,
        text: str,
        contact_id: str,
        display_name: str | None = None,
    ) -> str | None:
        """Retorna o texto a enviar, ou None se o contato está limitado."""
        outcome = await self.generate(text, contact_id, display_name)
        return outcome.text

    async def generate(
        self,
        text: str,
        contact_id: str,
        display_name: str | None = None,
    ) -> ReplyOutcome:
        """Executa o fluxo completo e retorna o resultado detalhado."""
        correlation_id = get_correlation_id()
        contact_hash = hash_contact_id(contact_id)

        if not self._rate_limiter.try_acquire(contact_id):
            logger.info(
                "reply_rate_limited",
                extra={"contact": contact_hash, "correlation_id": correlation_id},
            )
            record_reply_outcome(ReplySource.RATE_LIMITED, correlation_id=correlation_id)
            return ReplyOutcome(text=None, source=ReplySource.RATE_LIMITED)

        language = detect_language(text)

        command = parse_command(text)
        if command is not None:
            reply = self._run_command(command, contact_id, language)
            logger.info(
                "reply_command",
                extra={"contact": contact_hash, "command": command.value},
            )
            record_reply_outcome(ReplySource.COMMAND, language, correlation_id)
            return ReplyOutcome(text=reply, source=ReplySource.COMMAND, language=language)

        history = self._store.get_history(contact_id)
        prompt = build_reply_prompt(
            text,
            language,
            history,
            bot_name=self._bot_name,
            display_name=display_name,
            context_turns=self._settings.reply.context_turns,
        )

        started = time.perf_counter()
        raw = await self._safe_complete(prompt, contact_hash)
        elapsed_ms = (time.perf_counter() - started) * 1000
        record_latency("reply_engine", "complete", elapsed_ms, correlation_id)

        reply = sanitize_reply(raw, self._settings.reply.max_length) if raw else ""
        if reply:
            source = ReplySource.GENERATED
        else:
            reply = fallback_reply(language)
            source = ReplySource.FALLBACK
            log_fallback(
                logger,
                "reply_engine",
                reason="completion_unavailable",
                elapsed_ms=elapsed_ms,
                language=language,
            )

        self._store.append_turn(
            contact_id,
            ConversationTurn(
                user_message=text,
                reply=reply,
                language=language.value,
                timestamp=self._now(),
            ),
        )
        logger.info(
            "reply_generated",
            extra={
                "contact": contact_hash,
                "language": language.value,
                "source": source.value,
                "reply_length": len(reply),
            },
        )
        record_reply_outcome(source, language, correlation_id)
        return ReplyOutcome(text=reply, source=source, language=language)

    async def _safe_complete(self, prompt: str, contact_hash: str) -> str | None:
        try:
            return await self._client.complete(prompt)
        except Exception as exc:
            logger.warning(
                "completion_client_error",
                extra={"contact": contact_hash, "error_type": type(exc).__name__},
            )
            return None

    def _run_command(self, command: ChatCommand, contact_id: str, language: Language) -> str:
        if command is ChatCommand.HELP:
            return help_message(language, self._bot_name)
        if command is ChatCommand.CLEAR:
            self.clear_history(contact_id)
            return CLEAR_CONFIRMATION
        return status_message(self._store.conversation_count(), self._store.total_turns())

    def clear_history(self, contact_id: str) -> bool:
        """Apaga o histórico do contato. True se havia histórico."""
        removed = self._store.clear(contact_id)
        logger.info(
            "conversation_cleared",
            extra={"contact": hash_contact_id(contact_id), "removed": removed},
        )
        return removed

    def sweep(self) -> SweepResult:
        """Expurga conversas antigas e entradas de rate limit vencidas."""
        now = self._now()
        result = SweepResult(
            conversations_removed=self._store.purge_older_than(now - self._retention),
            rate_limits_removed=self._rate_limiter.purge_stale(),
        )
        self._last_sweep_at = now
        if result.conversations_removed or result.rate_limits_removed:
            logger.info(
                "conversation_sweep",
                extra={
                    "conversations_removed": result.conversations_removed,
                    "rate_limits_removed": result.rate_limits_removed,
                },
            )
        return result

    async def run_periodic_sweep(self) -> None:
        """Executa sweep() a cada intervalo até ser cancelada."""
        while True:
            await asyncio.sleep(self._sweep_interval)
            try:
                self.sweep()
            except Exception:
                logger.exception("conversation_sweep_failed")

    def get_stats(self) -> dict[str, Any]:
        """Estatísticas agregadas das conversas."""
        return {
            "active_conversations": self._store.conversation_count(),
            "total_messages": self._store.total_turns(),
            "rate_limited_users": self._rate_limiter.tracked_count(),
            "languages": self._store.language_counts(),
            "last_sweep_at": self._last_sweep_at.isoformat() if self._last_sweep_at else None,
        }
