"""Sessão gerenciada: um adapter WhatsApp Web e seu ciclo de vida.

Eventos do adapter chegam de qualquer thread pelo sink e são postados no
event loop da sessão (call_soon_threadsafe). Eventos de ciclo de vida vão
para uma fila consumida por um único worker, que aplica as transições da
FSM sob o lock de ciclo de vida. Mensagens vão para outra fila, processadas
uma por vez e na ordem de chegada.

Cada adapter criado é uma encarnação (epoch) com seu LifetimeToken.
Eventos de encarnações anteriores são descartados e nenhuma resposta é
entregue depois que o token da encarnação é cancelado.

Política de reinício:
    destruir adapter (idempotente) -> espera de acomodação -> recriar
    adapter -> PENDING_CREDENTIAL com contador de credencial zerado.
O lock nunca é mantido durante as esperas.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.observability import record_session_transition
from app.protocols.adapter import AdapterEvent, AdapterEventKind, InboundMessage
from app.sessions.lifetime import DeliveryLease, LifetimeToken
from app.sessions.models import SessionSnapshot
from fsm.manager import create_fsm
from fsm.states import SessionState
from utils.errors import AdapterInitError, GatewayError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.infra.stores.memory_stores import ActiveChatSet
    from app.protocols.adapter import AdapterFactory, WhatsAppAdapterProtocol
    from app.protocols.notifier import NotifierProtocol
    from app.use_cases.whatsapp.process_inbound_message import ProcessInboundMessageUseCase
    from config.settings.base.session import SessionSettings
    from fsm.types import TransitionResult

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ManagedSession:
    """Sessão com FSM de ciclo de vida, workers e reinício automático.

    Args:
        session_id: ID opaco da sessão
        adapter_factory: Cria um adapter novo ligado a um sink
        pipeline: Use case de mensagens recebidas (compartilhado)
        notifier: Destino dos eventos para a UI
        active_chats: Conjunto de contatos ativos (compartilhado)
        settings: Limites de credencial, atrasos e intervalos
        can_recreate: Consultado antes de recriar o adapter; False leva a FAILED
        on_failed: Chamado quando a sessão entra em FAILED
    """

    def __init__(
        self,
        session_id: str,
        *,
        adapter_factory: AdapterFactory,
        pipeline: ProcessInboundMessageUseCase,
        notifier: NotifierProtocol,
        active_chats: ActiveChatSet,
        settings: SessionSettings,
        can_recreate: Callable[[str], bool] | None = None,
        on_failed: Callable[[ManagedSession], None] | None = None,
    ) -> None:
        self._session_id = session_id
        self._adapter_factory = adapter_factory
        self._pipeline = pipeline
        self._notifier = notifier
        self._active_chats = active_chats
        self._settings = settings
        self._can_recreate = can_recreate
        self._on_failed = on_failed

        self._fsm = create_fsm(session_id)
        self._lock = asyncio.Lock()
        self._credential_retries = 0
        self._messages_sent = 0
        self._created_at = _utcnow()
        self._started_monotonic = time.monotonic()
        self._last_activity_at = self._created_at

        self._epoch = 0
        self._adapter: WhatsAppAdapterProtocol | None = None
        self._token: LifetimeToken | None = None
        self._stopped = False

        self._loop: asyncio.AbstractEventLoop | None = None
        self._lifecycle_queue: asyncio.Queue[tuple[int, AdapterEvent]] = asyncio.Queue()
        self._message_queue: asyncio.Queue[tuple[int, InboundMessage]] = asyncio.Queue()
        self._lifecycle_worker: asyncio.Task[None] | None = None
        self._message_worker: asyncio.Task[None] | None = None
        self._restart_task: asyncio.Task[None] | None = None
        self._status_task: asyncio.Task[None] | None = None

    # ───────────────────────── leitura ─────────────────────────

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> SessionState:
        return self._fsm.current_state

    @property
    def is_ready(self) -> bool:
        return self._fsm.current_state == SessionState.READY

    @property
    def is_failed(self) -> bool:
        return self._fsm.is_terminal

    @property
    def credential_retries(self) -> int:
        return self._credential_retries

    @property
    def messages_sent(self) -> int:
        return self._messages_sent

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started_monotonic

    @property
    def restart_pending(self) -> bool:
        return self._restart_task is not None and not self._restart_task.done()

    @property
    def transition_history(self) -> list[dict[str, Any]]:
        return self._fsm.get_history_summary()

    def delivery_lease(self) -> DeliveryLease | None:
        """Adapter e token correntes, apenas quando READY."""
        adapter, token = self._adapter, self._token
        if not self.is_ready or adapter is None or token is None or token.cancelled:
            return None
        return DeliveryLease(session_id=self._session_id, adapter=adapter, token=token)

    def record_message_sent(self) -> None:
        self._messages_sent += 1

    def get_status(self) -> dict[str, Any]:
        """Status no formato da superfície de reporte."""
        return {
            "session_id": self._session_id,
            "state": self.state.value,
            "ready": self.is_ready,
            "messages_sent": self._messages_sent,
            "active_chats": len(self._active_chats),
            "credential_retries": self._credential_retries,
            "uptime_seconds": round(self.uptime_seconds, 3),
        }

    async def snapshot(self, timeout: float) -> SessionSnapshot:
        """Snapshot com consulta ao adapter limitada por timeout."""
        connection_state: str | None = None
        query_failed = False
        adapter = self._adapter
        if adapter is not None:
            try:
                connection_state = await asyncio.wait_for(
                    adapter.get_connection_state(), timeout=timeout
                )
            except TimeoutError:
                query_failed = True
                logger.warning(
                    "session_status_query_timeout",
                    extra={"session_id": self._session_id, "timeout": timeout},
                )
            except Exception as exc:
                query_failed = True
                logger.warning(
                    "session_status_query_failed",
                    extra={"session_id": self._session_id, "error_type": type(exc).__name__},
                )
        return SessionSnapshot(
            session_id=self._session_id,
            state=self.state,
            connection_state=connection_state,
            created_at=self._created_at,
            last_activity_at=self._last_activity_at,
            messages_sent=self._messages_sent,
            credential_retries=self._credential_retries,
            status_query_failed=query_failed,
        )

    # ───────────────────────── comandos ─────────────────────────

    async def start(self) -> None:
        """Cria o adapter e inicia os workers.

        Raises:
            GatewayError: Sessão em FAILED (exige nova criação)
            AdapterInitError: Falha ao construir/inicializar o adapter
        """
        if self.is_failed:
            raise GatewayError(f"Sessão {self._session_id} em FAILED; crie uma nova")

        self._loop = asyncio.get_running_loop()
        self._stopped = False
        self._ensure_workers()

        async with self._lock:
            if self._adapter is not None:
                return
            if self.state == SessionState.DISCONNECTED:
                self._transition(SessionState.PENDING_CREDENTIAL, "start")
            self._credential_retries = 0
            adapter, epoch = self._install_adapter()

        try:
            await adapter.initialize()
        except Exception as exc:
            await self._abandon_incarnation(adapter, epoch, "init_failed")
            logger.error(
                "adapter_init_failed",
                extra={"session_id": self._session_id, "error_type": type(exc).__name__},
            )
            raise AdapterInitError(self._session_id, str(exc) or type(exc).__name__) from exc

        logger.info("session_started", extra={"session_id": self._session_id, "epoch": epoch})

    async def restart(self, reason: str = "manual_restart") -> None:
        """Reinício gerenciado a partir de qualquer estado não terminal."""
        if self.is_failed:
            raise GatewayError(f"Sessão {self._session_id} em FAILED; crie uma nova")

        self._loop = asyncio.get_running_loop()
        self._stopped = False
        self._ensure_workers()
        await self._cancel_restart()
        self._restart_task = asyncio.create_task(self._run_restart(0.0, reason))
        # wait() em vez de await: stop() concorrente cancela a task, não o chamador
        task = self._restart_task
        await asyncio.wait({task})
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()

    async def stop(self, reason: str = "explicit_stop") -> None:
        """Parada explícita: sem reinício automático até novo start/restart."""
        self._stopped = True
        await self._cancel_restart()
        await self._cancel_message_worker()

        async with self._lock:
            adapter = self._detach_adapter(reason)
            if not self.is_failed and self.state != SessionState.DISCONNECTED:
                self._transition(SessionState.DISCONNECTED, reason)

        await self._destroy_adapter(adapter)
        self._notifier.emit("stopped", {"session_id": self._session_id, "reason": reason})
        logger.info("session_stopped", extra={"session_id": self._session_id, "reason": reason})

    async def close(self) -> None:
        """Para a sessão e encerra todos os workers."""
        await self.stop("closed")
        current = asyncio.current_task()
        for task in (self._lifecycle_worker, self._status_task):
            if task is not None and task is not current and not task.done():
                task.cancel()
                await asyncio.wait({task})
        self._lifecycle_worker = None
        self._status_task = None

    # ───────────────────────── sink e workers ─────────────────────────

    def _make_sink(self, epoch: int) -> Callable[[AdapterEvent], None]:
        loop = self._loop
        if loop is None:
            raise RuntimeError("sessão sem event loop; chame start() antes")

        def sink(event: AdapterEvent) -> None:
            try:
                loop.call_soon_threadsafe(self._enqueue, epoch, event)
            except RuntimeError:
                logger.debug(
                    "adapter_event_after_loop_closed",
                    extra={"session_id": self._session_id, "kind": event.kind.value},
                )

        return sink

    def _enqueue(self, epoch: int, event: AdapterEvent) -> None:
        if epoch != self._epoch:
            logger.debug(
                "stale_adapter_event_dropped",
                extra={"session_id": self._session_id, "kind": event.kind.value, "epoch": epoch},
            )
            return
        self._last_activity_at = _utcnow()
        if event.kind == AdapterEventKind.MESSAGE:
            if event.message is not None:
                self._message_queue.put_nowait((epoch, event.message))
            return
        self._lifecycle_queue.put_nowait((epoch, event))

    def _ensure_workers(self) -> None:
        if self._lifecycle_worker is None or self._lifecycle_worker.done():
            self._lifecycle_worker = asyncio.create_task(
                self._lifecycle_loop(), name=f"lifecycle:{self._session_id}"
            )
        if self._message_worker is None or self._message_worker.done():
            self._message_worker = asyncio.create_task(
                self._message_loop(), name=f"messages:{self._session_id}"
            )

    async def _lifecycle_loop(self) -> None:
        while True:
            epoch, event = await self._lifecycle_queue.get()
            try:
                await self._handle_lifecycle_event(epoch, event)
            except Exception:
                logger.exception(
                    "lifecycle_event_failed",
                    extra={"session_id": self._session_id, "kind": event.kind.value},
                )

    async def _message_loop(self) -> None:
        while True:
            epoch, message = await self._message_queue.get()
            if epoch != self._epoch:
                continue
            try:
                await self._pipeline.execute(self, message)
            except Exception:
                logger.exception("inbound_processing_failed", extra={"session_id": self._session_id})

    # ───────────────────────── ciclo de vida ─────────────────────────

    async def _handle_lifecycle_event(self, epoch: int, event: AdapterEvent) -> None:
        kind = event.kind
        adapter: WhatsAppAdapterProtocol | None = None
        if kind == AdapterEventKind.ADAPTER_ERROR:
            error = str(event.payload.get("error", ""))
            logger.warning(
                "adapter_error",
                extra={"session_id": self._session_id, "error": error[:200]},
            )
            self._notifier.emit("error", {"session_id": self._session_id, "error": error})
            return

        async with self._lock:
            if epoch != self._epoch or self.is_failed:
                return
            if kind == AdapterEventKind.CREDENTIAL_CHALLENGE:
                self._on_credential_challenge(event)
            elif kind == AdapterEventKind.AUTHENTICATED:
                if self._transition(SessionState.AUTHENTICATED, "authenticated").success:
                    self._credential_retries = 0
                    self._notifier.emit("authenticated", {"session_id": self._session_id})
            elif kind == AdapterEventKind.READY:
                if self._transition(SessionState.READY, "ready").success:
                    self._start_status_task()
                    self._notifier.emit("ready", {"session_id": self._session_id})
                    logger.info("session_ready", extra={"session_id": self._session_id})
            elif kind == AdapterEventKind.DISCONNECTED:
                self._on_disconnected(str(event.payload.get("reason", "unknown")))
            elif kind == AdapterEventKind.AUTH_FAILURE:
                adapter = self._fail_locked(str(event.payload.get("reason", "auth_failure")))
            else:
                return

        if kind == AdapterEventKind.AUTH_FAILURE:
            await self._finish_failure(adapter)

    def _on_credential_challenge(self, event: AdapterEvent) -> None:
        # Fora de PENDING_CREDENTIAL só o reinício volta ao estado inicial
        if self.state != SessionState.PENDING_CREDENTIAL:
            logger.info(
                "credential_challenge_ignored",
                extra={"session_id": self._session_id, "state": self.state.value},
            )
            return
        if not self._transition(SessionState.PENDING_CREDENTIAL, "credential_challenge").success:
            return
        self._credential_retries += 1
        self._notifier.emit(
            "qr",
            {
                "session_id": self._session_id,
                "qr": event.payload.get("qr"),
                "attempt": self._credential_retries,
            },
        )
        if self._credential_retries > self._settings.max_credential_retries:
            logger.warning(
                "credential_retries_exhausted",
                extra={"session_id": self._session_id, "retries": self._credential_retries},
            )
            self._enter_disconnected("credential_retries_exhausted")
            self._schedule_restart(0.0, "credential_retries_exhausted")

    def _on_disconnected(self, reason: str) -> None:
        if self.state == SessionState.DISCONNECTED:
            return
        self._enter_disconnected(reason)
        self._notifier.emit("disconnected", {"session_id": self._session_id, "reason": reason})
        logger.warning("session_disconnected", extra={"session_id": self._session_id, "reason": reason})
        self._schedule_restart(self._settings.restart_delay_seconds, "disconnected")

    def _enter_disconnected(self, reason: str) -> None:
        self._transition(SessionState.DISCONNECTED, reason)
        self._stop_status_task()
        if self._token is not None:
            self._token.cancel(reason)

    def _fail_locked(self, reason: str) -> WhatsAppAdapterProtocol | None:
        """Entra em FAILED (com lock). Retorna o adapter a destruir fora do lock."""
        self._transition(SessionState.FAILED, reason)
        adapter = self._detach_adapter(reason)
        self._notifier.emit("auth_failure", {"session_id": self._session_id, "reason": reason})
        logger.error("session_failed", extra={"session_id": self._session_id, "reason": reason})
        return adapter

    async def _finish_failure(self, adapter: WhatsAppAdapterProtocol | None) -> None:
        await self._destroy_adapter(adapter)
        restart = self._restart_task
        if restart is not None and restart is not asyncio.current_task() and not restart.done():
            restart.cancel()
        if self._on_failed is not None:
            self._on_failed(self)

    # ───────────────────────── reinício ─────────────────────────

    def _schedule_restart(self, delay: float, reason: str) -> None:
        if self._stopped or self.is_failed or self.restart_pending:
            return
        self._restart_task = asyncio.create_task(
            self._run_restart(delay, reason), name=f"restart:{self._session_id}"
        )

    async def _run_restart(self, delay: float, reason: str) -> None:
        while True:
            if delay > 0:
                await asyncio.sleep(delay)
            if not await self._restart_once(reason):
                return
            delay = self._settings.restart_delay_seconds
            reason = "restart_retry"

    async def _restart_once(self, reason: str) -> bool:
        """Executa um ciclo de reinício. True se deve tentar de novo."""
        async with self._lock:
            if self._stopped or self.is_failed:
                return False
            old = self._detach_adapter(reason)
            if self.state != SessionState.DISCONNECTED:
                self._transition(SessionState.DISCONNECTED, reason)

        logger.info("session_restarting", extra={"session_id": self._session_id, "reason": reason})
        await self._destroy_adapter(old)
        await asyncio.sleep(self._settings.restart_settle_seconds)

        if self._can_recreate is not None and not self._can_recreate(self._session_id):
            async with self._lock:
                if self.is_failed:
                    return False
                adapter = self._fail_locked("recreate_rejected")
            await self._finish_failure(adapter)
            return False

        async with self._lock:
            if self._stopped or self.is_failed:
                return False
            self._transition(SessionState.PENDING_CREDENTIAL, "restart")
            self._credential_retries = 0
            try:
                adapter, epoch = self._install_adapter()
            except Exception as exc:
                self._transition(SessionState.DISCONNECTED, "restart_failed")
                logger.warning(
                    "adapter_restart_failed",
                    extra={"session_id": self._session_id, "error_type": type(exc).__name__},
                )
                return True

        try:
            await adapter.initialize()
        except Exception as exc:
            logger.warning(
                "adapter_restart_failed",
                extra={"session_id": self._session_id, "error_type": type(exc).__name__},
            )
            async with self._lock:
                if epoch != self._epoch or self._stopped or self.is_failed:
                    return False
                self._detach_adapter("restart_failed")
                self._transition(SessionState.DISCONNECTED, "restart_failed")
            await self._destroy_adapter(adapter)
            return True

        logger.info("session_restarted", extra={"session_id": self._session_id, "epoch": epoch})
        return False

    async def _cancel_restart(self) -> None:
        task = self._restart_task
        self._restart_task = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            await asyncio.wait({task})

    async def _cancel_message_worker(self) -> None:
        task = self._message_worker
        self._message_worker = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            await asyncio.wait({task})
        while not self._message_queue.empty():
            self._message_queue.get_nowait()

    # ───────────────────────── encarnações ─────────────────────────

    def _install_adapter(self) -> tuple[WhatsAppAdapterProtocol, int]:
        """Cria nova encarnação (com lock). Levanta se a factory falhar."""
        self._epoch += 1
        epoch = self._epoch
        adapter = self._adapter_factory(self._session_id, self._make_sink(epoch))
        self._adapter = adapter
        self._token = LifetimeToken(epoch)
        return adapter, epoch

    def _detach_adapter(self, reason: str) -> WhatsAppAdapterProtocol | None:
        """Solta a encarnação corrente (com lock); destruir fica para o chamador."""
        self._stop_status_task()
        if self._token is not None:
            self._token.cancel(reason)
        adapter = self._adapter
        self._adapter = None
        # Eventos atrasados da encarnação soltada passam a ser de epoch antiga
        self._epoch += 1
        return adapter

    async def _abandon_incarnation(
        self,
        adapter: WhatsAppAdapterProtocol,
        epoch: int,
        reason: str,
    ) -> None:
        async with self._lock:
            if epoch == self._epoch:
                self._detach_adapter(reason)
        await self._destroy_adapter(adapter)

    async def _destroy_adapter(self, adapter: WhatsAppAdapterProtocol | None) -> None:
        if adapter is None:
            return
        try:
            await adapter.destroy()
        except Exception as exc:
            logger.warning(
                "adapter_destroy_failed",
                extra={"session_id": self._session_id, "error_type": type(exc).__name__},
            )

    # ───────────────────────── status periódico ─────────────────────────

    def _start_status_task(self) -> None:
        self._stop_status_task()
        self._status_task = asyncio.create_task(
            self._status_loop(), name=f"status:{self._session_id}"
        )

    def _stop_status_task(self) -> None:
        task = self._status_task
        self._status_task = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def _status_loop(self) -> None:
        while True:
            await asyncio.sleep(self._settings.status_interval_seconds)
            if not self.is_ready:
                return
            self._notifier.emit(
                "status",
                {
                    "session_id": self._session_id,
                    "messages_sent": self._messages_sent,
                    "active_chats": len(self._active_chats),
                },
            )
            if self._active_chats.enforce_soft_cap():
                logger.info("active_chats_reset", extra={"session_id": self._session_id})

    # ───────────────────────── FSM ─────────────────────────

    def _transition(self, target: SessionState, trigger: str) -> TransitionResult:
        previous = self._fsm.current_state
        result = self._fsm.transition(target, trigger)
        if result.success:
            record_session_transition(self._session_id, previous.value, target.value, trigger)
        else:
            logger.debug(
                "session_transition_rejected",
                extra={
                    "session_id": self._session_id,
                    "from_state": previous.value,
                    "to_state": target.value,
                    "trigger": trigger,
                    "reason": result.error_reason,
                },
            )
        return result

