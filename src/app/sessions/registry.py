"""Registry de sessões ativas.

Mapa session_id -> ManagedSession protegido por asyncio.Lock, com limite
de sessões simultâneas. Sessões em FAILED são removidas do mapa; voltar
a operar exige um novo create().
"""

from __future__ import annotations

import asyncio
import functools
import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from app.sessions.session import ManagedSession
from utils.errors import AdapterInitError, CapacityExceededError, GatewayError

if TYPE_CHECKING:
    from app.infra.stores.memory_stores import ActiveChatSet
    from app.protocols.adapter import AdapterFactory
    from app.protocols.notifier import NotifierProtocol
    from app.sessions.models import SessionSnapshot
    from app.use_cases.whatsapp.process_inbound_message import ProcessInboundMessageUseCase
    from config.settings.base.session import SessionSettings

logger = logging.getLogger(__name__)

SESSION_DIR_PREFIX = "session-"


class SessionRegistry:
    """Cria, consulta e destrói sessões gerenciadas.

    Args:
        adapter_factory: Factory de adapters passada a cada sessão
        pipeline: Use case de mensagens (compartilhado entre sessões)
        notifier: Destino de eventos para a UI
        active_chats: Conjunto de contatos ativos (compartilhado)
        settings: Limite de sessões, timeouts e diretório de sessões
    """

    def __init__(
        self,
        *,
        adapter_factory: AdapterFactory,
        pipeline: ProcessInboundMessageUseCase,
        notifier: NotifierProtocol,
        active_chats: ActiveChatSet,
        settings: SessionSettings,
    ) -> None:
        self._adapter_factory = adapter_factory
        self._pipeline = pipeline
        self._notifier = notifier
        self._active_chats = active_chats
        self._settings = settings
        self._sessions: dict[str, ManagedSession] = {}
        self._lock = asyncio.Lock()
        self._accepting = True
        self._background: set[asyncio.Task[None]] = set()
        self._starting: dict[str, asyncio.Task[ManagedSession]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    @property
    def max_sessions(self) -> int:
        return self._settings.max_sessions

    @property
    def accepting(self) -> bool:
        return self._accepting

    def get(self, session_id: str) -> ManagedSession | None:
        return self._sessions.get(session_id)

    def sessions(self) -> list[ManagedSession]:
        return list(self._sessions.values())

    def first_ready(self) -> ManagedSession | None:
        """Primeira sessão READY, na ordem de criação."""
        for session in self._sessions.values():
            if session.is_ready:
                return session
        return None

    def can_recreate(self, session_id: str) -> bool:
        """Permite recriar o adapter só de sessões ainda registradas."""
        return self._accepting and session_id in self._sessions

    async def create(self, session_id: str) -> ManagedSession:
        """Retorna a sessão existente ou cria e inicia uma nova.

        O lock cobre só a consulta e o registro no mapa; a inicialização do
        adapter roda fora dele. Chamadas concorrentes para o mesmo id
        aguardam a mesma inicialização.

        Raises:
            CapacityExceededError: Limite de sessões atingido
            AdapterInitError: Adapter não pôde ser inicializado
            GatewayError: Registry em shutdown ou sessão removida durante o start
        """
        stale: ManagedSession | None = None
        async with self._lock:
            if not self._accepting:
                raise GatewayError("Registry encerrado; não aceita novas sessões")

            existing = self._sessions.get(session_id)
            starting = self._starting.get(session_id)
            if existing is not None and not existing.is_failed:
                if starting is None:
                    return existing
            else:
                if existing is not None:
                    stale = self._sessions.pop(session_id)
                if len(self._sessions) >= self._settings.max_sessions:
                    logger.warning(
                        "session_capacity_exceeded",
                        extra={
                            "session_id": session_id,
                            "max_sessions": self._settings.max_sessions,
                        },
                    )
                    raise CapacityExceededError(self._settings.max_sessions)

                session = self._build_session(session_id)
                # Registrada antes do start: conta na capacidade e can_recreate a enxerga
                self._sessions[session_id] = session
                starting = asyncio.create_task(
                    self._start_session(session), name=f"start:{session_id}"
                )
                self._starting[session_id] = starting
                starting.add_done_callback(functools.partial(self._forget_start, session_id))

        if stale is not None:
            await stale.close()

        # wait() em vez de await: cancelar um chamador não cancela o start compartilhado
        await asyncio.wait({starting})
        if starting.cancelled():
            raise GatewayError(f"Inicialização da sessão {session_id} cancelada")
        return starting.result()

    async def destroy(self, session_id: str) -> bool:
        """Para e remove a sessão. Nunca levanta; sempre retorna True."""
        async with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is not None:
            try:
                await session.close()
            except Exception as exc:
                logger.warning(
                    "session_close_failed",
                    extra={"session_id": session_id, "error_type": type(exc).__name__},
                )

        await self._remove_session_dir(session_id)
        logger.info(
            "session_destroyed",
            extra={"session_id": session_id, "was_registered": session is not None},
        )
        return True

    async def list_all(self) -> list[SessionSnapshot]:
        """Snapshots de todas as sessões; cada consulta ao adapter tem timeout."""
        sessions = self.sessions()
        timeout = self._settings.status_query_timeout_seconds
        return list(await asyncio.gather(*(s.snapshot(timeout) for s in sessions)))

    async def health_check(self) -> dict[str, Any]:
        snapshots = await self.list_all()
        return {
            "accepting": self._accepting,
            "max_sessions": self._settings.max_sessions,
            "total": len(snapshots),
            "ready": sum(1 for s in snapshots if s.is_ready),
            "status_query_failed": sum(1 for s in snapshots if s.status_query_failed),
            "sessions": [s.to_dict() for s in snapshots],
        }

    async def shutdown(self) -> None:
        """Encerra todas as sessões em paralelo e para de aceitar novas."""
        async with self._lock:
            self._accepting = False
            sessions = list(self._sessions.values())
            self._sessions.clear()
            starting = list(self._starting.values())

        for task in starting:
            task.cancel()

        results = await asyncio.gather(
            *(s.close() for s in sessions),
            return_exceptions=True,
        )
        for session, result in zip(sessions, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "session_close_failed",
                    extra={
                        "session_id": session.session_id,
                        "error_type": type(result).__name__,
                    },
                )

        if starting:
            await asyncio.wait(starting)
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        logger.info("session_registry_shutdown", extra={"closed": len(sessions)})

    # ───────────────────────── internos ─────────────────────────

    async def _start_session(self, session: ManagedSession) -> ManagedSession:
        session_id = session.session_id
        try:
            await session.start()
        except Exception as exc:
            async with self._lock:
                if self._sessions.get(session_id) is session:
                    del self._sessions[session_id]
            await session.close()
            if isinstance(exc, AdapterInitError):
                raise
            raise AdapterInitError(session_id, str(exc) or type(exc).__name__) from exc

        # Removida por destroy/shutdown enquanto inicializava; quem removeu já fechou
        if self._sessions.get(session_id) is not session:
            raise GatewayError(f"Sessão {session_id} removida durante a inicialização")

        logger.info(
            "session_created",
            extra={"session_id": session_id, "total_sessions": len(self._sessions)},
        )
        return session

    def _forget_start(self, session_id: str, task: asyncio.Task[ManagedSession]) -> None:
        if self._starting.get(session_id) is task:
            del self._starting[session_id]
        if not task.cancelled():
            # Marca a exceção como lida quando nenhum chamador sobrou para aguardar
            task.exception()

    def _build_session(self, session_id: str) -> ManagedSession:
        return ManagedSession(
            session_id,
            adapter_factory=self._adapter_factory,
            pipeline=self._pipeline,
            notifier=self._notifier,
            active_chats=self._active_chats,
            settings=self._settings,
            can_recreate=self.can_recreate,
            on_failed=self._on_session_failed,
        )

    def _on_session_failed(self, session: ManagedSession) -> None:
        task = asyncio.create_task(
            self._drop_failed(session), name=f"drop:{session.session_id}"
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _drop_failed(self, session: ManagedSession) -> None:
        async with self._lock:
            if self._sessions.get(session.session_id) is session:
                del self._sessions[session.session_id]
        try:
            await session.close()
        except Exception as exc:
            logger.warning(
                "session_close_failed",
                extra={"session_id": session.session_id, "error_type": type(exc).__name__},
            )
        logger.info("failed_session_dropped", extra={"session_id": session.session_id})

    async def _remove_session_dir(self, session_id: str) -> None:
        name = f"{SESSION_DIR_PREFIX}{session_id}"
        if Path(name).name != name or session_id in {"", ".", ".."}:
            logger.warning("session_dir_rejected", extra={"session_id": session_id})
            return
        path = Path(self._settings.sessions_dir) / name
        try:
            await asyncio.to_thread(shutil.rmtree, path, True)
        except Exception as exc:
            logger.debug(
                "session_dir_cleanup_failed",
                extra={"session_id": session_id, "error_type": type(exc).__name__},
            )
