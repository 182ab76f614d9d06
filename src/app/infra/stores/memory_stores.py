"""Stores em memória, compartilhados por todas as sessões do processo.

Sem persistência entre reinícios. Todo read-modify-write de uma chave
acontece sob o lock da chave (KeyedLock), de modo que sessões diferentes
atendendo o mesmo contato não corrompem histórico nem cota.
"""

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from typing import TYPE_CHECKING

from app.protocols.conversation_store import ConversationStoreProtocol
from app.protocols.rate_limiter import RateLimiterProtocol
from utils.locks import KeyedLock

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from ai.models.conversation import ConversationTurn


class MemoryConversationStore(ConversationStoreProtocol):
    """Histórico de conversa em memória com limite FIFO por contato."""

    def __init__(self, history_limit: int = 10) -> None:
        if history_limit < 1:
            raise ValueError("history_limit deve ser >= 1")
        self._history_limit = history_limit
        self._histories: dict[str, deque[ConversationTurn]] = {}
        self._locks = KeyedLock()

    @property
    def history_limit(self) -> int:
        return self._history_limit

    def get_history(self, contact_id: str) -> list[ConversationTurn]:
        with self._locks.hold(contact_id):
            return list(self._histories.get(contact_id, ()))

    def append_turn(self, contact_id: str, turn: ConversationTurn) -> None:
        with self._locks.hold(contact_id):
            history = self._histories.get(contact_id)
            if history is None:
                history = deque(maxlen=self._history_limit)
                self._histories[contact_id] = history
            history.append(turn)

    def clear(self, contact_id: str) -> bool:
        with self._locks.hold(contact_id):
            removed = self._histories.pop(contact_id, None) is not None
        self._locks.discard(contact_id)
        return removed

    def purge_older_than(self, cutoff: datetime) -> int:
        removed = 0
        for contact_id in list(self._histories):
            with self._locks.hold(contact_id):
                history = self._histories.get(contact_id)
                if history is None:
                    continue
                if not history or history[-1].timestamp < cutoff:
                    del self._histories[contact_id]
                    removed += 1
            self._locks.discard(contact_id)
        return removed

    def conversation_count(self) -> int:
        return len(self._histories)

    def total_turns(self) -> int:
        return sum(len(history) for history in list(self._histories.values()))

    def language_counts(self) -> dict[str, int]:
        counts: Counter[str] = Counter()
        for history in list(self._histories.values()):
            counts.update(turn.language for turn in list(history))
        return dict(counts)


class MemoryRateLimiter(RateLimiterProtocol):
    """Rate limit de janela fixa por contato.

    Janela encerrada: contagem zera e nova janela começa. Contagem >= máximo:
    nega sem consumir. Caso contrário: incrementa e permite.

    Args:
        max_per_window: Respostas permitidas por janela
        window_seconds: Duração da janela
        stale_grace_seconds: Folga após o fim da janela antes do expurgo
        clock: Relógio monotônico em segundos (injetável em testes)
    """

    def __init__(
        self,
        max_per_window: int = 2,
        window_seconds: float = 60.0,
        stale_grace_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max = max_per_window
        self._window = window_seconds
        self._grace = stale_grace_seconds
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}  # key -> (count, reset_at)
        self._locks = KeyedLock()

    def try_acquire(self, key: str) -> bool:
        with self._locks.hold(key):
            now = self._clock()
            count, reset_at = self._windows.get(key, (0, now))
            if now >= reset_at:
                count, reset_at = 0, now + self._window
            if count >= self._max:
                self._windows[key] = (count, reset_at)
                return False
            self._windows[key] = (count + 1, reset_at)
            return True

    def purge_stale(self) -> int:
        removed = 0
        now = self._clock()
        for key in list(self._windows):
            with self._locks.hold(key):
                entry = self._windows.get(key)
                if entry is not None and now > entry[1] + self._grace:
                    del self._windows[key]
                    removed += 1
            self._locks.discard(key)
        return removed

    def tracked_count(self) -> int:
        return len(self._windows)

    def remaining(self, key: str) -> int:
        """Cota restante na janela atual (apenas leitura)."""
        with self._locks.hold(key):
            entry = self._windows.get(key)
            if entry is None or self._clock() >= entry[1]:
                return self._max
            return max(0, self._max - entry[0])


class ActiveChatSet:
    """Contatos que receberam resposta neste processo (apenas para reporte)."""

    def __init__(self, soft_cap: int = 50) -> None:
        self._soft_cap = soft_cap
        self._contacts: set[str] = set()
        self._lock = threading.Lock()

    def add(self, contact_id: str) -> None:
        with self._lock:
            self._contacts.add(contact_id)

    def __contains__(self, contact_id: object) -> bool:
        with self._lock:
            return contact_id in self._contacts

    def __len__(self) -> int:
        with self._lock:
            return len(self._contacts)

    def enforce_soft_cap(self) -> bool:
        """Zera o conjunto se passou do limite. True se zerou."""
        with self._lock:
            if len(self._contacts) > self._soft_cap:
                self._contacts.clear()
                return True
            return False
