"""Locks por chave para stores compartilhados entre sessões.

Cada chave (ex.: contato) tem seu próprio lock; operações em chaves
distintas não se bloqueiam. Seções críticas nunca contêm await.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        # Chamadores entre obter a entrada e soltar o lock
        self.users = 0


class KeyedLock:
    """Exclusão mútua com escopo por chave (thread-safe)."""

    __slots__ = ("_entries", "_guard")

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1
            return entry

    def _checkin(self, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Segura o lock da chave durante o bloco."""
        entry = self._checkout(key)
        try:
            with entry.lock:
                yield
        finally:
            self._checkin(entry)

    def discard(self, key: str) -> None:
        """Remove o lock da chave se ninguém o obteve ou aguarda."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is not None and entry.users == 0:
                del self._entries[key]

    def users(self, key: str) -> int:
        with self._guard:
            entry = self._entries.get(key)
            return 0 if entry is None else entry.users

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
